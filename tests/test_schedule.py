"""
Schedule synchronizer tests.

The scheduler API is replaced with an httpx.MockTransport; each handler
records the paths it was asked for.
"""

import asyncio
from datetime import datetime

import httpx
import pytest

from magnolia.config import FspSettings
from magnolia.schedule import (
    NOT_CONFIGURED,
    ScheduleSynchronizer,
    extract_records,
    normalize_flight,
    partition_flights,
)
from magnolia.schemas import FlightStatus, FlightType


NOW = datetime(2026, 10, 19, 9, 0, 0)

FLIGHTS = [
    {"flightId": "f-past", "date": "2026-10-01T10:00:00", "aircraft": "N123", "status": "complete"},
    {"id": "f-late", "date": "2026-11-02T08:00:00", "flightType": "checkride"},
    {"id": "f-soon", "date": "2026-10-20T14:00:00", "startTime": "14:00", "endTime": "16:00"},
    {"id": "f-nodate", "status": "scheduled"},
]


def make_sync(fsp_settings, clock, handler):
    calls = []

    def record(request: httpx.Request):
        calls.append(request)
        return handler(request)

    sync = ScheduleSynchronizer(fsp_settings, httpx.MockTransport(record), clock)
    return sync, calls


class TestEndpointVariants:

    def test_flight_endpoints(self, fsp_settings):
        sync = ScheduleSynchronizer(fsp_settings)
        paths = [path for path, _ in sync.flight_endpoints("student", "stu-7")]
        assert paths == [
            "/operators/op-1/flights",
            "/api/v1/operators/op-1/flights",
            "/api/operators/op-1/flights",
            "/api/v1/operators/op-1/students/stu-7/flights",
        ]

    def test_first_non_404_wins(self, fsp_settings, clock):
        def handler(request):
            if request.url.path == "/api/v1/operators/op-1/flights":
                return httpx.Response(200, json={"flights": FLIGHTS})
            return httpx.Response(404)

        sync, calls = make_sync(fsp_settings, clock, handler)
        result = asyncio.run(sync.get_student_schedule("stu-7"))

        assert result.success
        assert [r.url.path for r in calls] == [
            "/operators/op-1/flights",
            "/api/v1/operators/op-1/flights",
        ]
        assert calls[1].url.params["student_id"] == "stu-7"
        assert calls[1].headers["x-subscription-key"] == "secret"
        assert len(result.attempted_endpoints) == 2

    def test_attempted_urls_match_requests(self, fsp_settings, clock):
        sync, calls = make_sync(fsp_settings, clock, lambda r: httpx.Response(404))
        result = asyncio.run(sync.get_student_schedule("stu 7&x=1"))

        assert len(result.attempted_endpoints) == len(calls) == 4
        assert result.attempted_endpoints[:3] == [str(r.url) for r in calls[:3]]
        assert calls[0].url.params["student_id"] == "stu 7&x=1"

    def test_auth_failure_stops_walk(self, fsp_settings, clock):
        sync, calls = make_sync(fsp_settings, clock, lambda r: httpx.Response(401))
        result = asyncio.run(sync.get_student_schedule("stu-7"))

        assert not result.success
        assert "401" in result.error
        assert len(calls) == 1
        assert result.upcoming == [] and result.past == []

    def test_all_404_lists_endpoints(self, fsp_settings, clock):
        sync, calls = make_sync(fsp_settings, clock, lambda r: httpx.Response(404))
        result = asyncio.run(sync.get_instructor_schedule("ins-3"))

        assert len(calls) == 4
        assert len(result.attempted_endpoints) == 4
        assert "https://fsp.test/api/v1/operators/op-1/instructors/ins-3/flights" in result.error
        assert calls[0].url.params["instructor_id"] == "ins-3"

    def test_network_error(self, fsp_settings, clock):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        sync, calls = make_sync(fsp_settings, clock, handler)
        result = asyncio.run(sync.get_student_schedule("stu-7"))
        assert "Could not reach FSP API" in result.error
        assert len(calls) == 1

    def test_invalid_json(self, fsp_settings, clock):
        sync, _ = make_sync(fsp_settings, clock, lambda r: httpx.Response(200, text="<html>"))
        result = asyncio.run(sync.get_student_schedule("stu-7"))
        assert "invalid JSON" in result.error

    def test_not_configured_skips_network(self, clock):
        sync, calls = make_sync(FspSettings(operator_id="op-1"), clock, lambda r: httpx.Response(200))
        result = asyncio.run(sync.get_student_schedule("stu-7"))
        assert result.error == NOT_CONFIGURED
        assert calls == []


class TestScheduleResult:

    def test_start_timestamp_dates_flight(self):
        flight = normalize_flight({"id": "f1", "startTime": "2026-11-01T10:00:00", "status": "scheduled"})
        assert flight.date == "2026-11-01T10:00:00"
        result = partition_flights([flight], NOW)
        assert [f.id for f in result.upcoming] == ["f1"]
        assert result.past == []

    def test_explicit_date_preferred_over_start(self):
        flight = normalize_flight({"id": "f1", "date": "2026-10-01", "start": "2026-11-01T10:00:00"})
        assert flight.date == "2026-10-01"

    def test_partition_and_order(self, fsp_settings, clock):
        sync, _ = make_sync(fsp_settings, clock, lambda r: httpx.Response(200, json=FLIGHTS))
        result = asyncio.run(sync.get_student_schedule("stu-7"))

        assert [f.id for f in result.upcoming] == ["f-soon", "f-late"]
        assert [f.id for f in result.past] == ["f-past", "f-nodate"]
        assert all(f.student_id == "stu-7" for f in result.upcoming + result.past)

    def test_cancelled_future_flight_is_past(self):
        flight = normalize_flight({"id": "f1", "date": "2026-12-01", "status": "canceled"})
        assert flight.status == FlightStatus.CANCELLED
        result = partition_flights([flight], NOW)
        assert result.upcoming == []
        assert [f.id for f in result.past] == ["f1"]


class TestNormalization:

    def test_aliases_and_defaults(self):
        flight = normalize_flight({"flightId": 42, "tailNumber": "N55", "remarks": "solo xc"})
        assert flight.id == "42"
        assert flight.aircraft_id == "N55"
        assert flight.notes == "solo xc"
        assert flight.start_time == "00:00"
        assert flight.type == FlightType.LESSON
        assert flight.status == FlightStatus.SCHEDULED

    def test_missing_id_uses_position(self):
        assert normalize_flight({}, position=3).id == "flight-3"

    def test_unknown_type_and_status(self):
        flight = normalize_flight({"id": "x", "type": "ferry", "status": "tentative"})
        assert flight.type == FlightType.OTHER
        assert flight.status == FlightStatus.SCHEDULED

    def test_empty_alias_falls_through(self):
        flight = normalize_flight({"id": "", "reservationId": "r-9"})
        assert flight.id == "r-9"

    def test_extract_records_shapes(self):
        assert extract_records([{"a": 1}, "junk"]) == [{"a": 1}]
        assert extract_records({"schedules": [{"a": 1}]}, "flights", "schedules") == [{"a": 1}]
        assert extract_records({"data": [{"b": 2}]}, "flights") == [{"b": 2}]
        assert extract_records({"flights": "nope"}, "flights") == []


class TestFindStudent:

    def test_match_by_email(self, fsp_settings, clock):
        students = {"students": [
            {"id": 1, "email": "other@example.com"},
            {"studentId": "stu-7", "emailAddress": "Pilot@Example.com",
             "firstName": "Sam", "lastName": "Pilot"},
        ]}

        def handler(request):
            if request.url.path == "/operators/op-1/students":
                return httpx.Response(200, json=students)
            return httpx.Response(404)

        sync, _ = make_sync(fsp_settings, clock, handler)
        match = asyncio.run(sync.find_student("pilot@example.com"))
        assert match.success
        assert match.fsp_student_id == "stu-7"
        assert match.name == "Sam Pilot"

    def test_no_match(self, fsp_settings, clock):
        sync, _ = make_sync(fsp_settings, clock, lambda r: httpx.Response(200, json=[]))
        match = asyncio.run(sync.find_student("nobody@example.com"))
        assert not match.success
        assert "not found" in match.error

    @pytest.mark.parametrize("status", [403, 500])
    def test_lookup_failure(self, fsp_settings, clock, status):
        sync, _ = make_sync(fsp_settings, clock, lambda r: httpx.Response(status))
        match = asyncio.run(sync.find_student("pilot@example.com"))
        assert str(status) in match.error
