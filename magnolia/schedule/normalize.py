"""
Normalization of flight records from the external scheduler.

The upstream schema is not fixed, so each output field is resolved from an
ordered list of source aliases with a sentinel default.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from magnolia.schemas import FlightSchedule, FlightStatus, FlightType, ScheduleResult


logger = logging.getLogger(__name__)


# output field -> (source aliases in priority order, default)
FIELD_ALIASES: dict[str, tuple[tuple[str, ...], Optional[str]]] = {
    "id": (("id", "flightId", "flight_id", "schedule_id", "reservation_id", "reservationId"), None),
    "student_id": (("student_id", "studentId"), None),
    "instructor_id": (("instructor_id", "instructorId"), None),
    "aircraft_id": (("aircraft_id", "aircraftId", "aircraft", "tailNumber", "tail_number"), "N/A"),
    "start_time": (("start_time", "startTime", "start"), "00:00"),
    "end_time": (("end_time", "endTime", "end"), "00:00"),
    "date": (
        ("date", "scheduled_date", "startDate", "start_date", "startTime", "start_time", "start"),
        None,
    ),
    "type": (("type", "flightType", "flight_type", "reservation_type"), "lesson"),
    "status": (("status",), "scheduled"),
    "notes": (("notes", "remarks", "description"), None),
}

# Spellings seen upstream that map onto our status values
STATUS_SYNONYMS = {
    "canceled": FlightStatus.CANCELLED,
    "complete": FlightStatus.COMPLETED,
}

CLOSED_STATUSES = {FlightStatus.COMPLETED, FlightStatus.CANCELLED}


def resolve_field(record: dict[str, Any], field: str) -> Optional[str]:
    """First non-empty alias value for field, as a string, else the default."""
    aliases, default = FIELD_ALIASES[field]
    for alias in aliases:
        value = record.get(alias)
        if value is not None and value != "":
            return str(value)
    return default


def normalize_type(value: Optional[str]) -> FlightType:
    try:
        return FlightType((value or "lesson").strip().lower())
    except ValueError:
        return FlightType.OTHER


def normalize_status(value: Optional[str]) -> FlightStatus:
    key = (value or "scheduled").strip().lower()
    if key in STATUS_SYNONYMS:
        return STATUS_SYNONYMS[key]
    try:
        return FlightStatus(key)
    except ValueError:
        logger.warning(f"Unknown flight status '{value}', treating as scheduled")
        return FlightStatus.SCHEDULED


def normalize_flight(
    record: dict[str, Any],
    position: int = 0,
    student_id: Optional[str] = None,
    instructor_id: Optional[str] = None,
) -> FlightSchedule:
    """
    Map one upstream record onto FlightSchedule.

    Args:
        record: Raw JSON object from the scheduler
        position: Index in the response, used for records without an ID
        student_id: Fallback student ID (the one the schedule was fetched for)
        instructor_id: Fallback instructor ID
    """
    return FlightSchedule(
        id=resolve_field(record, "id") or f"flight-{position}",
        student_id=resolve_field(record, "student_id") or student_id,
        instructor_id=resolve_field(record, "instructor_id") or instructor_id,
        aircraft_id=resolve_field(record, "aircraft_id"),
        start_time=resolve_field(record, "start_time"),
        end_time=resolve_field(record, "end_time"),
        date=resolve_field(record, "date"),
        type=normalize_type(resolve_field(record, "type")),
        status=normalize_status(resolve_field(record, "status")),
        notes=resolve_field(record, "notes"),
    )


def parse_flight_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO date/datetime into naive local time. None if unparseable."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def is_upcoming(flight: FlightSchedule, now: datetime) -> bool:
    when = parse_flight_date(flight.date)
    return when is not None and when >= now and flight.status not in CLOSED_STATUSES


def partition_flights(flights: list[FlightSchedule], now: datetime) -> ScheduleResult:
    """
    Split flights into upcoming (ascending by date) and past (descending).

    Flights with no usable date land at the end of the past list.
    """
    upcoming = [f for f in flights if is_upcoming(f, now)]
    past = [f for f in flights if not is_upcoming(f, now)]

    upcoming.sort(key=lambda f: parse_flight_date(f.date))
    dated = [f for f in past if parse_flight_date(f.date) is not None]
    undated = [f for f in past if parse_flight_date(f.date) is None]
    dated.sort(key=lambda f: parse_flight_date(f.date), reverse=True)
    return ScheduleResult(upcoming=upcoming, past=dated + undated)


def extract_records(payload: Any, *keys: str) -> list[dict[str, Any]]:
    """Pull the record array out of a body shaped {key: [...]}, {data: [...]} or [...]."""
    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, dict):
        records = next(
            (payload[k] for k in (*keys, "data") if isinstance(payload.get(k), list)),
            [],
        )
    else:
        records = []
    return [r for r in records if isinstance(r, dict)]
