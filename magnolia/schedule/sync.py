"""
ScheduleSynchronizer - Fetch flight schedules from Flight Schedule Pro.

The API's path layout is not pinned down, so each request walks an ordered
list of path variants against the same host:
- 404 moves on to the next variant
- the first 2xx response wins and later variants are not tried
- any other failure (auth, 5xx, network, bad JSON) stops the walk

Nothing raises past this module: failures come back as results carrying
an `error` string that lists the endpoints tried.
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from magnolia.config import FspSettings
from magnolia.errors import SchedulerError
from magnolia.schemas import ScheduleResult, StudentMatch
from magnolia.utils.clock import Clock

from .normalize import extract_records, normalize_flight, partition_flights


logger = logging.getLogger(__name__)

# Version prefixes tried in order before the alternate nesting
PATH_PREFIXES = ("", "/api/v1", "/api")

NOT_CONFIGURED = "FSP API not configured"

# (path, query params)
Endpoint = tuple[str, dict[str, str]]


class ScheduleSynchronizer:
    """
    Client for the external scheduling API.

    Requests run one at a time. No client-side timeout beyond the
    transport default is applied.
    """

    def __init__(
        self,
        settings: FspSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Clock = datetime.now,
    ):
        """
        Initialize the synchronizer.

        Args:
            settings: API host, operator ID and subscription key
            transport: Optional httpx transport (tests pass a MockTransport)
            clock: Returns the current time, used to split upcoming/past
        """
        self.settings = settings
        self.transport = transport
        self.clock = clock

    # -------------------------------------------------------------------------
    # Endpoint variants
    # -------------------------------------------------------------------------

    def flight_endpoints(self, role: str, person_id: str) -> list[Endpoint]:
        """
        Path variants for a student's or instructor's flights.

        Args:
            role: "student" or "instructor"
            person_id: Scheduler ID of that person
        """
        operator = self.settings.operator_id
        params = {f"{role}_id": person_id}
        endpoints = [
            (f"{prefix}/operators/{operator}/flights", params)
            for prefix in PATH_PREFIXES
        ]
        endpoints.append((f"/api/v1/operators/{operator}/{role}s/{person_id}/flights", {}))
        return endpoints

    def student_endpoints(self) -> list[Endpoint]:
        operator = self.settings.operator_id
        return [(f"{prefix}/operators/{operator}/students", {}) for prefix in PATH_PREFIXES]

    def _display_url(self, path: str, params: dict[str, str]) -> str:
        url = httpx.URL(self.settings.base_url.rstrip("/") + path, params=params or None)
        return str(url)

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.base_url.rstrip("/"),
            headers={
                "x-subscription-key": self.settings.api_key,
                "Content-Type": "application/json",
            },
            transport=self.transport,
        )

    async def fetch_first(self, endpoints: list[Endpoint]) -> tuple[Any, list[str]]:
        """
        Try endpoints in order and return the first successful JSON body.

        Returns:
            (decoded body, URLs attempted)

        Raises:
            SchedulerError: On a non-404 failure or when every variant 404s
        """
        attempted: list[str] = []
        async with self._client() as client:
            for path, params in endpoints:
                url = self._display_url(path, params)
                attempted.append(url)
                try:
                    response = await client.get(path, params=params or None)
                except httpx.RequestError as e:
                    logger.error(f"Could not reach scheduler at {url}: {e}")
                    raise SchedulerError(f"Could not reach FSP API: {e}", attempted) from e

                if response.status_code == 404:
                    logger.info(f"404 from {url}, trying next endpoint variant")
                    continue
                if not response.is_success:
                    logger.error(f"Scheduler returned {response.status_code} for {url}")
                    raise SchedulerError(f"FSP API error: {response.status_code}", attempted)
                try:
                    return response.json(), attempted
                except ValueError as e:
                    raise SchedulerError(f"FSP API returned invalid JSON: {e}", attempted) from e

        raise SchedulerError("No FSP endpoint variant matched (all returned 404)", attempted)

    @staticmethod
    def _describe(error: SchedulerError) -> str:
        return f"{error}. Tried: {', '.join(error.attempted)}" if error.attempted else str(error)

    # -------------------------------------------------------------------------
    # Schedules
    # -------------------------------------------------------------------------

    async def _get_schedule(self, role: str, person_id: str) -> ScheduleResult:
        if not self.settings.is_configured:
            return ScheduleResult(error=NOT_CONFIGURED)
        try:
            payload, attempted = await self.fetch_first(self.flight_endpoints(role, person_id))
        except SchedulerError as e:
            return ScheduleResult(error=self._describe(e), attempted_endpoints=e.attempted)

        fallback = {f"{role}_id": person_id}
        flights = [
            normalize_flight(record, position, **fallback)
            for position, record in enumerate(extract_records(payload, "flights", "schedules"))
        ]
        result = partition_flights(flights, self.clock())
        result.attempted_endpoints = attempted
        logger.info(
            f"Fetched {len(flights)} flights for {role} {person_id} "
            f"({len(result.upcoming)} upcoming)"
        )
        return result

    async def get_student_schedule(self, fsp_student_id: str) -> ScheduleResult:
        return await self._get_schedule("student", fsp_student_id)

    async def get_instructor_schedule(self, fsp_instructor_id: str) -> ScheduleResult:
        return await self._get_schedule("instructor", fsp_instructor_id)

    # -------------------------------------------------------------------------
    # Student lookup
    # -------------------------------------------------------------------------

    async def find_student(self, email: str) -> StudentMatch:
        """Find the scheduler's student record whose email matches (case-insensitive)."""
        if not self.settings.is_configured:
            return StudentMatch(error=NOT_CONFIGURED)
        try:
            payload, attempted = await self.fetch_first(self.student_endpoints())
        except SchedulerError as e:
            return StudentMatch(error=self._describe(e), attempted_endpoints=e.attempted)

        wanted = email.strip().lower()
        for student in extract_records(payload, "students"):
            student_email = student.get("email") or student.get("emailAddress") or ""
            if str(student_email).strip().lower() != wanted:
                continue
            student_id = student.get("id") or student.get("studentId")
            name = student.get("name") or student.get("fullName")
            if not name and (student.get("firstName") or student.get("lastName")):
                name = f"{student.get('firstName', '')} {student.get('lastName', '')}".strip()
            return StudentMatch(
                fsp_student_id=str(student_id) if student_id is not None else None,
                name=name,
                email=student_email,
                attempted_endpoints=attempted,
            )

        return StudentMatch(
            error="Student not found in Flight Schedule Pro. Please verify your email address.",
            attempted_endpoints=attempted,
        )
