"""
Flight schedule schemas.

Records here come from the external scheduling service and are never
persisted by the portal.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class FlightType(str, Enum):
    LESSON = "lesson"
    SOLO = "solo"
    CHECKRIDE = "checkride"
    OTHER = "other"


class FlightStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class FlightSchedule(BaseModel):
    id: str
    student_id: Optional[str] = None
    instructor_id: Optional[str] = None
    aircraft_id: str = "N/A"
    start_time: str = "00:00"
    end_time: str = "00:00"
    date: Optional[str] = None
    type: FlightType = FlightType.LESSON
    status: FlightStatus = FlightStatus.SCHEDULED
    notes: Optional[str] = None


class ScheduleResult(BaseModel):
    """Upcoming/past split of a schedule. Callers branch on `error`."""
    upcoming: list[FlightSchedule] = []
    past: list[FlightSchedule] = []
    error: Optional[str] = None
    attempted_endpoints: list[str] = []

    @property
    def success(self) -> bool:
        return self.error is None


class StudentMatch(BaseModel):
    """Result of looking up a scheduler student by email."""
    fsp_student_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    error: Optional[str] = None
    attempted_endpoints: list[str] = []

    @property
    def success(self) -> bool:
        return self.error is None and self.fsp_student_id is not None
