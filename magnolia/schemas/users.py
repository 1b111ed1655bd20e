"""
User schemas for the portal.

Defines Pydantic models for portal accounts:
- Roles and enrollment status
- Portal user record
- Partial update (patch) model
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class EnrollmentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"


class UserBase(BaseModel):
    """Fields shared by a stored user and a new-user payload."""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    role: UserRole = UserRole.STUDENT
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    enrolled: bool = False
    enrollment_status: Optional[EnrollmentStatus] = None  # students only
    enrollment_date: Optional[str] = None
    last_login: Optional[str] = None
    location: Optional[str] = None  # airfield tag, e.g. "LZU"
    enrolled_course_ids: list[str] = []
    assigned_instructor_ids: list[str] = []
    fsp_student_id: Optional[str] = None
    fsp_instructor_id: Optional[str] = None

    @property
    def can_login(self) -> bool:
        """
        Whether this account may sign in.

        Students need an approved enrollment. Legacy student records that
        predate enrollment_status fall back to the enrolled flag.
        """
        if self.role != UserRole.STUDENT:
            return True
        if self.enrollment_status is not None:
            return self.enrollment_status == EnrollmentStatus.APPROVED
        return self.enrolled

    @property
    def is_pending(self) -> bool:
        """Awaiting approval (or a legacy enrolled student without a status)."""
        if self.role != UserRole.STUDENT:
            return False
        if self.enrollment_status is not None:
            return self.enrollment_status == EnrollmentStatus.PENDING
        return self.enrolled


class User(UserBase):
    id: str


class UserPatch(BaseModel):
    """Partial update for a user. Only fields that are set get applied."""
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    enrolled: Optional[bool] = None
    enrollment_status: Optional[EnrollmentStatus] = None
    enrollment_date: Optional[str] = None
    last_login: Optional[str] = None
    location: Optional[str] = None
    enrolled_course_ids: Optional[list[str]] = None
    assigned_instructor_ids: Optional[list[str]] = None
    fsp_student_id: Optional[str] = None
    fsp_instructor_id: Optional[str] = None
