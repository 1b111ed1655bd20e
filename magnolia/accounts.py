"""
Account flows: student signup, admin-created users and sign-in.

All validation happens before anything is written; failures raise
InvalidInputError with a message suitable for the user.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence

from magnolia.errors import InvalidInputError
from magnolia.repositories import UserRepository
from magnolia.schemas import EnrollmentStatus, User, UserBase, UserPatch, UserRole
from magnolia.utils.clock import Clock


logger = logging.getLogger(__name__)

# Shared demo credential; real authentication is outside the portal
DEMO_PASSWORD = "password"


def _validate_identity(first_name: str, last_name: str, email: str):
    if not first_name.strip() or not last_name.strip():
        raise InvalidInputError("Please enter both first and last name")
    if not email.strip() or "@" not in email:
        raise InvalidInputError("Please enter a valid email address")


def _validate_student_assignment(
    location: Optional[str],
    course_ids: Sequence[str],
    instructor_ids: Sequence[str],
):
    if not location:
        raise InvalidInputError("Please select a location for the student")
    if not course_ids:
        raise InvalidInputError("Please select at least one course for the student")
    if not instructor_ids:
        raise InvalidInputError("Please select at least one instructor for the student")


def _new_user(
    first_name: str,
    last_name: str,
    email: str,
    role: UserRole,
    status: Optional[EnrollmentStatus],
    location: Optional[str],
    course_ids: Sequence[str],
    instructor_ids: Sequence[str],
    clock: Clock,
) -> UserBase:
    is_student = role == UserRole.STUDENT
    return UserBase(
        name=f"{first_name.strip()} {last_name.strip()}",
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=email.strip(),
        role=role,
        enrolled=True,
        enrollment_status=status if is_student else None,
        enrollment_date=clock().isoformat(),
        location=location or None,
        enrolled_course_ids=list(course_ids) if is_student else [],
        assigned_instructor_ids=list(instructor_ids) if is_student else [],
    )


def register_student(
    users: UserRepository,
    first_name: str,
    last_name: str,
    email: str,
    location: Optional[str],
    course_ids: Sequence[str],
    instructor_ids: Sequence[str],
    clock: Clock = datetime.now,
) -> User:
    """Self-service signup. The account waits for approval."""
    _validate_identity(first_name, last_name, email)
    _validate_student_assignment(location, course_ids, instructor_ids)
    if users.get_by_email(email):
        raise InvalidInputError(
            "An account with this email already exists. Please use the login page instead."
        )
    user = users.add(_new_user(
        first_name, last_name, email, UserRole.STUDENT, EnrollmentStatus.PENDING,
        location, course_ids, instructor_ids, clock,
    ))
    logger.info(f"Student {user.id} signed up, pending approval")
    return user


def create_user(
    users: UserRepository,
    first_name: str,
    last_name: str,
    email: str,
    role: UserRole = UserRole.STUDENT,
    location: Optional[str] = None,
    course_ids: Sequence[str] = (),
    instructor_ids: Sequence[str] = (),
    clock: Clock = datetime.now,
) -> User:
    """Admin-created account. Students created this way are approved at once."""
    _validate_identity(first_name, last_name, email)
    if users.get_by_email(email):
        raise InvalidInputError("An account with this email already exists")
    if role == UserRole.STUDENT:
        _validate_student_assignment(location, course_ids, instructor_ids)
    return users.add(_new_user(
        first_name, last_name, email, role, EnrollmentStatus.APPROVED,
        location, course_ids, instructor_ids, clock,
    ))


def authenticate(
    users: UserRepository,
    email: str,
    password: str,
    clock: Clock = datetime.now,
) -> User:
    """
    Sign a user in.

    Raises:
        InvalidInputError: On bad credentials or a student not yet approved
    """
    user = users.get_by_email(email)
    if user is None or password != DEMO_PASSWORD:
        raise InvalidInputError("Invalid credentials")
    if not user.can_login:
        logger.info(f"Blocked sign-in for unapproved student {user.id}")
        raise InvalidInputError("Your enrollment is pending approval by an instructor")
    return users.update(user.id, UserPatch(last_login=clock().isoformat())) or user
