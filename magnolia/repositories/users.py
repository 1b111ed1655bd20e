"""User repository."""

from typing import Any, Optional

from pydantic import BaseModel

from magnolia.errors import InvalidInputError
from magnolia.schemas import EnrollmentStatus, User, UserPatch, UserRole
from magnolia.storage import USERS_KEY

from .base import JsonCollection


def _same_email(a: str, b: str) -> bool:
    return a.strip().lower() == b.strip().lower()


class UserRepository(JsonCollection[User]):
    key = USERS_KEY
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._load() if _same_email(u.email, email)), None)

    def add(self, data: BaseModel | dict[str, Any]) -> User:
        """
        Create a user.

        Raises:
            InvalidInputError: If the email is taken or the record is invalid
        """
        email = data.email if isinstance(data, BaseModel) else data.get("email", "")
        if email and self.get_by_email(email):
            raise InvalidInputError("An account with this email already exists")
        return super().add(data)

    def update(self, item_id: str, patch: UserPatch) -> Optional[User]:
        if patch.email is not None:
            existing = self.get_by_email(patch.email)
            if existing and existing.id != item_id:
                raise InvalidInputError("This email is already in use by another account")
        return super().update(item_id, patch)

    def update_role(self, user_id: str, role: UserRole) -> Optional[User]:
        return self.update(user_id, UserPatch(role=role))

    def approve_student(self, user_id: str) -> Optional[User]:
        return self.update(
            user_id,
            UserPatch(enrollment_status=EnrollmentStatus.APPROVED, enrolled=True),
        )

    def update_fsp_ids(
        self,
        user_id: str,
        fsp_student_id: Optional[str] = None,
        fsp_instructor_id: Optional[str] = None,
    ) -> Optional[User]:
        """Link scheduler IDs. Arguments left as None are not touched."""
        updates = {}
        if fsp_student_id is not None:
            updates["fsp_student_id"] = fsp_student_id
        if fsp_instructor_id is not None:
            updates["fsp_instructor_id"] = fsp_instructor_id
        return self.update(user_id, UserPatch(**updates))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_enrolled_users(self) -> list[User]:
        return [u for u in self._load() if u.enrolled]

    def get_pending_students(self) -> list[User]:
        return [u for u in self._load() if u.is_pending]

    def get_students_by_instructor(self, instructor_id: str) -> list[User]:
        return [
            u for u in self._load()
            if u.role == UserRole.STUDENT and instructor_id in u.assigned_instructor_ids
        ]
