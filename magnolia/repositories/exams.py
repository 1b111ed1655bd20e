"""Exam and exam-attempt repositories."""

import logging
from typing import Any, Optional

from pydantic import BaseModel

from magnolia.errors import InvalidInputError
from magnolia.schemas import Exam, ExamAttempt, ExamPatch
from magnolia.storage import ATTEMPTS_KEY, EXAMS_KEY
from magnolia.utils.clock import now_iso

from .base import JsonCollection


logger = logging.getLogger(__name__)


class ExamRepository(JsonCollection[Exam]):
    key = EXAMS_KEY
    model = Exam
    id_prefix = "exam-"

    def _prepare_new(self, data: dict[str, Any]) -> dict[str, Any]:
        if not data.get("questions"):
            raise InvalidInputError("An exam needs at least one question")
        stamp = now_iso(self.clock)
        return {**data, "created_at": stamp, "updated_at": stamp}

    def _merge(self, current: Exam, patch: BaseModel) -> dict[str, Any]:
        merged = super()._merge(current, patch)
        if not merged.get("questions"):
            raise InvalidInputError("An exam needs at least one question")
        merged["updated_at"] = now_iso(self.clock)
        return merged

    def get_exams_by_course(self, course_id: str) -> list[Exam]:
        return [e for e in self._load() if e.course_id == course_id]

    def link_to_course(self, exam_id: str, course_id: str) -> Optional[Exam]:
        return self.update(exam_id, ExamPatch(course_id=course_id))


class AttemptRepository(JsonCollection[ExamAttempt]):
    """
    Append-only log of exam attempts.

    Attempts carry their own IDs; saving never overwrites an earlier entry.
    """

    key = ATTEMPTS_KEY
    model = ExamAttempt
    id_prefix = "attempt-"

    def new_attempt_id(self) -> str:
        return self._new_id(self._load())

    def save_attempt(self, attempt: ExamAttempt):
        attempts = self._load()
        attempts.append(attempt)
        self._save(attempts)
        logger.info(
            f"Saved attempt {attempt.id} for exam {attempt.exam_id} "
            f"(user {attempt.user_id}, score {attempt.score})"
        )

    def get_user_attempts(self, user_id: str, exam_id: Optional[str] = None) -> list[ExamAttempt]:
        return [
            a for a in self._load()
            if a.user_id == user_id and (exam_id is None or a.exam_id == exam_id)
        ]

    def count_completed(self, user_id: str, exam_id: str) -> int:
        return sum(1 for a in self.get_user_attempts(user_id, exam_id) if a.is_completed)

    def has_passed(self, user_id: str, exam_id: str) -> bool:
        """True if any completed attempt by this user passed the exam."""
        return any(
            a.is_completed and a.passed
            for a in self.get_user_attempts(user_id, exam_id)
        )
