"""
CompletionEvaluator - Derive course completion from progress and attempts.

A course is auto-completed once every material has been viewed and every
linked exam has been passed. Exam passes are checked against two sources
that must agree:
- the progress tracker's completed-exam set
- the attempt history (any completed, passing attempt)
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from magnolia.repositories import AttemptRepository, CourseRepository, ExamRepository
from magnolia.schemas import Course
from magnolia.utils.clock import Clock, today_iso

from .progress import ProgressTracker


logger = logging.getLogger(__name__)


@dataclass
class CompletionCheck:
    """Outcome of evaluating one course for one user."""
    course_id: str
    linked_exam_ids: list[str]
    all_materials_viewed: bool
    exams_passed_by_progress: bool
    exams_passed_by_attempts: bool

    @property
    def all_exams_passed(self) -> bool:
        return self.exams_passed_by_progress and self.exams_passed_by_attempts

    @property
    def is_complete(self) -> bool:
        return self.all_materials_viewed and self.all_exams_passed


def exams_passed_by_attempts(attempts: AttemptRepository, user_id: str, exam_ids: list[str]) -> bool:
    """True if the user has a passing completed attempt for every exam."""
    return all(attempts.has_passed(user_id, exam_id) for exam_id in exam_ids)


class CompletionEvaluator:
    """
    Re-check course completion after material views and exam passes.

    Completion is recorded on the course itself with today's date.
    """

    def __init__(
        self,
        courses: CourseRepository,
        exams: ExamRepository,
        attempts: AttemptRepository,
        progress: ProgressTracker,
        clock: Clock = datetime.now,
    ):
        self.courses = courses
        self.exams = exams
        self.attempts = attempts
        self.progress = progress
        self.clock = clock

    def check(self, course: Course, user_id: str) -> CompletionCheck:
        """Evaluate a course without writing anything."""
        exam_ids = [e.id for e in self.exams.get_exams_by_course(course.id)]
        return CompletionCheck(
            course_id=course.id,
            linked_exam_ids=exam_ids,
            all_materials_viewed=self.progress.are_all_materials_viewed(
                course.id, user_id, len(course.materials)
            ),
            exams_passed_by_progress=self.progress.are_all_exams_completed(
                course.id, user_id, exam_ids
            ),
            exams_passed_by_attempts=exams_passed_by_attempts(self.attempts, user_id, exam_ids),
        )

    def evaluate(self, course_id: str, user_id: str) -> Optional[Course]:
        """
        Mark the course complete if the user has finished it.

        Returns:
            The course (updated if it was just completed), or None if the
            course does not exist
        """
        course = self.courses.get(course_id)
        if course is None or course.completed:
            return course

        result = self.check(course, user_id)
        if result.exams_passed_by_progress != result.exams_passed_by_attempts:
            logger.info(
                f"Exam pass records disagree for course {course_id} / user {user_id}; "
                "not completing"
            )
        if not result.is_complete:
            return course

        logger.info(f"Course {course_id} completed by user {user_id}")
        return self.courses.mark_completed(course_id, today_iso(self.clock))

    def evaluate_all(self, user_id: str) -> list[Course]:
        """Evaluate every course (run when the course list loads)."""
        return [
            self.evaluate(course.id, user_id) or course
            for course in self.courses.all()
        ]
