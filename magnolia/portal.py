"""
Portal - Wire repositories, progress, exams and scheduling together.

Control flow:
- material views and exam passes update the ProgressTracker
- completion is re-checked after every such update and on course-list load
- exam submissions append an attempt and feed passes into progress
- schedule requests go straight to the external scheduler
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import httpx

from magnolia.classroom import CompletionEvaluator, ExamEngine, ExamSession, ProgressTracker
from magnolia.config import FspSettings, get_db_path
from magnolia.repositories import (
    AttemptRepository,
    CourseRepository,
    ExamRepository,
    UserRepository,
    VideoRepository,
)
from magnolia.schemas import Course, CourseBase, CoursePatch, ScheduleResult, StudentMatch
from magnolia.schedule import ScheduleSynchronizer
from magnolia.storage import KeyValueStore, SQLiteStore, ensure_seeded
from magnolia.utils.clock import Clock


logger = logging.getLogger(__name__)


class Portal:
    """Entry point for the portal's operations over one store."""

    def __init__(
        self,
        store: KeyValueStore,
        fsp_settings: Optional[FspSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Clock = datetime.now,
    ):
        self.store = store
        self.clock = clock

        self.users = UserRepository(store, clock)
        self.courses = CourseRepository(store, clock)
        self.exams = ExamRepository(store, clock)
        self.attempts = AttemptRepository(store, clock)
        self.videos = VideoRepository(store, clock)

        self.progress = ProgressTracker(store, clock)
        self.completion = CompletionEvaluator(
            self.courses, self.exams, self.attempts, self.progress, clock
        )
        self.exam_engine = ExamEngine(
            self.exams, self.attempts, self.progress, self.completion, clock
        )
        self.scheduler = ScheduleSynchronizer(
            fsp_settings or FspSettings.from_env(), transport, clock
        )

    @classmethod
    def open(cls, db_path: Optional[str | Path] = None, seed: bool = True, **kwargs: Any) -> "Portal":
        """Open the SQLite-backed portal, seeding defaults on first start."""
        portal = cls(SQLiteStore(db_path or get_db_path()), **kwargs)
        if seed:
            portal.ensure_seeded()
        return portal

    def ensure_seeded(self) -> list[str]:
        return ensure_seeded(self.store)

    # -------------------------------------------------------------------------
    # Courses
    # -------------------------------------------------------------------------

    def _link_quiz_exams(self, course: Course):
        """Point every exam referenced by a quiz material at this course."""
        for exam_id in course.quiz_exam_ids:
            if self.exams.link_to_course(exam_id, course.id) is None:
                logger.warning(f"Course {course.id} references unknown exam {exam_id}")

    def create_course(self, data: CourseBase | dict[str, Any]) -> Course:
        course = self.courses.add(data)
        self._link_quiz_exams(course)
        return course

    def update_course(self, course_id: str, patch: CoursePatch) -> Optional[Course]:
        course = self.courses.update(course_id, patch)
        if course is not None:
            self._link_quiz_exams(course)
        return course

    def load_courses(self, user_id: str) -> list[Course]:
        """All courses, with completion re-evaluated for the user."""
        return self.completion.evaluate_all(user_id)

    def view_material(self, course_id: str, user_id: str, material_index: int) -> Optional[Course]:
        """
        Record a material view and re-check completion.

        Returns None for an unknown course or material index.
        """
        course = self.courses.get(course_id)
        if course is None or not 0 <= material_index < len(course.materials):
            return None
        self.progress.mark_material_viewed(course_id, user_id, material_index)
        return self.completion.evaluate(course_id, user_id)

    def open_course(self, course_id: str, user_id: str):
        self.progress.start_time_tracking(course_id, user_id)

    def close_course(self, course_id: str, user_id: str) -> int:
        return self.progress.stop_time_tracking(course_id, user_id)

    # -------------------------------------------------------------------------
    # Exams
    # -------------------------------------------------------------------------

    def start_exam(self, user_id: str, exam_id: str) -> Optional[ExamSession]:
        """Begin an attempt; raises AttemptLimitError when none are left."""
        return self.exam_engine.start_exam(user_id, exam_id)

    # -------------------------------------------------------------------------
    # Flight schedule
    # -------------------------------------------------------------------------

    async def schedule_for_user(self, user_id: str) -> ScheduleResult:
        """Schedule for a portal user via their linked scheduler ID."""
        user = self.users.get(user_id)
        if user is None:
            return ScheduleResult(error="User not found in portal")
        if user.fsp_instructor_id and not user.fsp_student_id:
            return await self.scheduler.get_instructor_schedule(user.fsp_instructor_id)
        if not user.fsp_student_id:
            return ScheduleResult(
                error="FSP account not connected. Please connect your account in Settings."
            )
        return await self.scheduler.get_student_schedule(user.fsp_student_id)

    async def connect_fsp_account(self, user_id: str, fsp_email: str) -> StudentMatch:
        """Look the user up in the scheduler by email and store the student ID."""
        if self.users.get(user_id) is None:
            return StudentMatch(error="User not found in portal")
        match = await self.scheduler.find_student(fsp_email)
        if match.success:
            self.users.update_fsp_ids(user_id, fsp_student_id=match.fsp_student_id)
            logger.info(f"Linked user {user_id} to scheduler student {match.fsp_student_id}")
        return match
