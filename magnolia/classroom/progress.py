"""
ProgressTracker - Track per-course student progress in the key-value store.

Stores one record per (course, user):
- Viewed material indices
- Passed exam IDs
- Cumulative time spent, plus the start of any open session

Every operation degrades to a no-op (or an empty/zero answer) when the
store is unavailable; nothing here raises.
"""

import logging
import math
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from magnolia.errors import StoreUnavailableError
from magnolia.repositories.base import validation_message
from magnolia.schemas import CourseProgress
from magnolia.storage import PROGRESS_KEY, KeyValueStore
from magnolia.utils.clock import Clock


logger = logging.getLogger(__name__)


class ProgressTracker:
    """
    Track student progress for every (course, user) pair.

    The whole progress collection is read and rewritten on each update.
    """

    def __init__(self, store: KeyValueStore, clock: Clock = datetime.now):
        """
        Initialize progress tracker.

        Args:
            store: Key-value store holding the progress collection
            clock: Returns the current time (injectable for tests)
        """
        self.store = store
        self.clock = clock
        self._unparsed: list = []

    def _load_all(self) -> Optional[list[CourseProgress]]:
        """Read every record, or None if the store cannot be reached."""
        try:
            raw = self.store.load_list(PROGRESS_KEY)
        except StoreUnavailableError as e:
            logger.warning(f"Progress store unavailable: {e}")
            return None

        records = []
        self._unparsed = []
        for r in raw:
            try:
                records.append(CourseProgress.model_validate(r))
            except ValidationError as e:
                logger.warning(f"Skipping invalid progress record: {validation_message(e)}")
                self._unparsed.append(r)
        return records

    def _save_all(self, records: list[CourseProgress]):
        try:
            self.store.save(
                PROGRESS_KEY, [r.model_dump(mode="json") for r in records] + self._unparsed
            )
        except StoreUnavailableError as e:
            logger.warning(f"Progress store unavailable, update dropped: {e}")

    @staticmethod
    def _find(records: list[CourseProgress], course_id: str, user_id: str) -> Optional[CourseProgress]:
        return next(
            (r for r in records if r.course_id == course_id and r.user_id == user_id),
            None,
        )

    def _get_or_create(self, records: list[CourseProgress], course_id: str, user_id: str) -> CourseProgress:
        record = self._find(records, course_id, user_id)
        if record is None:
            record = CourseProgress(course_id=course_id, user_id=user_id)
            records.append(record)
        return record

    def _session_seconds(self, started: str) -> int:
        elapsed = (self.clock() - datetime.fromisoformat(started)).total_seconds()
        return max(0, math.floor(elapsed))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_all_progress(self) -> list[CourseProgress]:
        """All records for all users (admin/instructor views)."""
        return self._load_all() or []

    def get_user_progress(self, user_id: str) -> list[CourseProgress]:
        return [r for r in self.get_all_progress() if r.user_id == user_id]

    def get_course_progress(self, course_id: str, user_id: str) -> Optional[CourseProgress]:
        return self._find(self.get_all_progress(), course_id, user_id)

    def get_course_progress_for_all_users(self, course_id: str) -> list[CourseProgress]:
        return [r for r in self.get_all_progress() if r.course_id == course_id]

    # -------------------------------------------------------------------------
    # Materials and exams
    # -------------------------------------------------------------------------

    def mark_material_viewed(self, course_id: str, user_id: str, material_index: int):
        """Record a viewed material. Viewing it again only refreshes last_viewed_at."""
        records = self._load_all()
        if records is None:
            return
        record = self._get_or_create(records, course_id, user_id)
        key = str(material_index)
        if key not in record.viewed_materials:
            record.viewed_materials.append(key)
        record.last_viewed_at = self.clock().isoformat()
        self._save_all(records)

    def mark_exam_completed(self, course_id: str, user_id: str, exam_id: str):
        """Record a passed exam for the course."""
        records = self._load_all()
        if records is None:
            return
        record = self._find(records, course_id, user_id)
        if record is None:
            record = self._get_or_create(records, course_id, user_id)
            record.last_viewed_at = self.clock().isoformat()
        if exam_id not in record.completed_exams:
            record.completed_exams.append(exam_id)
        self._save_all(records)

    def are_all_materials_viewed(self, course_id: str, user_id: str, total_materials: int) -> bool:
        """
        Compare the count of viewed materials to the course total.

        Counts distinct viewed indices; it does not check which indices
        were viewed. A course without materials needs no record at all.
        """
        progress = self.get_course_progress(course_id, user_id)
        if progress is None:
            return total_materials <= 0
        return len(progress.viewed_materials) >= total_materials

    def are_all_exams_completed(self, course_id: str, user_id: str, required_exam_ids: list[str]) -> bool:
        if not required_exam_ids:
            return True
        progress = self.get_course_progress(course_id, user_id)
        if progress is None:
            return False
        return all(exam_id in progress.completed_exams for exam_id in required_exam_ids)

    # -------------------------------------------------------------------------
    # Time tracking
    # -------------------------------------------------------------------------

    def start_time_tracking(self, course_id: str, user_id: str):
        """Open a session window. Does nothing if one is already open."""
        records = self._load_all()
        if records is None:
            return
        record = self._find(records, course_id, user_id)
        now = self.clock().isoformat()
        if record is None:
            record = self._get_or_create(records, course_id, user_id)
            record.last_viewed_at = now
        elif record.session_start_time:
            return
        record.session_start_time = now
        self._save_all(records)

    def stop_time_tracking(self, course_id: str, user_id: str) -> int:
        """
        Close the open session and add its length to the stored total.

        Returns:
            Seconds added (0 when no session was open)
        """
        records = self._load_all()
        if records is None:
            return 0
        record = self._find(records, course_id, user_id)
        if record is None or not record.session_start_time:
            return 0
        seconds = self._session_seconds(record.session_start_time)
        record.time_spent_seconds += seconds
        record.session_start_time = None
        self._save_all(records)
        return seconds

    def get_time_spent(self, course_id: str, user_id: str) -> int:
        """Stored seconds plus the live length of an open session (not persisted)."""
        progress = self.get_course_progress(course_id, user_id)
        if progress is None:
            return 0
        total = progress.time_spent_seconds
        if progress.session_start_time:
            total += self._session_seconds(progress.session_start_time)
        return total
