"""
Progress tracker tests.

Covers viewed materials, passed exams and the time-tracking session window.
"""

import pytest

from magnolia.classroom import ProgressTracker
from magnolia.storage import PROGRESS_KEY, MemoryStore


@pytest.fixture
def tracker(store, clock):
    return ProgressTracker(store, clock)


class TestMaterials:

    def test_first_view_creates_record(self, tracker):
        tracker.mark_material_viewed("c1", "u1", 0)
        record = tracker.get_course_progress("c1", "u1")
        assert record.viewed_materials == ["0"]
        assert record.last_viewed_at == "2026-10-19T09:00:00"
        assert record.time_spent_seconds == 0

    def test_repeat_view_refreshes_timestamp_only(self, tracker, clock):
        tracker.mark_material_viewed("c1", "u1", 1)
        clock.advance(30)
        tracker.mark_material_viewed("c1", "u1", 1)
        record = tracker.get_course_progress("c1", "u1")
        assert record.viewed_materials == ["1"]
        assert record.last_viewed_at == "2026-10-19T09:00:30"

    def test_all_viewed_counts_distinct_indices(self, tracker):
        tracker.mark_material_viewed("c1", "u1", 0)
        tracker.mark_material_viewed("c1", "u1", 0)
        assert not tracker.are_all_materials_viewed("c1", "u1", 2)
        tracker.mark_material_viewed("c1", "u1", 1)
        assert tracker.are_all_materials_viewed("c1", "u1", 2)

    def test_no_record(self, tracker):
        assert tracker.are_all_materials_viewed("c1", "u1", 0)
        assert not tracker.are_all_materials_viewed("c1", "u1", 3)

    def test_records_are_per_user(self, tracker):
        tracker.mark_material_viewed("c1", "u1", 0)
        tracker.mark_material_viewed("c1", "u2", 0)
        assert len(tracker.get_course_progress_for_all_users("c1")) == 2
        assert len(tracker.get_user_progress("u1")) == 1


class TestExams:

    def test_mark_exam_completed_is_idempotent(self, tracker):
        tracker.mark_exam_completed("c1", "u1", "exam-1")
        tracker.mark_exam_completed("c1", "u1", "exam-1")
        assert tracker.get_course_progress("c1", "u1").completed_exams == ["exam-1"]

    def test_all_exams_completed(self, tracker):
        assert tracker.are_all_exams_completed("c1", "u1", [])
        assert not tracker.are_all_exams_completed("c1", "u1", ["exam-1"])
        tracker.mark_exam_completed("c1", "u1", "exam-1")
        assert tracker.are_all_exams_completed("c1", "u1", ["exam-1"])
        assert not tracker.are_all_exams_completed("c1", "u1", ["exam-1", "exam-2"])


class TestTimeTracking:

    def test_session_adds_elapsed_seconds(self, tracker, clock):
        tracker.start_time_tracking("c1", "u1")
        clock.advance(45)
        assert tracker.get_time_spent("c1", "u1") == 45
        assert tracker.stop_time_tracking("c1", "u1") == 45

        clock.advance(600)
        record = tracker.get_course_progress("c1", "u1")
        assert record.session_start_time is None
        assert tracker.get_time_spent("c1", "u1") == 45

    def test_second_start_keeps_open_session(self, tracker, clock):
        tracker.start_time_tracking("c1", "u1")
        clock.advance(20)
        tracker.start_time_tracking("c1", "u1")
        clock.advance(10)
        assert tracker.stop_time_tracking("c1", "u1") == 30

    def test_partial_seconds_floor(self, tracker, clock):
        tracker.start_time_tracking("c1", "u1")
        clock.advance(12.9)
        assert tracker.stop_time_tracking("c1", "u1") == 12

    def test_stop_without_session(self, tracker):
        assert tracker.stop_time_tracking("c1", "u1") == 0
        tracker.mark_material_viewed("c1", "u1", 0)
        assert tracker.stop_time_tracking("c1", "u1") == 0

    def test_sessions_accumulate(self, tracker, clock):
        for _ in range(2):
            tracker.start_time_tracking("c1", "u1")
            clock.advance(minutes=2)
            tracker.stop_time_tracking("c1", "u1")
        assert tracker.get_course_progress("c1", "u1").time_spent_seconds == 240

    def test_start_keeps_existing_progress(self, tracker):
        tracker.mark_material_viewed("c1", "u1", 2)
        tracker.start_time_tracking("c1", "u1")
        assert tracker.get_course_progress("c1", "u1").viewed_materials == ["2"]


class TestUnavailableStore:
    """Nothing raises when the store is offline or holds bad records."""

    def test_operations_degrade(self, clock):
        offline = MemoryStore(available=False)
        tracker = ProgressTracker(offline, clock)

        tracker.mark_material_viewed("c1", "u1", 0)
        tracker.mark_exam_completed("c1", "u1", "e1")
        tracker.start_time_tracking("c1", "u1")
        assert tracker.stop_time_tracking("c1", "u1") == 0
        assert tracker.get_all_progress() == []
        assert tracker.get_time_spent("c1", "u1") == 0
        assert not tracker.are_all_materials_viewed("c1", "u1", 1)

    def test_store_recovers(self, clock):
        flaky = MemoryStore(available=False)
        tracker = ProgressTracker(flaky, clock)
        tracker.mark_material_viewed("c1", "u1", 0)
        flaky.available = True
        assert flaky.load(PROGRESS_KEY) is None
        tracker.mark_material_viewed("c1", "u1", 0)
        assert tracker.get_course_progress("c1", "u1").viewed_materials == ["0"]

    def test_malformed_record_is_skipped_and_kept(self, store, tracker):
        bad = {"course_id": "c1"}
        store.save(PROGRESS_KEY, [bad])

        tracker.mark_material_viewed("c1", "u1", 0)
        assert tracker.get_course_progress("c1", "u1").viewed_materials == ["0"]
        assert tracker.get_all_progress()[0].user_id == "u1"
        assert tracker.stop_time_tracking("c1", "u1") == 0
        assert bad in store.load(PROGRESS_KEY)
