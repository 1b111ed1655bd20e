"""
Repository tests.

Covers generic CRUD behavior and the per-entity rules layered on top.
"""

import pytest

from magnolia.errors import InvalidInputError
from magnolia.repositories import (
    AttemptRepository,
    CourseRepository,
    ExamRepository,
    UserRepository,
    VideoRepository,
)
from magnolia.schemas import (
    CoursePatch,
    ExamAttempt,
    ExamPatch,
    MaterialPatch,
    UserPatch,
    UserRole,
)
from magnolia.storage import ATTEMPTS_KEY, COURSES_KEY, ensure_seeded


@pytest.fixture
def users(store, clock):
    return UserRepository(store, clock)


@pytest.fixture
def courses(store, clock):
    return CourseRepository(store, clock)


@pytest.fixture
def exams(store, clock):
    return ExamRepository(store, clock)


@pytest.fixture
def attempts(store, clock):
    return AttemptRepository(store, clock)


class TestCollectionCrud:
    """Generic behavior, exercised through the course repository."""

    def test_add_then_get(self, courses):
        created = courses.add({"title": "Night Rating", "type": "other"})
        assert created.id.startswith("course-")
        assert courses.get(created.id) == created

    def test_ids_unique_within_same_millisecond(self, courses):
        first = courses.add({"title": "A"})
        second = courses.add({"title": "B"})
        assert first.id != second.id

    def test_update_applies_only_set_fields(self, courses):
        created = courses.add({"title": "Old", "description": "keep me"})
        updated = courses.update(created.id, CoursePatch(title="New"))
        assert updated.title == "New"
        assert updated.description == "keep me"
        assert courses.get(created.id).title == "New"

    def test_unknown_ids(self, courses):
        assert courses.get("nope") is None
        assert courses.update("nope", CoursePatch(title="x")) is None
        assert courses.delete("nope") is False

    def test_delete(self, courses):
        created = courses.add({"title": "Temp"})
        assert courses.delete(created.id) is True
        assert courses.all() == []

    def test_invalid_record_rejected(self, courses, store):
        with pytest.raises(InvalidInputError):
            courses.add({"title": ""})
        assert store.load(COURSES_KEY) is None

    def test_invalid_stored_records_skipped(self, courses, store):
        store.save(COURSES_KEY, [{"id": "bad"}, {"id": "c1", "title": "Good"}])
        assert [c.id for c in courses.all()] == ["c1"]

    def test_invalid_records_survive_writes(self, courses, store):
        legacy = {"id": "legacy", "title": ""}
        store.save(COURSES_KEY, [legacy])

        created = courses.add({"title": "New"})
        courses.update(created.id, CoursePatch(title="Renamed"))
        courses.delete(created.id)
        assert store.load(COURSES_KEY) == [legacy]

    def test_new_id_avoids_invalid_records(self, courses, store, clock):
        stamp = int(clock().timestamp() * 1000)
        store.save(COURSES_KEY, [{"id": f"course-{stamp}"}])
        assert courses.add({"title": "New"}).id == f"course-{stamp + 1}"


class TestUserRepository:

    def test_duplicate_email_rejected(self, users):
        users.add({"name": "A", "email": "pilot@example.com"})
        with pytest.raises(InvalidInputError, match="already exists"):
            users.add({"name": "B", "email": "PILOT@example.com"})

    def test_get_by_email_ignores_case(self, users):
        created = users.add({"name": "A", "email": "Pilot@Example.com"})
        assert users.get_by_email("pilot@example.com").id == created.id

    def test_email_change_conflict(self, users):
        users.add({"name": "A", "email": "a@example.com"})
        b = users.add({"name": "B", "email": "b@example.com"})
        with pytest.raises(InvalidInputError):
            users.update(b.id, UserPatch(email="a@example.com"))
        # Keeping one's own email is fine
        assert users.update(b.id, UserPatch(email="b@example.com")) is not None

    def test_approve_and_role(self, users):
        student = users.add({"name": "A", "email": "a@example.com", "enrollment_status": "pending"})
        assert [u.id for u in users.get_pending_students()] == [student.id]

        approved = users.approve_student(student.id)
        assert approved.can_login
        assert users.get_pending_students() == []

        promoted = users.update_role(student.id, UserRole.INSTRUCTOR)
        assert promoted.role == UserRole.INSTRUCTOR

    def test_update_fsp_ids_leaves_unset(self, users):
        user = users.add({"name": "A", "email": "a@example.com", "fsp_instructor_id": "ins-9"})
        updated = users.update_fsp_ids(user.id, fsp_student_id="stu-1")
        assert updated.fsp_student_id == "stu-1"
        assert updated.fsp_instructor_id == "ins-9"

    def test_seeded_queries(self, store, users):
        ensure_seeded(store)
        assert [u.id for u in users.get_students_by_instructor("2")] == ["1"]
        assert len(users.get_enrolled_users()) == 3


class TestCourseRepository:

    def test_update_material_file_replaces_url(self, store, courses):
        ensure_seeded(store)
        updated = courses.update_material(
            "indoc-1", 0, MaterialPatch(file_data="QUJD", file_name="safety.pdf")
        )
        material = updated.materials[0]
        assert material.url is None
        assert material.file_name == "safety.pdf"
        assert courses.get("indoc-1").materials[0].file_data == "QUJD"

    def test_update_material_bad_index(self, store, courses):
        ensure_seeded(store)
        assert courses.update_material("indoc-1", 10, MaterialPatch(title="x")) is None
        assert courses.update_material("missing", 0, MaterialPatch(title="x")) is None

    def test_mark_completed(self, store, courses):
        ensure_seeded(store)
        course = courses.mark_completed("preflight-1", "2026-10-19")
        assert course.completed
        assert course.completion_date == "2026-10-19"


class TestExamRepository:

    def test_empty_exam_rejected(self, exams):
        with pytest.raises(InvalidInputError):
            exams.add({"title": "Empty", "questions": []})

    def test_timestamps(self, exams, exam_data, clock):
        exam = exams.add(exam_data())
        assert exam.id.startswith("exam-")
        assert exam.created_at == exam.updated_at == "2026-10-19T09:00:00"

        clock.advance(60)
        updated = exams.update(exam.id, ExamPatch(title="Renamed"))
        assert updated.created_at == "2026-10-19T09:00:00"
        assert updated.updated_at == "2026-10-19T09:01:00"

    def test_update_cannot_empty_questions(self, exams, exam_data):
        exam = exams.add(exam_data())
        with pytest.raises(InvalidInputError):
            exams.update(exam.id, ExamPatch(questions=[]))

    def test_link_and_filter(self, exams, exam_data):
        exam = exams.add(exam_data())
        other = exams.add(exam_data(course_id="ground-1"))
        exams.link_to_course(exam.id, "indoc-1")
        assert [e.id for e in exams.get_exams_by_course("indoc-1")] == [exam.id]
        assert [e.id for e in exams.get_exams_by_course("ground-1")] == [other.id]


class TestAttemptRepository:

    def test_attempts_append(self, attempts, store):
        for n, passed in enumerate([False, True]):
            attempts.save_attempt(ExamAttempt(
                id=f"attempt-{n}", exam_id="e1", user_id="u1",
                started_at="2026-10-19T09:00:00", completed_at="2026-10-19T09:05:00",
                score=90 if passed else 10, passed=passed,
            ))
        assert len(store.load(ATTEMPTS_KEY)) == 2
        assert attempts.count_completed("u1", "e1") == 2
        assert attempts.has_passed("u1", "e1")
        assert not attempts.has_passed("u2", "e1")

    def test_in_progress_not_counted(self, attempts):
        attempts.save_attempt(ExamAttempt(
            id="attempt-1", exam_id="e1", user_id="u1", started_at="2026-10-19T09:00:00"
        ))
        assert attempts.count_completed("u1", "e1") == 0
        assert len(attempts.get_user_attempts("u1")) == 1


class TestVideoRepository:

    def test_by_category(self, store, clock):
        ensure_seeded(store)
        videos = VideoRepository(store, clock)
        safety = videos.get_by_category("safety")
        assert safety
        assert all(v.category == "safety" for v in safety)
