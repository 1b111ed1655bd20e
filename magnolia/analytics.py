"""
Student time analytics.

Builds a per (student, course) table of time spent, including the live
length of any open session, for instructor and admin reporting.
"""

from typing import Optional

import pandas as pd

from magnolia.classroom import ProgressTracker
from magnolia.schemas import Course, User, UserRole


REPORT_COLUMNS = [
    "user_id",
    "user_name",
    "user_email",
    "course_id",
    "course_title",
    "time_spent_seconds",
    "last_viewed_at",
]


def build_time_report(
    progress: ProgressTracker,
    courses: list[Course],
    users: list[User],
    course_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> pd.DataFrame:
    """
    Time spent by students per course, most time first.

    Args:
        progress: Progress tracker to read records and live time from
        courses: Known courses (records for unknown courses are skipped)
        users: Known users (only students are reported)
        course_id: Optional filter
        user_id: Optional filter

    Returns:
        DataFrame with REPORT_COLUMNS
    """
    course_by_id = {c.id: c for c in courses}
    student_by_id = {u.id: u for u in users if u.role == UserRole.STUDENT}

    rows = []
    for record in progress.get_all_progress():
        if course_id and record.course_id != course_id:
            continue
        if user_id and record.user_id != user_id:
            continue
        course = course_by_id.get(record.course_id)
        student = student_by_id.get(record.user_id)
        if course is None or student is None:
            continue
        rows.append({
            "user_id": student.id,
            "user_name": student.name,
            "user_email": student.email,
            "course_id": course.id,
            "course_title": course.title,
            "time_spent_seconds": progress.get_time_spent(record.course_id, record.user_id),
            "last_viewed_at": record.last_viewed_at,
        })

    df = pd.DataFrame(rows, columns=REPORT_COLUMNS)
    return df.sort_values("time_spent_seconds", ascending=False, kind="stable").reset_index(drop=True)


def summarize_time_report(df: pd.DataFrame) -> dict:
    """Totals for the report header."""
    total = int(df["time_spent_seconds"].sum()) if not df.empty else 0
    return {
        "total_seconds": total,
        "average_seconds": total // len(df) if len(df) else 0,
        "unique_students": int(df["user_id"].nunique()),
        "rows": len(df),
    }


def format_duration(seconds: int) -> str:
    """Compact duration label: 45s, 2m 5s, 1h 10m, 2h."""
    if seconds < 60:
        return f"{seconds}s"
    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {secs}s" if secs else f"{minutes}m"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m" if minutes else f"{hours}h"
