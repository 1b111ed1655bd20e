"""
Progress tracking schemas for the portal.

Defines the per-(course, user) progress record:
- Viewed material indices
- Passed exam IDs
- Accumulated view time and the open session marker
"""

from typing import Optional

from pydantic import BaseModel, Field


class CourseProgress(BaseModel):
    course_id: str
    user_id: str
    viewed_materials: list[str] = []  # material indices, stringified
    completed_exams: list[str] = []   # IDs of passed exams
    last_viewed_at: Optional[str] = None
    time_spent_seconds: int = Field(default=0, ge=0)
    session_start_time: Optional[str] = None  # set while a session is open
