"""
Course schemas for the portal.

Defines Pydantic models for:
- Course materials (document, video, quiz reference)
- Courses with derived completion state
- Patch models and the material merge rule
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class CourseType(str, Enum):
    INDOC = "indoc"
    GROUND = "ground"
    PREFLIGHT = "preflight"
    OTHER = "other"


class MaterialType(str, Enum):
    DOCUMENT = "document"
    VIDEO = "video"
    QUIZ = "quiz"


# -----------------------------------------------------------------------------
# Materials
# -----------------------------------------------------------------------------

class Material(BaseModel):
    """
    One unit of course content.

    Content reference depends on type:
    - document/video: a URL or an embedded file blob, never both
    - quiz: an exam ID only
    """
    type: MaterialType
    title: str = Field(..., min_length=1)
    url: Optional[str] = None
    file_data: Optional[str] = None  # base64 payload
    file_name: Optional[str] = None
    file_type: Optional[str] = None  # MIME type
    exam_id: Optional[str] = None

    @model_validator(mode="after")
    def content_reference_valid(self):
        if self.type == MaterialType.QUIZ:
            if self.url or self.file_data:
                raise ValueError("Quiz materials reference an exam, not a URL or file")
        else:
            if self.url and self.file_data:
                raise ValueError("A material stores either a file or a URL, not both")
            if self.exam_id:
                raise ValueError("Only quiz materials can reference an exam")
        return self


class MaterialPatch(BaseModel):
    type: Optional[MaterialType] = None
    title: Optional[str] = None
    url: Optional[str] = None
    file_data: Optional[str] = None
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    exam_id: Optional[str] = None


FILE_FIELDS = ("file_data", "file_name", "file_type")


def merge_material(material: Material, patch: MaterialPatch) -> Material:
    """
    Apply a patch to a material.

    Setting a file drops the URL and setting a URL drops the file, so an
    edited document never ends up holding both. Switching to quiz drops
    both content references.
    """
    updates = patch.model_dump(exclude_unset=True)
    merged = material.model_dump()
    merged.update(updates)

    if updates.get("file_data"):
        merged["url"] = None
    elif updates.get("url"):
        for field in FILE_FIELDS:
            merged[field] = None

    if merged["type"] == MaterialType.QUIZ:
        merged["url"] = None
        for field in FILE_FIELDS:
            merged[field] = None
    else:
        merged["exam_id"] = None

    return Material(**merged)


# -----------------------------------------------------------------------------
# Courses
# -----------------------------------------------------------------------------

class CourseBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    type: CourseType = CourseType.OTHER
    required: bool = False
    estimated_time: str = ""  # display label, e.g. "2 hours"
    completed: bool = False
    completion_date: Optional[str] = None  # YYYY-MM-DD
    materials: list[Material] = []

    @property
    def quiz_exam_ids(self) -> list[str]:
        return [m.exam_id for m in self.materials if m.type == MaterialType.QUIZ and m.exam_id]


class Course(CourseBase):
    id: str


class CoursePatch(BaseModel):
    """Partial update for a course. A materials value replaces the whole list."""
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[CourseType] = None
    required: Optional[bool] = None
    estimated_time: Optional[str] = None
    completed: Optional[bool] = None
    completion_date: Optional[str] = None
    materials: Optional[list[Material]] = None
