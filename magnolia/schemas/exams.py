"""
Exam schemas for the portal.

Defines Pydantic models for:
- Exam questions and answer keys
- Exams with pass threshold, time limit and attempt cap
- Exam attempts (in progress or completed)
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, model_validator


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    SHORT_ANSWER = "short-answer"


# A single answer, or a set of answers for multi-answer questions
Answer = Union[str, list[str]]


class ExamQuestion(BaseModel):
    id: str
    question: str = Field(..., min_length=1)
    type: QuestionType = QuestionType.MULTIPLE_CHOICE
    options: list[str] = []  # multiple-choice only
    correct_answer: Answer
    points: float = Field(default=1, gt=0)

    @model_validator(mode="after")
    def options_match_type(self):
        if self.type == QuestionType.MULTIPLE_CHOICE and not self.options:
            raise ValueError("Multiple-choice questions need at least one option")
        if self.type != QuestionType.MULTIPLE_CHOICE and self.options:
            raise ValueError("Only multiple-choice questions carry options")
        return self


class ExamBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    course_id: Optional[str] = None
    questions: list[ExamQuestion]
    passing_score: int = Field(default=70, ge=0, le=100)  # percent
    time_limit: Optional[int] = Field(default=None, gt=0)  # minutes
    attempts_allowed: Optional[int] = Field(default=None, gt=0)  # None = unlimited

    @property
    def total_points(self) -> float:
        return sum(q.points for q in self.questions)


class Exam(ExamBase):
    id: str
    created_at: str
    updated_at: str


class ExamPatch(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    course_id: Optional[str] = None
    questions: Optional[list[ExamQuestion]] = None
    passing_score: Optional[int] = None
    time_limit: Optional[int] = None
    attempts_allowed: Optional[int] = None


class ExamAttempt(BaseModel):
    """
    One sitting of an exam by a user.

    Only attempts with completed_at set count towards the attempt cap.
    """
    id: str
    exam_id: str
    user_id: str
    answers: dict[str, Answer] = {}  # question id -> answer
    started_at: str
    completed_at: Optional[str] = None
    score: Optional[int] = None
    passed: Optional[bool] = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


class ScoreResult(BaseModel):
    score: int = Field(..., ge=0, le=100)
    passed: bool
    earned_points: float
    total_points: float
