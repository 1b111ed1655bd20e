"""
Magnolia Classroom - Runtime components for course progress and exams.

This module provides:
- ProgressTracker: per-course viewed materials, passed exams, time spent
- CompletionEvaluator: derive course completion
- ExamEngine: scoring, attempt limits, timed sessions
"""

from .progress import ProgressTracker

from .completion import (
    CompletionEvaluator,
    CompletionCheck,
    exams_passed_by_attempts,
)

from .exam_engine import (
    ExamEngine,
    ExamSession,
    calculate_score,
    is_answer_correct,
    normalize_answer,
)

__all__ = [
    # Progress
    "ProgressTracker",
    # Completion
    "CompletionEvaluator",
    "CompletionCheck",
    "exams_passed_by_attempts",
    # Exams
    "ExamEngine",
    "ExamSession",
    "calculate_score",
    "is_answer_correct",
    "normalize_answer",
]
