"""
Magnolia Repositories - CRUD over the key-value store.

This module provides:
- JsonCollection: generic whole-collection CRUD
- UserRepository, CourseRepository, VideoRepository
- ExamRepository and AttemptRepository (append-only attempt log)
"""

from .base import JsonCollection, validation_message
from .users import UserRepository
from .courses import CourseRepository
from .exams import ExamRepository, AttemptRepository
from .videos import VideoRepository

__all__ = [
    "JsonCollection",
    "validation_message",
    "UserRepository",
    "CourseRepository",
    "ExamRepository",
    "AttemptRepository",
    "VideoRepository",
]
