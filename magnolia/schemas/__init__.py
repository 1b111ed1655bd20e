"""
Magnolia Schemas - Pydantic models for the flight school portal.

This module exports all schema classes for:
- Users: accounts, roles, enrollment status
- Courses: courses and their materials
- Exams: questions, exams, attempts and scores
- Videos: video lesson library
- Progress: per-course student progress
- Schedule: flight records from the external scheduler
- Slides: imported presentation content
"""

# User schemas
from .users import (
    UserRole,
    EnrollmentStatus,
    UserBase,
    User,
    UserPatch,
)

# Course schemas
from .courses import (
    CourseType,
    MaterialType,
    Material,
    MaterialPatch,
    merge_material,
    CourseBase,
    Course,
    CoursePatch,
)

# Exam schemas
from .exams import (
    QuestionType,
    Answer,
    ExamQuestion,
    ExamBase,
    Exam,
    ExamPatch,
    ExamAttempt,
    ScoreResult,
)

# Video schemas
from .videos import (
    VideoCategory,
    VideoBase,
    Video,
    VideoPatch,
)

# Progress schemas
from .progress import CourseProgress

# Schedule schemas
from .schedule import (
    FlightType,
    FlightStatus,
    FlightSchedule,
    ScheduleResult,
    StudentMatch,
)

# Slide schemas
from .slides import Slide, SlideImportResult

__all__ = [
    # Users
    'UserRole',
    'EnrollmentStatus',
    'UserBase',
    'User',
    'UserPatch',
    # Courses
    'CourseType',
    'MaterialType',
    'Material',
    'MaterialPatch',
    'merge_material',
    'CourseBase',
    'Course',
    'CoursePatch',
    # Exams
    'QuestionType',
    'Answer',
    'ExamQuestion',
    'ExamBase',
    'Exam',
    'ExamPatch',
    'ExamAttempt',
    'ScoreResult',
    # Videos
    'VideoCategory',
    'VideoBase',
    'Video',
    'VideoPatch',
    # Progress
    'CourseProgress',
    # Schedule
    'FlightType',
    'FlightStatus',
    'FlightSchedule',
    'ScheduleResult',
    'StudentMatch',
    # Slides
    'Slide',
    'SlideImportResult',
]
