"""
Magnolia - Flight school learning and administration portal.

Students work through courses (documents, videos, quizzes), take exams and
view their flight schedule; instructors and admins manage users, courses
and content.
"""

__version__ = "0.3.0"
