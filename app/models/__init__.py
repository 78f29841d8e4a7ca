# Database models
from .base import Base
from .user import User, UserRole
from .course import Course, Module, Lesson
from .enrollment import Enrollment, EnrollmentSource
from .progress import LessonProgress, LessonRating
from .event import Event, EventStatus

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Course",
    "Module",
    "Lesson",
    "Enrollment",
    "EnrollmentSource",
    "LessonProgress",
    "LessonRating",
    "Event",
    "EventStatus",
]
