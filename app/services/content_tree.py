"""
Content tree resolution: Course -> Module -> Lesson in display order.

Modules within a course and lessons within a module are ordered by creation
time ascending, ties broken by id. The student view carries lessons and is
restricted to the caller's enrollments (administrators see every course); the
admin view lists every course, newest first, without lessons.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from app.models.user import User, UserRole
from app.schemas.courses import (
    AdminCourseNode,
    AdminModuleNode,
    CourseNode,
    LessonNode,
    ModuleNode,
    StudentTreeResponse,
)
from app.schemas.progress import ProgressStats

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

RANK_TIERS = (
    (100, "Maestro"),
    (50, "Creador"),
    (0, "Novato"),
)


def _creation_key(item):
    created_at = item.created_at
    # Rows not yet stamped by the database sort last
    return (created_at is None, created_at or _EPOCH, item.id or 0)


def ordered(items: Optional[Iterable]) -> list:
    return sorted(items or [], key=_creation_key)


def lesson_node(lesson) -> LessonNode:
    return LessonNode(
        id=lesson.id,
        module_id=lesson.module_id,
        title=lesson.title,
        video_url=lesson.video_url or "",
        duration=lesson.duration,
        description=lesson.description or "",
        resources=lesson.resources,
        created_at=lesson.created_at,
    )


def module_node(module) -> ModuleNode:
    return ModuleNode(
        id=module.id,
        course_id=module.course_id,
        title=module.title,
        thumbnail=module.thumbnail,
        created_at=module.created_at,
        lessons=[lesson_node(lesson) for lesson in ordered(module.lessons)],
    )


def course_node(course) -> CourseNode:
    return CourseNode(
        id=course.id,
        title=course.title,
        description=course.description or "",
        thumbnail=course.thumbnail,
        created_at=course.created_at,
        modules=[module_node(module) for module in ordered(course.modules)],
    )


def admin_course_node(course) -> AdminCourseNode:
    return AdminCourseNode(
        id=course.id,
        title=course.title,
        description=course.description or "",
        thumbnail=course.thumbnail,
        hotmart_id=course.hotmart_id,
        created_at=course.created_at,
        modules=[
            AdminModuleNode(
                id=module.id,
                course_id=module.course_id,
                title=module.title,
                thumbnail=module.thumbnail,
                created_at=module.created_at,
            )
            for module in ordered(course.modules)
        ],
    )


def initial_active_lesson(courses: Sequence[CourseNode]) -> Optional[LessonNode]:
    """First lesson of the first module of the first course, or None (empty state)."""
    if not courses or not courses[0].modules:
        return None
    lessons = courses[0].modules[0].lessons
    return lessons[0] if lessons else None


def resume_lesson(courses: Sequence[CourseNode], completed_ids: Iterable[int]) -> Optional[LessonNode]:
    """
    First lesson, in tree order, the user has not completed. When every
    lesson is complete this falls back to the very first lesson.
    """
    completed = set(completed_ids)
    for course in courses:
        for module in course.modules:
            for lesson in module.lessons:
                if lesson.id not in completed:
                    return lesson
    return initial_active_lesson(courses)


def progress_stats(courses: Sequence[CourseNode], completed_ids: Iterable[int]) -> ProgressStats:
    completed = set(completed_ids)
    total = 0
    done = 0
    for course in courses:
        for module in course.modules:
            for lesson in module.lessons:
                total += 1
                if lesson.id in completed:
                    done += 1

    # Halves round up
    percentage = 0 if total == 0 else math.floor(done / total * 100 + 0.5)
    rank = next(name for threshold, name in RANK_TIERS if percentage >= threshold)
    return ProgressStats(
        total_lessons=total,
        total_completed=done,
        percentage=percentage,
        rank=rank,
    )


class ContentTreeResolver:
    def __init__(self, catalog, entitlements):
        self.catalog = catalog
        self.entitlements = entitlements

    def visible_course_ids(self, user: User) -> Optional[List[int]]:
        """None means unrestricted (administrator)."""
        if user.role == UserRole.ADMIN:
            return None
        return self.entitlements.course_ids_for(user.id)

    def student_courses(self, user: User) -> List[CourseNode]:
        courses = self.catalog.list_courses(
            course_ids=self.visible_course_ids(user),
            include_lessons=True,
        )
        return [course_node(course) for course in ordered(courses)]

    def student_tree(self, user: User) -> StudentTreeResponse:
        courses = self.student_courses(user)
        active = initial_active_lesson(courses)
        return StudentTreeResponse(
            courses=courses,
            active_lesson_id=active.id if active else None,
        )

    def admin_tree(self) -> List[AdminCourseNode]:
        courses = self.catalog.list_courses(include_lessons=False, newest_first=True)
        return [admin_course_node(course) for course in reversed(ordered(courses))]

    def can_access_course(self, user: User, course_id: int) -> bool:
        if user.role == UserRole.ADMIN:
            return True
        return self.entitlements.is_enrolled(user.id, course_id)
