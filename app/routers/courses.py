"""
Student-facing content tree: entitled courses with modules and lessons.
"""
from fastapi import APIRouter, Depends, HTTPException

from app.auth.dependencies import get_current_user
from app.dependencies import get_catalog_store, get_tree_resolver
from app.models.user import User
from app.schemas.courses import LessonNode, StudentTreeResponse
from app.services.catalog import CatalogStore
from app.services.content_tree import ContentTreeResolver, lesson_node

router = APIRouter(prefix="/courses", tags=["Courses"])


@router.get("", response_model=StudentTreeResponse)
def get_course_tree(
    current_user: User = Depends(get_current_user),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
):
    """Courses the caller is enrolled in, in display order, with the initially active lesson"""
    return resolver.student_tree(current_user)


@router.get("/lessons/{lesson_id}", response_model=LessonNode)
def get_lesson(
    lesson_id: int,
    current_user: User = Depends(get_current_user),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
):
    lesson = catalog.get_lesson(lesson_id)
    if lesson is None:
        raise HTTPException(status_code=404, detail="Lesson not found")

    if not resolver.can_access_course(current_user, lesson.module.course_id):
        raise HTTPException(status_code=403, detail="Not enrolled in this course")

    return lesson_node(lesson)
