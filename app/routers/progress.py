"""
Lesson completion and ratings for the current user.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import get_current_user
from app.dependencies import get_catalog_store, get_tree_resolver
from app.models.user import User
from app.schemas.progress import ProgressResponse, RatingRequest, RatingResponse
from app.services import progress as progress_service
from app.services.catalog import CatalogStore
from app.services.content_tree import ContentTreeResolver, progress_stats, resume_lesson

router = APIRouter(prefix="/progress", tags=["Progress"])


def _accessible_lesson(lesson_id: int, user: User, catalog: CatalogStore, resolver: ContentTreeResolver):
    lesson = catalog.get_lesson(lesson_id)
    if lesson is None:
        raise HTTPException(status_code=404, detail="Lesson not found")
    if not resolver.can_access_course(user, lesson.module.course_id):
        raise HTTPException(status_code=403, detail="Not enrolled in this course")
    return lesson


@router.get("", response_model=ProgressResponse)
def get_progress(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
):
    completed = progress_service.completed_lesson_ids(db, current_user.id)
    courses = resolver.student_courses(current_user)
    resume = resume_lesson(courses, completed)
    return ProgressResponse(
        completed_lesson_ids=completed,
        stats=progress_stats(courses, completed),
        resume_lesson_id=resume.id if resume else None,
    )


@router.put("/lessons/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
def mark_lesson_complete(
    lesson_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
):
    _accessible_lesson(lesson_id, current_user, catalog, resolver)
    progress_service.mark_complete(db, current_user.id, lesson_id)
    db.commit()


@router.delete("/lessons/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
def unmark_lesson_complete(
    lesson_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    progress_service.unmark_complete(db, current_user.id, lesson_id)
    db.commit()


@router.get("/lessons/{lesson_id}/rating", response_model=RatingResponse)
def get_lesson_rating(
    lesson_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return RatingResponse(
        lesson_id=lesson_id,
        rating=progress_service.get_rating(db, current_user.id, lesson_id),
    )


@router.put("/lessons/{lesson_id}/rating", response_model=RatingResponse)
def rate_lesson(
    lesson_id: int,
    data: RatingRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
):
    _accessible_lesson(lesson_id, current_user, catalog, resolver)
    progress_service.set_rating(db, current_user.id, lesson_id, data.rating)
    db.commit()
    return RatingResponse(lesson_id=lesson_id, rating=data.rating)
