"""
Per-user lesson completion and ratings.

Both tables are keyed by (user_id, lesson_id); writes are upserts.
"""
import logging
from typing import List

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from app.models.progress import LessonProgress, LessonRating

logger = logging.getLogger(__name__)


def completed_lesson_ids(db: Session, user_id: int) -> List[int]:
    rows = db.query(LessonProgress.lesson_id).filter(LessonProgress.user_id == user_id).all()
    return [row[0] for row in rows]


def mark_complete(db: Session, user_id: int, lesson_id: int) -> None:
    db.execute(
        pg_insert(LessonProgress)
        .values(user_id=user_id, lesson_id=lesson_id)
        .on_conflict_do_nothing(index_elements=["user_id", "lesson_id"])
    )


def unmark_complete(db: Session, user_id: int, lesson_id: int) -> bool:
    deleted = db.query(LessonProgress).filter(
        LessonProgress.user_id == user_id,
        LessonProgress.lesson_id == lesson_id,
    ).delete(synchronize_session=False)
    return bool(deleted)


def get_rating(db: Session, user_id: int, lesson_id: int) -> int:
    row = db.query(LessonRating).filter(
        LessonRating.user_id == user_id,
        LessonRating.lesson_id == lesson_id,
    ).first()
    return row.rating if row else 0


def set_rating(db: Session, user_id: int, lesson_id: int, rating: int) -> None:
    stmt = pg_insert(LessonRating).values(user_id=user_id, lesson_id=lesson_id, rating=rating)
    db.execute(
        stmt.on_conflict_do_update(
            index_elements=["user_id", "lesson_id"],
            set_={"rating": stmt.excluded.rating, "updated_at": func.now()},
        )
    )
    logger.info("User %s rated lesson %s with %s", user_id, lesson_id, rating)
