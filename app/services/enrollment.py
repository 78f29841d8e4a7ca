"""
Entitlement store.

An enrollment row (user_id, course_id) is the entitlement to a course's
content tree. Writes are upserts on the (user_id, course_id) constraint: an
existing row is left untouched, never duplicated and never an error.
"""
import logging
from typing import List

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.enrollment import Enrollment, EnrollmentSource
from app.services.errors import StoreError

logger = logging.getLogger(__name__)


class EntitlementStore:
    def __init__(self, db: Session):
        self.db = db

    def upsert(
        self,
        user_id: int,
        course_id: int,
        source: EnrollmentSource = EnrollmentSource.PURCHASE,
    ) -> None:
        stmt = (
            pg_insert(Enrollment)
            .values(user_id=user_id, course_id=course_id, source=source)
            .on_conflict_do_nothing(index_elements=["user_id", "course_id"])
        )
        try:
            self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to upsert enrollment: {e}") from e
        logger.info("Enrollment ensured: user %s -> course %s (%s)", user_id, course_id, source.value)

    def is_enrolled(self, user_id: int, course_id: int) -> bool:
        return self.db.query(Enrollment).filter(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id,
        ).first() is not None

    def course_ids_for(self, user_id: int) -> List[int]:
        rows = self.db.query(Enrollment.course_id).filter(Enrollment.user_id == user_id).all()
        return [row[0] for row in rows]

    def list_for_course(self, course_id: int) -> List[Enrollment]:
        return (
            self.db.query(Enrollment)
            .filter(Enrollment.course_id == course_id)
            .order_by(Enrollment.enrolled_at.asc())
            .all()
        )
