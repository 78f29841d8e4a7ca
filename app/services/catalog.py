"""
Content catalog store: courses, modules and lessons.

Mutations flush but never commit; the caller owns the transaction.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.models.course import Course, Module, Lesson
from app.services.errors import DuplicateProductError

logger = logging.getLogger(__name__)


class CatalogStore:
    def __init__(self, db: Session):
        self.db = db

    # -- reads ---------------------------------------------------------------

    def find_course_by_product_id(self, hotmart_id: str) -> Optional[Course]:
        return self.db.query(Course).filter(Course.hotmart_id == str(hotmart_id)).first()

    def list_courses(
        self,
        course_ids: Optional[Iterable[int]] = None,
        include_lessons: bool = True,
        newest_first: bool = False,
    ) -> List[Course]:
        """
        Courses with modules eagerly loaded (and lessons when include_lessons).
        course_ids=None means every course; an empty collection means none.
        """
        if course_ids is not None:
            course_ids = list(course_ids)
            if not course_ids:
                return []

        modules = selectinload(Course.modules)
        loader = modules.selectinload(Module.lessons) if include_lessons else modules
        query = self.db.query(Course).options(loader)
        if course_ids is not None:
            query = query.filter(Course.id.in_(course_ids))

        if newest_first:
            query = query.order_by(Course.created_at.desc(), Course.id.desc())
        else:
            query = query.order_by(Course.created_at.asc(), Course.id.asc())
        return query.all()

    def get_course(self, course_id: int) -> Optional[Course]:
        return self.db.query(Course).filter(Course.id == course_id).first()

    def get_module(self, module_id: int) -> Optional[Module]:
        return self.db.query(Module).filter(Module.id == module_id).first()

    def get_lesson(self, lesson_id: int) -> Optional[Lesson]:
        return self.db.query(Lesson).filter(Lesson.id == lesson_id).first()

    # -- mutations -----------------------------------------------------------

    def create_course(
        self,
        title: str,
        description: str = "",
        thumbnail: Optional[str] = None,
        hotmart_id: Optional[str] = None,
    ) -> Course:
        course = Course(
            title=title,
            description=description,
            thumbnail=thumbnail,
            hotmart_id=hotmart_id,
        )
        self._ensure_product_free(hotmart_id)
        self.db.add(course)
        self._flush(hotmart_id)
        logger.info("Created course %s (%s)", course.id, title)
        return course

    def update_course(self, course: Course, **fields) -> Course:
        hotmart_id = fields.get("hotmart_id")
        if hotmart_id and hotmart_id != course.hotmart_id:
            self._ensure_product_free(hotmart_id)
        for name, value in fields.items():
            setattr(course, name, value)
        self._flush(hotmart_id)
        return course

    def delete_course(self, course: Course) -> None:
        self.db.delete(course)
        self.db.flush()
        logger.info("Deleted course %s with its modules and lessons", course.id)

    def create_module(self, course: Course, title: str, thumbnail: Optional[str] = None) -> Module:
        module = Module(course_id=course.id, title=title, thumbnail=thumbnail)
        self.db.add(module)
        self.db.flush()
        return module

    def update_module(self, module: Module, **fields) -> Module:
        for name, value in fields.items():
            setattr(module, name, value)
        self.db.flush()
        return module

    def delete_module(self, module: Module) -> None:
        self.db.delete(module)
        self.db.flush()

    def create_lesson(self, module: Module, **fields) -> Lesson:
        lesson = Lesson(module_id=module.id, **fields)
        self.db.add(lesson)
        self.db.flush()
        return lesson

    def update_lesson(self, lesson: Lesson, **fields) -> Lesson:
        for name, value in fields.items():
            setattr(lesson, name, value)
        self.db.flush()
        return lesson

    def delete_lesson(self, lesson: Lesson) -> None:
        self.db.delete(lesson)
        self.db.flush()

    # -- helpers -------------------------------------------------------------

    def _ensure_product_free(self, hotmart_id: Optional[str]) -> None:
        if hotmart_id and self.find_course_by_product_id(hotmart_id) is not None:
            raise DuplicateProductError(hotmart_id)

    def _flush(self, hotmart_id: Optional[str]) -> None:
        try:
            self.db.flush()
        except IntegrityError as e:
            # Concurrent admin mapped the same product between check and flush
            self.db.rollback()
            raise DuplicateProductError(hotmart_id or "") from e
