"""
Course/module/lesson administration - admin only.

Every mutation answers with the full admin tree re-read from the store;
material uploads answer with the updated lesson.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.dependencies import get_catalog_store, get_tree_resolver
from app.models.user import UserRole
from app.schemas.courses import (
    AdminCourseNode,
    CourseCreate,
    CourseUpdate,
    ModuleCreate,
    ModuleUpdate,
    LessonCreate,
    LessonUpdate,
    LessonNode,
)
from app.auth.dependencies import require_role
from app.services.catalog import CatalogStore
from app.services import file_storage
from app.services.content_tree import ContentTreeResolver, lesson_node
from app.services.errors import DuplicateProductError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/courses", tags=["Admin Courses"])

admin_only = require_role(UserRole.ADMIN)


def _duplicate_product(e: DuplicateProductError) -> HTTPException:
    return HTTPException(status_code=400, detail=f"Hotmart product {e.hotmart_id} is already mapped to a course")


@router.get("", response_model=List[AdminCourseNode])
def list_courses(
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
    _: None = Depends(admin_only),
):
    return resolver.admin_tree()


# -- courses -----------------------------------------------------------------

@router.post("", response_model=List[AdminCourseNode], status_code=status.HTTP_201_CREATED)
def create_course(
    data: CourseCreate,
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
    _: None = Depends(admin_only),
):
    try:
        catalog.create_course(
            title=data.title,
            description=data.description,
            thumbnail=data.thumbnail,
            hotmart_id=data.hotmart_id,
        )
    except DuplicateProductError as e:
        raise _duplicate_product(e)
    db.commit()
    return resolver.admin_tree()


@router.patch("/{course_id}", response_model=List[AdminCourseNode])
def update_course(
    course_id: int,
    data: CourseUpdate,
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
    _: None = Depends(admin_only),
):
    course = catalog.get_course(course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")

    try:
        catalog.update_course(course, **data.model_dump(exclude_unset=True))
    except DuplicateProductError as e:
        raise _duplicate_product(e)
    db.commit()
    return resolver.admin_tree()


@router.delete("/{course_id}", response_model=List[AdminCourseNode])
def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
    _: None = Depends(admin_only),
):
    """Delete a course together with its modules, lessons and enrollments"""
    course = catalog.get_course(course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    catalog.delete_course(course)
    db.commit()
    return resolver.admin_tree()


# -- modules -----------------------------------------------------------------

@router.post("/modules", response_model=List[AdminCourseNode], status_code=status.HTTP_201_CREATED)
def create_module(
    data: ModuleCreate,
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
    _: None = Depends(admin_only),
):
    course = catalog.get_course(data.course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    catalog.create_module(course, title=data.title, thumbnail=data.thumbnail)
    db.commit()
    return resolver.admin_tree()


@router.patch("/modules/{module_id}", response_model=List[AdminCourseNode])
def update_module(
    module_id: int,
    data: ModuleUpdate,
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
    _: None = Depends(admin_only),
):
    module = catalog.get_module(module_id)
    if not module:
        raise HTTPException(status_code=404, detail="Module not found")
    catalog.update_module(module, **data.model_dump(exclude_unset=True))
    db.commit()
    return resolver.admin_tree()


@router.delete("/modules/{module_id}", response_model=List[AdminCourseNode])
def delete_module(
    module_id: int,
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
    _: None = Depends(admin_only),
):
    module = catalog.get_module(module_id)
    if not module:
        raise HTTPException(status_code=404, detail="Module not found")
    catalog.delete_module(module)
    db.commit()
    return resolver.admin_tree()


# -- lessons -----------------------------------------------------------------

@router.post("/lessons", response_model=List[AdminCourseNode], status_code=status.HTTP_201_CREATED)
def create_lesson(
    data: LessonCreate,
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
    _: None = Depends(admin_only),
):
    module = catalog.get_module(data.module_id)
    if not module:
        raise HTTPException(status_code=404, detail="Module not found")
    catalog.create_lesson(module, **data.model_dump(exclude={"module_id"}))
    db.commit()
    return resolver.admin_tree()


@router.patch("/lessons/{lesson_id}", response_model=List[AdminCourseNode])
def update_lesson(
    lesson_id: int,
    data: LessonUpdate,
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
    _: None = Depends(admin_only),
):
    lesson = catalog.get_lesson(lesson_id)
    if not lesson:
        raise HTTPException(status_code=404, detail="Lesson not found")
    catalog.update_lesson(lesson, **data.model_dump(exclude_unset=True))
    db.commit()
    return resolver.admin_tree()


@router.delete("/lessons/{lesson_id}", response_model=List[AdminCourseNode])
def delete_lesson(
    lesson_id: int,
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    resolver: ContentTreeResolver = Depends(get_tree_resolver),
    _: None = Depends(admin_only),
):
    lesson = catalog.get_lesson(lesson_id)
    if not lesson:
        raise HTTPException(status_code=404, detail="Lesson not found")
    catalog.delete_lesson(lesson)
    db.commit()
    return resolver.admin_tree()


@router.post("/lessons/{lesson_id}/resources", response_model=LessonNode)
def upload_lesson_resource(
    lesson_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    catalog: CatalogStore = Depends(get_catalog_store),
    _: None = Depends(admin_only),
):
    """Upload a downloadable material and link it from the lesson"""
    lesson = catalog.get_lesson(lesson_id)
    if not lesson:
        raise HTTPException(status_code=404, detail="Lesson not found")

    content = file.file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(content) > settings.max_material_size_mb * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File size exceeds {settings.max_material_size_mb}MB limit",
        )

    relative_path = file_storage.save_lesson_material(lesson_id, file, content)
    catalog.update_lesson(lesson, resources=file_storage.public_url(relative_path))
    db.commit()
    logger.info("Stored material %s for lesson %s", relative_path, lesson_id)
    return lesson_node(lesson)
