from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional, List

from app.models.enrollment import EnrollmentSource


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------

class LessonNode(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    module_id: int
    title: str
    video_url: str = ""
    duration: Optional[str] = None
    description: str = ""
    resources: Optional[str] = None
    created_at: Optional[datetime] = None


class ModuleNode(BaseModel):
    id: int
    course_id: int
    title: str
    thumbnail: Optional[str] = None
    created_at: Optional[datetime] = None
    lessons: List[LessonNode] = []


class CourseNode(BaseModel):
    id: int
    title: str
    description: str = ""
    thumbnail: Optional[str] = None
    created_at: Optional[datetime] = None
    modules: List[ModuleNode] = []


class StudentTreeResponse(BaseModel):
    courses: List[CourseNode]
    active_lesson_id: Optional[int] = None


class AdminModuleNode(BaseModel):
    """Module as listed to administrators; lessons are not fetched"""
    id: int
    course_id: int
    title: str
    thumbnail: Optional[str] = None
    created_at: Optional[datetime] = None


class AdminCourseNode(BaseModel):
    id: int
    title: str
    description: str = ""
    thumbnail: Optional[str] = None
    hotmart_id: Optional[str] = None
    created_at: Optional[datetime] = None
    modules: List[AdminModuleNode] = []


# ---------------------------------------------------------------------------
# Admin mutations
# ---------------------------------------------------------------------------

class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    thumbnail: Optional[str] = Field(None, max_length=1024)
    hotmart_id: Optional[str] = Field(None, max_length=255)

    _clean_hotmart_id = field_validator("hotmart_id")(_blank_to_none)


class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    thumbnail: Optional[str] = Field(None, max_length=1024)
    hotmart_id: Optional[str] = Field(None, max_length=255)

    _clean_hotmart_id = field_validator("hotmart_id")(_blank_to_none)


class ModuleCreate(BaseModel):
    course_id: int
    title: str = Field(..., min_length=1, max_length=255)
    thumbnail: Optional[str] = Field(None, max_length=1024)


class ModuleUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    thumbnail: Optional[str] = Field(None, max_length=1024)


class LessonCreate(BaseModel):
    module_id: int
    title: str = Field(..., min_length=1, max_length=255)
    video_url: str = Field("", max_length=1024)
    description: str = ""
    duration: Optional[str] = Field(None, max_length=20)
    resources: Optional[str] = Field(None, max_length=1024)


class LessonUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    video_url: Optional[str] = Field(None, max_length=1024)
    description: Optional[str] = None
    duration: Optional[str] = Field(None, max_length=20)
    resources: Optional[str] = Field(None, max_length=1024)


# ---------------------------------------------------------------------------
# Enrollments
# ---------------------------------------------------------------------------

class EnrollmentGrant(BaseModel):
    user_id: int
    course_id: int


class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    course_id: int
    source: EnrollmentSource
    enrolled_at: datetime
