"""
Content tree: Course -> Module -> Lesson.

Children are owned by their parent; deleting a Course removes its Modules
and their Lessons (ORM cascade plus ON DELETE CASCADE at the database).
Display order is creation time ascending; order_index exists but is not
populated.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    thumbnail = Column(String(1024), nullable=True)
    # Product id on Hotmart; join key for purchase events
    hotmart_id = Column(String(255), unique=True, nullable=True, index=True)
    order_index = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    modules = relationship(
        "Module", back_populates="course", cascade="all, delete-orphan", passive_deletes=True
    )
    enrollments = relationship(
        "Enrollment", back_populates="course", cascade="all, delete-orphan", passive_deletes=True
    )


class Module(Base):
    __tablename__ = "modules"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    thumbnail = Column(String(1024), nullable=True)
    order_index = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    course = relationship("Course", back_populates="modules")
    lessons = relationship(
        "Lesson", back_populates="module", cascade="all, delete-orphan", passive_deletes=True
    )


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True, index=True)
    module_id = Column(Integer, ForeignKey("modules.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    video_url = Column(String(1024), nullable=False, default="")
    duration = Column(String(20), nullable=True)
    description = Column(Text, nullable=False, default="")
    resources = Column(String(1024), nullable=True)  # single downloadable URL
    order_index = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    module = relationship("Module", back_populates="lessons")
