import enum
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, UniqueConstraint, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class EnrollmentSource(str, enum.Enum):
    PURCHASE = "purchase"
    MANUAL = "manual"


class Enrollment(Base):
    """Entitlement of a user to a course's content tree"""
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
        Index("ix_enrollments_user_course", "user_id", "course_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    source = Column(Enum(EnrollmentSource), nullable=False, default=EnrollmentSource.PURCHASE)
    enrolled_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
