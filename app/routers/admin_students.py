"""
Admin account listing with last-seen activity and enrollment counts.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.database import get_db
from app.models.enrollment import Enrollment
from app.models.user import User, UserRole
from app.schemas.auth import StudentListItem, StudentListResponse
from app.auth.dependencies import require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/students", tags=["Admin Students"])

admin_only = require_role(UserRole.ADMIN)


@router.get("", response_model=StudentListResponse)
def list_students(
    search: Optional[str] = Query(None, description="Search by email or display name"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    """List accounts, most recently seen first."""
    query = db.query(User)
    if search:
        query = query.filter(
            (User.email.ilike(f"%{search}%")) |
            (User.display_name.ilike(f"%{search}%"))
        )

    total = query.count()
    users = (
        query.order_by(User.last_seen_at.desc().nullslast(), User.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )

    counts = {}
    if users:
        rows = (
            db.query(Enrollment.user_id, func.count(Enrollment.id))
            .filter(Enrollment.user_id.in_([u.id for u in users]))
            .group_by(Enrollment.user_id)
            .all()
        )
        counts = {user_id: count for user_id, count in rows}

    items = [
        StudentListItem(
            id=u.id,
            email=u.email,
            display_name=u.display_name,
            role=u.role,
            created_at=u.created_at,
            last_seen_at=u.last_seen_at,
            enrollment_count=counts.get(u.id, 0),
        )
        for u in users
    ]
    return StudentListResponse(items=items, total=total)
