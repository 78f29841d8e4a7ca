"""
Admin viewer for the webhook delivery audit log.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.event import Event, EventStatus
from app.models.user import UserRole
from app.schemas.events import EventListResponse
from app.auth.dependencies import require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/events", tags=["Admin Events"])

admin_only = require_role(UserRole.ADMIN)


@router.get("", response_model=EventListResponse)
def list_events(
    status: Optional[str] = Query(None, description="Filter by status: processed, failed, ignored"),
    event_type: Optional[str] = Query(None, description="Filter by event type"),
    target_id: Optional[int] = Query(None, description="Filter by account ID"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    """List events with optional filters, most recent first."""
    query = db.query(Event)

    if status:
        try:
            status_enum = EventStatus(status)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid status: {status}")
        query = query.filter(Event.status == status_enum)

    if event_type:
        query = query.filter(Event.type == event_type)

    if target_id:
        query = query.filter(Event.target_id == target_id)

    total = query.count()
    items = query.order_by(Event.created_at.desc()).offset(offset).limit(limit).all()

    return EventListResponse(items=items, total=total, limit=limit, offset=offset)
