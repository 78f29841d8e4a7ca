from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional, Any, Dict, List
from app.models.event import EventStatus


class EventResponse(BaseModel):
    """One webhook delivery as recorded in the audit log"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    status: EventStatus
    outcome: Optional[str] = None
    target_id: Optional[int] = None
    payload: Dict[str, Any] = {}
    error_message: Optional[str] = None
    created_at: datetime


class EventListResponse(BaseModel):
    items: List[EventResponse]
    total: int
    limit: int
    offset: int
