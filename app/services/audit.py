"""Audit trail of webhook deliveries in the events table."""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.integrations.hotmart import PurchaseEvent
from app.models.event import Event, EventStatus

logger = logging.getLogger(__name__)

FULFILLMENT_EVENT = "hotmart.fulfillment"


def record_delivery(
    db: Session,
    event: Optional[PurchaseEvent],
    status: EventStatus,
    outcome: str,
    target_id: Optional[int] = None,
    error_message: Optional[str] = None,
) -> Optional[Event]:
    """
    Append one audit row. Failure to write it is logged and swallowed: the
    audit log must never change the response Hotmart sees.
    """
    payload = event.summary() if event else {}
    payload["outcome"] = outcome
    row = Event(
        type=FULFILLMENT_EVENT,
        target_id=target_id,
        payload=payload,
        status=status,
        error_message=error_message,
    )
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Failed to record fulfillment audit event: %s", e)
        return None
    return row
