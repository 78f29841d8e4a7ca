"""
Hotmart webhook authentication and payload decoding.

Webhook auth: shared secret ("hottok") sent in the body by the legacy
webhook and in the X-Hotmart-Hottok header by the current one. There is
no signature over the body and no replay protection.
"""
import logging
import secrets
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from app.schemas.webhooks import HotmartV1Payload, HotmartV2Payload

logger = logging.getLogger(__name__)

HOTTOK_HEADER = "X-Hotmart-Hottok"


@dataclass
class PurchaseEvent:
    """Normalized purchase notification with the fields fulfillment needs"""
    schema_version: int
    buyer_email: str
    hotmart_product_id: str
    buyer_name: Optional[str] = None
    event_type: Optional[str] = None
    transaction_id: Optional[str] = None

    def summary(self) -> dict:
        return {
            "schema_version": self.schema_version,
            "email": self.buyer_email,
            "hotmart_product_id": self.hotmart_product_id,
            "event": self.event_type,
            "transaction_id": self.transaction_id,
        }


def validate_hottok(candidate: Optional[str], expected_token: Optional[str]) -> bool:
    """Compare a presented hottok with the configured secret. An unset secret never matches."""
    if not candidate or not expected_token:
        return False
    return secrets.compare_digest(candidate.encode("utf-8"), expected_token.encode("utf-8"))


def is_authorized(body: dict, header_value: Optional[str], expected_token: Optional[str]) -> bool:
    """True when either the body `hottok` or the header carries the secret."""
    body_token = body.get("hottok")
    if isinstance(body_token, str) and validate_hottok(body_token, expected_token):
        return True
    return validate_hottok(header_value, expected_token)


def _normalize_email(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _decode_v1(body: dict) -> Optional[PurchaseEvent]:
    payload = HotmartV1Payload.model_validate(body)
    email = _normalize_email(payload.buyer_email)
    if not email:
        return None
    return PurchaseEvent(
        schema_version=1,
        buyer_email=email,
        hotmart_product_id=payload.prod,
        buyer_name=payload.buyer_name,
    )


def _decode_v2(body: dict) -> Optional[PurchaseEvent]:
    payload = HotmartV2Payload.model_validate(body)
    email = _normalize_email(payload.data.buyer.email)
    if not email:
        return None
    purchase = payload.data.purchase
    return PurchaseEvent(
        schema_version=2,
        buyer_email=email,
        hotmart_product_id=payload.data.product.id,
        buyer_name=payload.data.buyer.name,
        event_type=payload.event,
        transaction_id=purchase.transaction if purchase else None,
    )


# Tried in order; the legacy flat fields win when both shapes are present
DECODERS = (_decode_v1, _decode_v2)


def decode_event(body: Any) -> Optional[PurchaseEvent]:
    """
    Decode a notification body into a PurchaseEvent.

    Returns None when no known schema version matches (missing buyer email
    or product id), so callers fail closed.
    """
    if not isinstance(body, dict):
        return None

    for decoder in DECODERS:
        try:
            event = decoder(body)
        except ValidationError:
            continue
        if event is not None:
            return event

    logger.warning("Hotmart payload matched no known schema: keys=%s", sorted(body.keys()))
    return None
