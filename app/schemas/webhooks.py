"""
Known shapes of a Hotmart purchase notification.

The legacy (v1) webhook posts flat fields; the current (v2) webhook nests
buyer and product under `data`. Both may carry the shared-secret `hottok`.
"""
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator
from typing import Optional, Union


ProductId = Union[StrictStr, StrictInt]


def _require_product_id(value: ProductId) -> str:
    text = str(value).strip()
    if not text:
        raise ValueError("product id must not be empty")
    return text


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="allow")


class HotmartBuyer(_Lenient):
    email: Optional[StrictStr] = None
    name: Optional[StrictStr] = None


class HotmartV1Payload(_Lenient):
    """Legacy flat notification: `email`/`prod`/`name`, buyer optionally nested."""
    hottok: Optional[StrictStr] = None
    email: Optional[StrictStr] = None
    prod: ProductId
    name: Optional[StrictStr] = None
    buyer: Optional[HotmartBuyer] = None

    _check_prod = field_validator("prod")(_require_product_id)

    @property
    def buyer_email(self) -> Optional[str]:
        return self.email or (self.buyer.email if self.buyer else None)

    @property
    def buyer_name(self) -> Optional[str]:
        return self.name or (self.buyer.name if self.buyer else None)


class HotmartV2Buyer(_Lenient):
    email: StrictStr = Field(..., min_length=1)
    name: Optional[StrictStr] = None


class HotmartV2Product(_Lenient):
    id: ProductId

    _check_id = field_validator("id")(_require_product_id)


class HotmartV2Purchase(_Lenient):
    transaction: Optional[StrictStr] = None


class HotmartV2Data(_Lenient):
    buyer: HotmartV2Buyer
    product: HotmartV2Product
    purchase: Optional[HotmartV2Purchase] = None


class HotmartV2Payload(_Lenient):
    """Current notification: `{event, data: {buyer, product, purchase}}`."""
    hottok: Optional[StrictStr] = None
    event: Optional[StrictStr] = None
    data: HotmartV2Data


class FulfillmentResponse(BaseModel):
    message: str
    course: Optional[str] = None
    user: Optional[int] = None


class WebhookError(BaseModel):
    error: str
