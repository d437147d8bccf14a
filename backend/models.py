"""
Pydantic models for request/response validation.

JSON bodies use camelCase keys; Python code uses snake_case names.
"""
from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from domain.constants import (
    CHECKOUT_SESSION_MAX_LENGTH,
    CHECKOUT_SESSION_PATTERN,
    MAX_ORDER_QUANTITY,
    MAX_ROW_ID,
    MAX_UNIT_PRICE,
)
from domain.enums import OrderStatus


class ApiModel(BaseModel):
    """Shared base — camelCase aliases, construction by Python name or alias, ORM reads."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


NonBlankStr = Annotated[str, AfterValidator(_require_text)]


# ── Auth ────────────────────────────────────────────────────────────

class AdminAuthRequest(ApiModel):
    """Shared-secret login. A missing password is rejected as 401, not 400."""
    password: Optional[str] = None


class AdminTokenResponse(ApiModel):
    token: str
    token_type: str = "Bearer"
    expires_in_seconds: int


# ── Products ────────────────────────────────────────────────────────

class ProductCreateRequest(ApiModel):
    name: NonBlankStr = Field(..., max_length=200)
    price: float = Field(..., gt=0, le=MAX_UNIT_PRICE, allow_inf_nan=False)


class ProductUpdateRequest(ApiModel):
    name: Optional[NonBlankStr] = Field(default=None, max_length=200)
    price: Optional[float] = Field(default=None, gt=0, le=MAX_UNIT_PRICE, allow_inf_nan=False)

    @model_validator(mode="after")
    def _at_least_one_field(self):
        if self.name is None and self.price is None:
            raise ValueError("Provide a name or a price to update")
        return self


class ProductOut(ApiModel):
    id: int
    name: str
    price: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ── Orders ──────────────────────────────────────────────────────────

class BuyerDetails(ApiModel):
    buyer_name: NonBlankStr = Field(..., max_length=200)
    contact: NonBlankStr = Field(..., max_length=200)
    address: NonBlankStr = Field(..., max_length=2000)


class OrderCreateRequest(BuyerDetails):
    product_id: int = Field(..., gt=0, le=MAX_ROW_ID)
    quantity: int = Field(..., ge=1, le=MAX_ORDER_QUANTITY)
    checkout_session_id: Optional[str] = Field(
        default=None,
        max_length=CHECKOUT_SESSION_MAX_LENGTH,
        pattern=CHECKOUT_SESSION_PATTERN,
    )

    @field_validator("checkout_session_id", mode="before")
    @classmethod
    def _empty_session_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CheckoutItem(ApiModel):
    product_id: int = Field(..., gt=0, le=MAX_ROW_ID)
    quantity: int = Field(..., ge=1, le=MAX_ORDER_QUANTITY)


class CheckoutRequest(BuyerDetails):
    items: List[CheckoutItem] = Field(..., min_length=1)


class StatusUpdateRequest(ApiModel):
    status: OrderStatus


class OrderOut(ApiModel):
    id: int
    product_id: int
    quantity: int
    buyer_name: str
    contact: str
    address: str
    status: OrderStatus
    checkout_session_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    line_total: float
    product: ProductOut


class CheckoutGroupOut(ApiModel):
    key: str
    session_id: Optional[str] = None
    buyer_name: str
    contact: str
    address: str
    created_at: Optional[datetime] = None
    total_amount: float
    status: str
    next_status: Optional[OrderStatus] = None
    orders: List[OrderOut]


# ── Stats ───────────────────────────────────────────────────────────

class TopProduct(ApiModel):
    id: int
    name: str
    count: int


class AdminStats(ApiModel):
    total_orders: int
    completed_orders: int
    total_revenue: float
    average_order_value: float
    conversion_rate: float
    top_products: List[TopProduct]


def to_json(model: type[ApiModel], obj: Any) -> dict:
    """Validate an ORM object / dataclass / dict against `model` and dump camelCase JSON."""
    return model.model_validate(obj).model_dump(by_alias=True, mode="json")
