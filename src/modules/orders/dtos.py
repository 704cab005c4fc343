"""Order DTOs for the service layer.

Pydantic v2, immutable (``frozen=True``).  Checkout payloads arrive from
the storefront in camelCase; every DTO here accepts both camelCase keys
and snake_case field names.

- ``CheckoutDTO``: the full checkout request (payment, customer,
  shipping, cart items, pricing).
- ``PricingDTO``: enforces ``subtotal - discount + tax + shipping == total``.
- ``CheckoutItemDTO``: one cart line as submitted at checkout; builds the
  ``OrderItem`` snapshot.
- ``UpdateStatusDTO`` / ``AdminNoteDTO`` / ``UpdateShippingDTO``: admin input.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from modules.cart.dtos import Money
from modules.orders.constants import (
    MAX_LINE_QUANTITY,
    MAX_MONEY,
    PRICING_TOLERANCE,
    OrderStatus,
)
from modules.payments.dtos import CardInfo

_CENTS = Decimal("0.01")

SizeQuantity = Annotated[int, Field(ge=0, le=MAX_LINE_QUANTITY)]

_CAMEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


# ---------------------------------------------------------------------------
# Checkout input
# ---------------------------------------------------------------------------


class CustomerInfoDTO(BaseModel):
    model_config = _CAMEL_CONFIG

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(default="", max_length=40)
    address: Dict[str, Any] = {}


class ShippingInfoDTO(BaseModel):
    model_config = _CAMEL_CONFIG

    method: str = Field(default="", max_length=100)
    address: Dict[str, Any] = {}


class PricingDTO(BaseModel):
    """Order pricing breakdown.

    ``shipping`` is the shipping cost.  The breakdown must balance to the
    cent.
    """

    model_config = _CAMEL_CONFIG

    subtotal: Money
    tax: Money = Decimal("0")
    shipping: Money = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("shipping", "shippingCost", "shipping_cost"),
    )
    discount: Money = Decimal("0")
    total: Money = Field(gt=0)

    @model_validator(mode="after")
    def breakdown_must_balance(self) -> "PricingDTO":
        computed = self.subtotal - self.discount + self.tax + self.shipping
        if abs(computed - self.total) > Decimal(PRICING_TOLERANCE):
            raise ValueError(
                f"Pricing does not add up: subtotal - discount + tax + shipping "
                f"= {computed}, total = {self.total}."
            )
        return self


class CheckoutItemDTO(BaseModel):
    """A cart line as submitted at checkout.

    All customization fields are optional.  ``unit_price`` is derived as
    ``total / quantity`` when not supplied.
    """

    model_config = _CAMEL_CONFIG

    product_id: Optional[str] = Field(default=None, max_length=64)
    category: str = Field(default="", max_length=20)
    title: str = Field(min_length=1, max_length=255)
    image_url: str = Field(default="", max_length=500)
    size: str = Field(default="", max_length=20)
    size_quantities: Dict[str, SizeQuantity] = Field(
        default_factory=dict,
        validation_alias=AliasChoices(
            "size_quantities", "sizeQuantities", "sizeAndQuantity", "sizes"
        ),
    )
    color_name: str = Field(
        default="",
        max_length=64,
        validation_alias=AliasChoices("color_name", "colorName", "colorsName"),
    )
    color_code: str = Field(
        default="",
        max_length=16,
        validation_alias=AliasChoices("color_code", "colorCode", "colorsCode"),
    )
    options: List[str] = []
    quantity: Optional[int] = Field(default=None, ge=1, le=MAX_LINE_QUANTITY)
    total: Optional[Money] = Field(
        default=None,
        validation_alias=AliasChoices("total", "totalPrice", "total_price"),
    )
    unit_price: Optional[Money] = None
    imprint_files: List[str] = []
    imprint_locations: List[str] = []
    notes: str = Field(default="", validation_alias=AliasChoices("notes", "orderNotes"))

    @model_validator(mode="after")
    def price_must_be_known(self) -> "CheckoutItemDTO":
        if self.total is None and self.unit_price is None:
            raise ValueError("Each cart item needs a total or a unit price.")
        return self

    @model_validator(mode="after")
    def quantity_must_fit(self) -> "CheckoutItemDTO":
        if self.effective_quantity > MAX_LINE_QUANTITY:
            raise ValueError("Size quantities add up to more than one line can hold.")
        if self.total is None and self.unit_price * self.effective_quantity > Decimal(MAX_MONEY):
            raise ValueError("Line total is larger than an order can record.")
        return self

    @property
    def effective_quantity(self) -> int:
        if self.quantity:
            return self.quantity
        breakdown = sum(self.size_quantities.values())
        return breakdown or 1

    def snapshot(self, position: int = 0) -> Dict[str, Any]:
        """Field values for an ``OrderItem`` row."""
        quantity = self.effective_quantity
        if self.total is not None:
            total_price = self.total
        else:
            total_price = self.unit_price * quantity
        if self.unit_price is not None:
            unit_price = self.unit_price
        else:
            unit_price = total_price / quantity
        return {
            "position": position,
            "product_id": self.product_id or "",
            "category": self.category,
            "title": self.title,
            "image_url": self.image_url,
            "size": self.size,
            "size_quantities": self.size_quantities,
            "color_name": self.color_name,
            "color_code": self.color_code,
            "options": list(self.options),
            "quantity": quantity,
            "unit_price": unit_price.quantize(_CENTS, rounding=ROUND_HALF_UP),
            "total_price": total_price.quantize(_CENTS, rounding=ROUND_HALF_UP),
            "imprint_files": list(self.imprint_files),
            "imprint_locations": list(self.imprint_locations),
            "notes": self.notes,
        }


class CheckoutDTO(BaseModel):
    """Complete checkout request."""

    model_config = _CAMEL_CONFIG

    payment_data: CardInfo
    customer_info: CustomerInfoDTO
    shipping_info: ShippingInfoDTO
    cart_items: List[CheckoutItemDTO] = Field(min_length=1)
    pricing: PricingDTO

    def masked(self) -> Dict[str, Any]:
        """Loggable copy of the request with card data reduced to the last four."""
        data = self.model_dump(mode="json", exclude={"payment_data"})
        data["payment_data"] = {
            "card_number": self.payment_data.masked_number,
            "expiration_date": self.payment_data.expiration_date,
        }
        return data


# ---------------------------------------------------------------------------
# Admin input
# ---------------------------------------------------------------------------


class UpdateStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: OrderStatus
    note: Optional[str] = None

    @field_validator("note")
    @classmethod
    def blank_note_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class AdminNoteDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    note: str

    @field_validator("note")
    @classmethod
    def note_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Note must not be empty.")
        return v.strip()


class UpdateShippingDTO(BaseModel):
    model_config = _CAMEL_CONFIG

    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    actual_delivery: Optional[datetime] = None
    shipping_method: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("shipping_method", "shippingMethod", "method"),
    )


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class RecentOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    order_number: str
    status: str
    total: Decimal
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> str:
        return str(v)


class OrderStatsDTO(BaseModel):
    """Dashboard figures for orders created in the last ``period`` days.

    ``recent_orders`` are the five newest orders overall, not only those
    in the period.
    """

    model_config = ConfigDict(frozen=True)

    period: int
    total_orders: int
    total_revenue: Decimal
    average_order_value: Decimal
    status_counts: Dict[str, int]
    recent_orders: List[RecentOrderDTO]
