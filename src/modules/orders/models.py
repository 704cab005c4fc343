"""Order aggregate models.

- ``Order``: aggregate root.  Items, pricing and the customer snapshot
  are written once at checkout; afterwards only status, shipping fields
  and admin notes change.
- ``OrderItem``: snapshot of a cart line at purchase time.  Nothing is
  re-derived from the catalog later.
- ``OrderPayment``: the captured gateway transaction.
- ``OrderStatusHistory``: append-only status log.
- ``OrderSequence``: per-day counter behind ``order_number``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import structlog
from django.conf import settings
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import OrderStatus, PaymentStatus

logger = structlog.get_logger(__name__)


def _money(**kwargs: Any) -> models.DecimalField:
    kwargs.setdefault("default", Decimal("0.00"))
    return models.DecimalField(max_digits=10, decimal_places=2, **kwargs)


class Order(BaseModel):
    """Order aggregate root.

    ``order_number`` is assigned by ``OrderNumberSequencer`` on first save
    (``ORD`` + ``YYMMDD`` + zero-padded daily sequence).  The UUIDv7 ``id``
    is used for all internal references and API look-ups.
    """

    owner: models.CharField = models.CharField(max_length=255, db_index=True)
    order_number: models.CharField = models.CharField(
        max_length=32, unique=True, editable=False
    )
    order_date: models.DateTimeField = models.DateTimeField(default=timezone.now)

    customer_first_name: models.CharField = models.CharField(max_length=100)
    customer_last_name: models.CharField = models.CharField(max_length=100)
    customer_email: models.EmailField = models.EmailField()
    customer_phone: models.CharField = models.CharField(
        max_length=40, blank=True, default=""
    )
    customer_address: models.JSONField = models.JSONField(default=dict, blank=True)

    subtotal: models.DecimalField = _money()
    tax: models.DecimalField = _money()
    shipping_cost: models.DecimalField = _money()
    discount: models.DecimalField = _money()
    total: models.DecimalField = _money()

    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.ORDER_PLACED,
    )

    shipping_method: models.CharField = models.CharField(
        max_length=100, blank=True, default=""
    )
    tracking_number: models.CharField = models.CharField(
        max_length=100, blank=True, default=""
    )
    estimated_delivery: models.DateTimeField = models.DateTimeField(
        null=True, blank=True
    )
    actual_delivery: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    shipping_address: models.JSONField = models.JSONField(default=dict, blank=True)

    admin_notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(fields=["owner", "-created_at"], name="orders_owner_idx"),
        ]

    @property
    def customer_name(self) -> str:
        return f"{self.customer_first_name} {self.customer_last_name}".strip()

    def pricing_balances(self) -> bool:
        """``subtotal - discount + tax + shipping_cost == total`` within a cent."""
        computed = self.subtotal - self.discount + self.tax + self.shipping_cost
        return abs(computed - self.total) <= Decimal("0.01")

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            from modules.orders.sequencer import OrderNumberSequencer, date_key_for

            self.order_number = OrderNumberSequencer().next_number(
                date_key_for(self.order_date)
            )
            logger.info("order.number_assigned", order_number=self.order_number)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """Snapshot of one purchased cart line.

    Every customization field is optional; not every product type fills
    them all.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    position: models.PositiveIntegerField = models.PositiveIntegerField(default=0)
    product_id: models.CharField = models.CharField(max_length=64, blank=True, default="")
    category: models.CharField = models.CharField(max_length=20, blank=True, default="")
    title: models.CharField = models.CharField(max_length=255)
    image_url: models.CharField = models.CharField(max_length=500, blank=True, default="")
    size: models.CharField = models.CharField(max_length=20, blank=True, default="")
    size_quantities: models.JSONField = models.JSONField(default=dict, blank=True)
    color_name: models.CharField = models.CharField(max_length=64, blank=True, default="")
    color_code: models.CharField = models.CharField(max_length=16, blank=True, default="")
    options: models.JSONField = models.JSONField(default=list, blank=True)
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(default=1)
    unit_price: models.DecimalField = _money()
    total_price: models.DecimalField = _money()
    imprint_files: models.JSONField = models.JSONField(default=list, blank=True)
    imprint_locations: models.JSONField = models.JSONField(default=list, blank=True)
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_items"
        ordering = ["position", "created_at"]

    def __str__(self) -> str:
        return f"{self.title} x{self.quantity} (${self.total_price})"


class OrderPayment(BaseModel):
    order: models.OneToOneField = models.OneToOneField(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="payment",
    )
    method: models.CharField = models.CharField(max_length=50)
    transaction_id: models.CharField = models.CharField(max_length=64, db_index=True)
    auth_code: models.CharField = models.CharField(max_length=32, blank=True, default="")
    amount: models.DecimalField = _money()
    currency: models.CharField = models.CharField(max_length=3, default="USD")
    status: models.CharField = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    paid_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "order_payments"

    def __str__(self) -> str:
        return f"{self.transaction_id} {self.amount} {self.currency} ({self.status})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail of order status changes.

    Rows are only ever inserted.  Setting the same status twice records
    two entries.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    note: models.TextField = models.TextField(blank=True, default="")
    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "order_status_history"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["order", "created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id}: {self.status}"


class OrderSequence(models.Model):
    """Durable per-day counter; one row per ``date_key`` (``YYMMDD``)."""

    date_key: models.CharField = models.CharField(max_length=8, primary_key=True)
    last_value: models.PositiveIntegerField = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "order_sequences"

    def __str__(self) -> str:
        return f"{self.date_key}: {self.last_value}"
