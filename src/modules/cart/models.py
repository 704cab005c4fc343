"""Cart line model.

A cart line is owned by one identity and is never edited in place: it is
created on "add to cart", and destroyed by explicit removal or checkout.
Lines are removed physically, there is no soft delete.

The line type is a union (custom sticker, catalog apparel, bulk item), so
everything beyond ``owner``, ``category`` and ``title`` is optional.
"""

from __future__ import annotations

import structlog
from django.db import models

from modules.cart.constants import LineCategory
from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


def _money(**kwargs) -> models.DecimalField:
    return models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, **kwargs
    )


class CartLine(BaseModel):
    owner = models.CharField(max_length=255, db_index=True)
    category = models.CharField(
        max_length=20,
        choices=LineCategory.choices,
        default=LineCategory.CUSTOM_DESIGN,
    )
    product_id = models.CharField(max_length=64, blank=True, default="")
    title = models.CharField(max_length=255)
    image_url = models.URLField(max_length=500, blank=True, default="")
    imprint_files = models.JSONField(default=list, blank=True)
    imprint_locations = models.JSONField(default=list, blank=True)
    size = models.CharField(max_length=20, blank=True, default="")
    size_quantities = models.JSONField(default=dict, blank=True)
    color_name = models.CharField(max_length=64, blank=True, default="")
    color_code = models.CharField(max_length=16, blank=True, default="")
    options = models.JSONField(default=list, blank=True)
    quantity = models.PositiveIntegerField(null=True, blank=True)
    total = _money()
    product_total = _money()
    imprint_total = _money()
    options_total = _money()
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "cart_lines"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["owner", "created_at"], name="cart_owner_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.title} x{self.quantity or 0} ({self.owner})"
