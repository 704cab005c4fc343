"""Apparel catalog model.

A product is a garment blank that buyers customise with imprints.  Per-size
prices, colour swatches and the measurement table are stored as JSON
because their shape is dictated by the storefront, not queried.

Soft delete via ``deleted_at`` keeps products referenced by past orders
resolvable for exports.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

import structlog
from django.db import models

from modules.core.models import SoftDeleteModel

logger = structlog.get_logger(__name__)


class ProductStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class ApparelProduct(SoftDeleteModel):
    """Catalog entry for a customisable garment.

    ``prices`` is a list of ``{"size": "M", "price": "12.50"}`` entries;
    ``color_swatches`` a list of ``{"name", "hex", "image"}`` entries.
    """

    title = models.CharField(max_length=255)
    product_image = models.URLField(max_length=500)
    description = models.TextField()
    details = models.JSONField(default=list, blank=True)
    measurement_table = models.JSONField(default=list, blank=True)
    color_swatches = models.JSONField(default=list, blank=True)
    prices = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20,
        choices=ProductStatus.choices,
        default=ProductStatus.ACTIVE,
    )

    class Meta:
        db_table = "apparel_products"
        ordering = ["title"]
        indexes = [
            models.Index(fields=["status"], name="apparel_status_idx"),
        ]

    def price_for(self, size: str) -> Optional[Decimal]:
        """Return the listed price for *size*, or ``None`` if it is not offered."""
        for entry in self.prices:
            if str(entry.get("size", "")).upper() == size.upper():
                return Decimal(str(entry["price"]))
        return None

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "catalog.product_created",
                product_id=str(self.id),
                title=self.title,
            )

    def __str__(self) -> str:
        return self.title
