"""Catalog DTOs for the Service Layer.

Pydantic v2, immutable (``frozen=True``).  JSON-backed fields are dumped
with ``mode="json"`` before persistence so prices stay exact decimal
strings inside ``JSONField`` columns.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from modules.catalog.models import ProductStatus


class ColorSwatchDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    hex: str
    image: str = ""

    @field_validator("hex")
    @classmethod
    def hex_must_be_color(cls, v: str) -> str:
        value = v.strip()
        if not value.startswith("#") or len(value) not in (4, 7):
            raise ValueError("Colour hex must look like '#fff' or '#ffffff'.")
        return value.lower()


class SizePriceDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    size: str
    price: Decimal

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests."""

    model_config = ConfigDict(frozen=True)

    title: str
    product_image: str
    description: str
    details: List[str] = []
    measurement_table: List[List[Union[str, float]]] = []
    color_swatches: List[ColorSwatchDTO] = []
    prices: List[SizePriceDTO] = []

    @field_validator("title", "description", "product_image")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field must not be empty.")
        return v.strip()

    @field_validator("prices")
    @classmethod
    def sizes_must_be_unique(cls, v: List[SizePriceDTO]) -> List[SizePriceDTO]:
        sizes = [entry.size.upper() for entry in v]
        if len(sizes) != len(set(sizes)):
            raise ValueError("Each size may only be priced once.")
        return v


class UpdateProductDTO(BaseModel):
    """Partial update; only supplied fields are written."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    product_image: Optional[str] = None
    description: Optional[str] = None
    details: Optional[List[str]] = None
    measurement_table: Optional[List[List[Union[str, float]]]] = None
    color_swatches: Optional[List[ColorSwatchDTO]] = None
    prices: Optional[List[SizePriceDTO]] = None
    status: Optional[ProductStatus] = None
