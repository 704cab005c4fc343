"""Cart DTOs.

A cart line is a tagged union discriminated by ``category``:

- ``CustomDesignLineDTO``: an uploaded design printed as stickers/transfers.
- ``ApparelLineDTO``: a catalog garment with a size/quantity breakdown.
- ``BulkLineDTO``: a catalog item ordered by plain quantity.

The storefront does not always send ``category``; ``add_line_adapter``
infers it (a size breakdown means apparel, anything else is a custom
design).  Field names accept both snake_case and the storefront's
camelCase keys.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel

from modules.cart.constants import LineCategory

_LINE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)

Money = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


class _CartLineBase(BaseModel):
    model_config = _LINE_CONFIG

    title: str
    image_url: Optional[str] = None
    options: List[str] = []
    quantity: Optional[int] = Field(default=None, ge=1)
    total: Optional[Money] = Field(
        default=None, validation_alias=AliasChoices("total", "grandTotal")
    )
    product_total: Optional[Money] = None
    imprint_total: Optional[Money] = None
    options_total: Optional[Money] = None
    notes: str = Field(
        default="", validation_alias=AliasChoices("notes", "orderNotes")
    )

    @field_validator("title")
    @classmethod
    def title_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Title must not be empty.")
        return v.strip()

    def _derived_total(self) -> Optional[Decimal]:
        if self.total is not None:
            return self.total
        parts = [self.product_total, self.imprint_total, self.options_total]
        if all(part is None for part in parts):
            return None
        return sum((part or Decimal("0") for part in parts), Decimal("0"))

    def line_fields(self) -> Dict[str, Any]:
        """Keyword arguments for a ``CartLine`` row (owner excluded)."""
        fields = self.model_dump(exclude_none=True, by_alias=False)
        fields["total"] = self._derived_total()
        fields["image_url"] = self.image_url or ""
        return fields


class CustomDesignLineDTO(_CartLineBase):
    category: Literal["custom_design"] = "custom_design"
    imprint_files: List[str] = []
    imprint_locations: List[str] = []


class ApparelLineDTO(_CartLineBase):
    category: Literal["apparel"] = "apparel"
    product_id: str = ""
    size: str = ""
    size_quantities: Dict[str, int] = Field(
        default_factory=dict,
        validation_alias=AliasChoices(
            "size_quantities", "sizeQuantities", "sizeAndQuantity", "sizes"
        ),
    )
    color_name: str = Field(
        default="", validation_alias=AliasChoices("color_name", "colorsName")
    )
    color_code: str = Field(
        default="", validation_alias=AliasChoices("color_code", "colorsCode", "color")
    )
    imprint_files: List[str] = []
    imprint_locations: List[str] = []

    @field_validator("size_quantities")
    @classmethod
    def drop_empty_sizes(cls, v: Dict[str, int]) -> Dict[str, int]:
        if any(qty < 0 for qty in v.values()):
            raise ValueError("Size quantities cannot be negative.")
        return {size: qty for size, qty in v.items() if qty}

    def line_fields(self) -> Dict[str, Any]:
        fields = super().line_fields()
        if self.quantity is None and self.size_quantities:
            fields["quantity"] = sum(self.size_quantities.values())
        return fields


class BulkLineDTO(_CartLineBase):
    category: Literal["bulk"] = "bulk"
    product_id: str = ""
    size: str = ""
    color_name: str = Field(
        default="", validation_alias=AliasChoices("color_name", "colorsName")
    )
    color_code: str = Field(
        default="", validation_alias=AliasChoices("color_code", "colorsCode", "color")
    )


def _line_category(value: Any) -> str:
    if isinstance(value, dict):
        category = value.get("category")
        if category:
            return str(category)
        for key in ("size_quantities", "sizeQuantities", "sizeAndQuantity", "sizes"):
            if value.get(key):
                return LineCategory.APPAREL.value
        return LineCategory.CUSTOM_DESIGN.value
    return getattr(value, "category", LineCategory.CUSTOM_DESIGN.value)


AddCartLineDTO = Annotated[
    Union[
        Annotated[CustomDesignLineDTO, Tag(LineCategory.CUSTOM_DESIGN.value)],
        Annotated[ApparelLineDTO, Tag(LineCategory.APPAREL.value)],
        Annotated[BulkLineDTO, Tag(LineCategory.BULK.value)],
    ],
    Discriminator(_line_category),
]

add_line_adapter: TypeAdapter[AddCartLineDTO] = TypeAdapter(AddCartLineDTO)


class RemoveManyDTO(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    line_ids: List[str] = Field(
        validation_alias=AliasChoices("line_ids", "lineIds", "cartItemIds"),
        min_length=1,
    )
