"""Unit tests for cart DTOs.

Covers:
- Category inference when the storefront omits ``category``.
- Title validation and total derivation.
- Apparel size breakdowns.
- RemoveManyDTO aliases.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from modules.cart.dtos import (
    ApparelLineDTO,
    BulkLineDTO,
    CustomDesignLineDTO,
    RemoveManyDTO,
    add_line_adapter,
)

pytestmark = pytest.mark.unit


class TestCategoryInference:
    def test_default_is_custom_design(self):
        dto = add_line_adapter.validate_python({"title": "Sticker", "total": 5})
        assert isinstance(dto, CustomDesignLineDTO)

    def test_size_breakdown_means_apparel(self):
        dto = add_line_adapter.validate_python(
            {"title": "Tee", "sizeAndQuantity": {"M": 2}}
        )
        assert isinstance(dto, ApparelLineDTO)

    def test_explicit_bulk(self):
        dto = add_line_adapter.validate_python(
            {"category": "bulk", "title": "Mugs", "quantity": 50, "productId": "mug-1"}
        )
        assert isinstance(dto, BulkLineDTO)
        assert dto.product_id == "mug-1"

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            add_line_adapter.validate_python({"category": "poster", "title": "X"})


class TestLineFields:
    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError, match="Title must not be empty"):
            add_line_adapter.validate_python({"title": "   "})

    def test_title_stripped(self):
        dto = add_line_adapter.validate_python({"title": "  Sticker  "})
        assert dto.line_fields()["title"] == "Sticker"

    def test_total_derived_from_components(self):
        dto = add_line_adapter.validate_python(
            {
                "title": "Sticker",
                "productTotal": "10.00",
                "imprintTotal": "2.50",
                "optionsTotal": "1.25",
            }
        )
        assert dto.line_fields()["total"] == Decimal("13.75")

    def test_explicit_total_wins(self):
        dto = add_line_adapter.validate_python(
            {"title": "Sticker", "grandTotal": "9.99", "productTotal": "100"}
        )
        assert dto.line_fields()["total"] == Decimal("9.99")

    def test_no_prices_leaves_total_empty(self):
        fields = add_line_adapter.validate_python({"title": "Sticker"}).line_fields()
        assert fields["total"] is None
        assert fields["image_url"] == ""
        assert "quantity" not in fields

    def test_negative_total_rejected(self):
        with pytest.raises(ValidationError):
            add_line_adapter.validate_python({"title": "Sticker", "total": "-1"})

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            add_line_adapter.validate_python({"title": "Sticker", "quantity": 0})

    def test_order_notes_alias(self):
        dto = add_line_adapter.validate_python({"title": "Sticker", "orderNotes": "matte"})
        assert dto.line_fields()["notes"] == "matte"


class TestApparelLine:
    def test_quantity_from_sizes_and_zero_sizes_dropped(self):
        dto = add_line_adapter.validate_python(
            {
                "category": "apparel",
                "title": "Tee",
                "sizes": {"S": 2, "M": 0, "L": 3},
                "colorsName": "Navy",
                "colorsCode": "#000080",
            }
        )
        fields = dto.line_fields()
        assert fields["size_quantities"] == {"S": 2, "L": 3}
        assert fields["quantity"] == 5
        assert fields["color_name"] == "Navy"
        assert fields["color_code"] == "#000080"

    def test_explicit_quantity_kept(self):
        dto = add_line_adapter.validate_python(
            {"category": "apparel", "title": "Tee", "quantity": 4, "sizes": {"S": 1}}
        )
        assert dto.line_fields()["quantity"] == 4

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            add_line_adapter.validate_python(
                {"category": "apparel", "title": "Tee", "sizes": {"S": -1}}
            )


class TestRemoveManyDTO:
    @pytest.mark.parametrize("key", ["line_ids", "lineIds", "cartItemIds"])
    def test_aliases(self, key):
        assert RemoveManyDTO.model_validate({key: ["a", "b"]}).line_ids == ["a", "b"]

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            RemoveManyDTO.model_validate({"lineIds": []})
