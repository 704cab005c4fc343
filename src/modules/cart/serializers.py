"""Cart DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.cart.models import CartLine


class CartLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = CartLine
        fields = [
            "id",
            "category",
            "product_id",
            "title",
            "image_url",
            "imprint_files",
            "imprint_locations",
            "size",
            "size_quantities",
            "color_name",
            "color_code",
            "options",
            "quantity",
            "total",
            "product_total",
            "imprint_total",
            "options_total",
            "notes",
            "created_at",
        ]
        read_only_fields = fields
