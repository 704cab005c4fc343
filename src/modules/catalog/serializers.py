"""Catalog DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.catalog.models import ApparelProduct


class ApparelProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = ApparelProduct
        fields = [
            "id",
            "title",
            "product_image",
            "description",
            "details",
            "measurement_table",
            "color_swatches",
            "prices",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
