"""Order DRF serializers (read side).

Input validation lives in the pydantic DTOs (``dtos.py``).  The buyer
serializers never expose ``admin_notes``; the admin ones extend them.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem, OrderPayment, OrderStatusHistory


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "category",
            "title",
            "image_url",
            "size",
            "size_quantities",
            "color_name",
            "color_code",
            "options",
            "quantity",
            "unit_price",
            "total_price",
            "imprint_files",
            "imprint_locations",
            "notes",
        ]
        read_only_fields = fields


class OrderPaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderPayment
        fields = [
            "method",
            "transaction_id",
            "auth_code",
            "amount",
            "currency",
            "status",
            "paid_at",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = ["id", "status", "note", "created_at"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Full order as its owner sees it."""

    items = OrderItemSerializer(many=True, read_only=True)
    payment = OrderPaymentSerializer(read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "order_date",
            "status",
            "customer_first_name",
            "customer_last_name",
            "customer_email",
            "customer_phone",
            "customer_address",
            "items",
            "payment",
            "subtotal",
            "tax",
            "shipping_cost",
            "discount",
            "total",
            "shipping_method",
            "tracking_number",
            "estimated_delivery",
            "actual_delivery",
            "shipping_address",
            "status_history",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AdminOrderSerializer(OrderSerializer):
    class Meta(OrderSerializer.Meta):
        fields = [*OrderSerializer.Meta.fields, "owner", "admin_notes"]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists (no nested relations)."""

    customer_name = serializers.CharField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "order_date",
            "status",
            "customer_name",
            "customer_email",
            "total",
            "tracking_number",
            "created_at",
        ]
        read_only_fields = fields


class CheckoutOrderSerializer(serializers.ModelSerializer):
    """Summary returned by a successful checkout."""

    class Meta:
        model = Order
        fields = ["id", "order_number", "total", "status"]
        read_only_fields = fields
