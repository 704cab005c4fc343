"""Plain-data snapshot of an order for notifications.

Values are JSON-safe (money as strings, dates as ISO strings) so the
snapshot can travel through the task queue.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem


def _item_snapshot(item: OrderItem) -> Dict[str, Any]:
    return {
        "title": item.title,
        "image_url": item.image_url,
        "size": item.size,
        "color_name": item.color_name,
        "options": list(item.options or []),
        "quantity": item.quantity,
        "unit_price": str(item.unit_price),
        "total_price": str(item.total_price),
    }


def order_snapshot(order: Order) -> Dict[str, Any]:
    return {
        "order_number": order.order_number,
        "order_date": order.order_date.isoformat(),
        "status": order.status,
        "customer_first_name": order.customer_first_name,
        "customer_last_name": order.customer_last_name,
        "customer_email": order.customer_email,
        "customer_phone": order.customer_phone,
        "customer_address": dict(order.customer_address or {}),
        "items": [_item_snapshot(item) for item in order.items.all()],
        "subtotal": str(order.subtotal),
        "tax": str(order.tax),
        "shipping_cost": str(order.shipping_cost),
        "discount": str(order.discount),
        "total": str(order.total),
        "shipping_method": order.shipping_method,
        "shipping_address": dict(order.shipping_address or {}),
    }
