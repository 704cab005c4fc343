"""CSV renderers over the Order aggregate.

Read-only.  Every item field is optional; missing values render as empty
cells.  Relative asset paths are made absolute against the backend base
URL so the file is usable outside the admin panel.
"""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from modules.notifications.dispatcher import absolute_url

if TYPE_CHECKING:
    from modules.orders.models import Order

LIST_SEPARATOR = " | "

ORDERS_HEADER = [
    "Order Number",
    "Order Date",
    "Status",
    "Customer Name",
    "Customer Email",
    "Total Amount",
    "Payment Status",
    "Transaction ID",
]

ORDER_ITEMS_HEADER = [
    "Order Number",
    "Order Date",
    "Status",
    "Customer Name",
    "Customer Email",
    "Customer Phone",
    "Billing Street",
    "Billing City",
    "Billing State",
    "Billing ZIP",
    "Billing Country",
    "Shipping Method",
    "Shipping Street",
    "Shipping City",
    "Shipping State",
    "Shipping ZIP",
    "Shipping Country",
    "Item Title",
    "Item Quantity",
    "Unit Price",
    "Total Price",
    "Size",
    "Colors Name",
    "Colors Code",
    "Options",
    "Order Notes",
    "Item Image URL",
    "Imprint Files",
]


def _render(header: List[str], rows: Iterable[List[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    for row in rows:
        writer.writerow(["" if value is None else value for value in row])
    return buffer.getvalue()


def _address_parts(address: Optional[Dict[str, Any]]) -> List[str]:
    address = address or {}
    return [
        address.get("street", ""),
        address.get("city", ""),
        address.get("state", ""),
        address.get("zipCode") or address.get("zip_code") or address.get("zip", ""),
        address.get("country", ""),
    ]


def _payment_field(order: Order, field: str) -> str:
    payment = getattr(order, "payment", None)
    return getattr(payment, field, "") if payment else ""


def export_orders_csv(orders: Iterable[Order]) -> str:
    """One row per order."""
    rows = (
        [
            order.order_number,
            order.order_date.date().isoformat() if order.order_date else "",
            order.status,
            order.customer_name,
            order.customer_email,
            order.total,
            _payment_field(order, "status"),
            _payment_field(order, "transaction_id"),
        ]
        for order in orders
    )
    return _render(ORDERS_HEADER, rows)


def export_order_items_csv(order: Order, base_url: str) -> str:
    """One row per item of ``order``, with the order's details repeated."""
    order_columns = [
        order.order_number,
        order.order_date.isoformat() if order.order_date else "",
        order.status,
        order.customer_name,
        order.customer_email,
        order.customer_phone,
        *_address_parts(order.customer_address),
        order.shipping_method,
        *_address_parts(order.shipping_address),
    ]
    rows = (
        order_columns
        + [
            item.title,
            item.quantity,
            item.unit_price,
            item.total_price,
            item.size,
            item.color_name,
            item.color_code,
            LIST_SEPARATOR.join(item.options or []),
            item.notes,
            absolute_url(item.image_url, base_url),
            LIST_SEPARATOR.join(
                absolute_url(path, base_url) for path in item.imprint_files or []
            ),
        ]
        for item in order.items.all()
    )
    return _render(ORDER_ITEMS_HEADER, rows)
