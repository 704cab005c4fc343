"""Unit tests for the CSV exports."""

from __future__ import annotations

import csv
import io
from decimal import Decimal

import pytest

from modules.orders.exports import (
    ORDER_ITEMS_HEADER,
    ORDERS_HEADER,
    export_order_items_csv,
    export_orders_csv,
)
from modules.orders.models import Order

pytestmark = pytest.mark.unit

BASE_URL = "https://api.shop.test"


def _rows(content: str):
    return list(csv.reader(io.StringIO(content)))


class TestExportOrdersCsv:
    def test_header_and_one_row_per_order(self, order_factory):
        first = order_factory()
        second = order_factory(customer_first_name="Grace", customer_last_name="Hopper")

        rows = _rows(export_orders_csv(Order.objects.select_related("payment")))

        assert rows[0] == ORDERS_HEADER
        assert len(rows) == 3
        numbers = {row[0] for row in rows[1:]}
        assert numbers == {first.order_number, second.order_number}

    def test_row_contents(self, order_factory):
        order = order_factory()

        row = _rows(export_orders_csv([order]))[1]

        assert row == [
            order.order_number,
            order.order_date.date().isoformat(),
            "order_placed",
            "Ada Lovelace",
            "ada@example.com",
            "21.20",
            "completed",
            "T1",
        ]

    def test_empty_export_has_header_only(self):
        assert _rows(export_orders_csv([])) == [ORDERS_HEADER]


class TestExportOrderItemsCsv:
    def test_one_row_per_item(self, order_factory):
        order = order_factory(
            items=[
                {
                    "title": "Sticker",
                    "quantity": 2,
                    "unit_price": Decimal("1.00"),
                    "total_price": Decimal("2.00"),
                    "position": 0,
                },
                {
                    "title": "Tee",
                    "quantity": 1,
                    "unit_price": Decimal("13.20"),
                    "total_price": Decimal("13.20"),
                    "position": 1,
                },
            ]
        )

        rows = _rows(export_order_items_csv(order, BASE_URL))

        assert rows[0] == ORDER_ITEMS_HEADER
        assert len(rows[0]) == 28
        assert [row[17] for row in rows[1:]] == ["Sticker", "Tee"]
        assert all(len(row) == 28 for row in rows)

    def test_order_columns_repeated(self, order_factory):
        order = order_factory(
            customer_address={
                "street": "1 Analytical Way",
                "city": "London",
                "state": "LDN",
                "zipCode": "10001",
                "country": "UK",
            }
        )

        row = dict(zip(ORDER_ITEMS_HEADER, _rows(export_order_items_csv(order, BASE_URL))[1]))

        assert row["Order Number"] == order.order_number
        assert row["Customer Phone"] == "555-0100"
        assert row["Billing ZIP"] == "10001"
        assert row["Shipping Method"] == "Standard"
        assert row["Shipping Country"] == ""

    def test_urls_made_absolute_and_lists_joined(self, order_factory):
        order = order_factory(
            items=[
                {
                    "title": "Sticker",
                    "quantity": 1,
                    "unit_price": Decimal("5.00"),
                    "total_price": Decimal("5.00"),
                    "image_url": "/uploads/sticker.png",
                    "imprint_files": [
                        "uploads/front.png",
                        "https://cdn.test/back.png",
                    ],
                    "options": ["Glossy", "Die cut"],
                    "notes": "rush",
                }
            ]
        )

        row = dict(zip(ORDER_ITEMS_HEADER, _rows(export_order_items_csv(order, BASE_URL))[1]))

        assert row["Item Image URL"] == "https://api.shop.test/uploads/sticker.png"
        assert row["Imprint Files"] == (
            "https://api.shop.test/uploads/front.png | https://cdn.test/back.png"
        )
        assert row["Options"] == "Glossy | Die cut"
        assert row["Order Notes"] == "rush"
        assert row["Unit Price"] == "5.00"
