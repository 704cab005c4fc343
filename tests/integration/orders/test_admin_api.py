"""Integration tests for the staff order endpoints.

Covers:
- Access control (buyers get 403).
- Listing with status / total / search filters and pagination.
- Status, notes and shipping updates.
- Stats and CSV exports.
"""

from __future__ import annotations

import csv
import io
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from modules.orders.constants import OrderStatus
from modules.orders.exports import ORDER_ITEMS_HEADER, ORDERS_HEADER
from modules.orders.models import Order

pytestmark = pytest.mark.integration

ADMIN_URL = "/api/v1/admin/orders/"


class TestAdminAccess:
    def test_buyer_forbidden(self, auth_client):
        assert auth_client.get(ADMIN_URL).status_code == 403

    def test_anonymous_rejected(self, api_client):
        assert api_client.get(ADMIN_URL).status_code == 401


class TestAdminList:
    def test_paginated_list(self, admin_api_client, order_factory):
        order_factory()
        order_factory()

        response = admin_api_client.get(ADMIN_URL, {"limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert len(body["results"]) == 1
        assert body["results"][0]["customer_name"] == "Ada Lovelace"

    def test_status_filter(self, admin_api_client, order_factory):
        order_factory()
        done = order_factory(status=OrderStatus.COMPLETED)

        response = admin_api_client.get(ADMIN_URL, {"status": "completed"})

        assert [o["id"] for o in response.json()["results"]] == [str(done.id)]

    def test_status_all_means_no_filter(self, admin_api_client, order_factory):
        order_factory()
        order_factory(status=OrderStatus.CANCELLED)

        response = admin_api_client.get(ADMIN_URL, {"status": "all"})

        assert response.json()["count"] == 2

    def test_unknown_status_matches_nothing(self, admin_api_client, order_factory):
        order_factory()

        response = admin_api_client.get(ADMIN_URL, {"status": "shipped"})

        assert response.json()["count"] == 0

    def test_total_range_filter(self, admin_api_client, order_factory):
        order_factory(total=Decimal("10.00"))
        big = order_factory(total=Decimal("150.00"))

        response = admin_api_client.get(ADMIN_URL, {"min_total": "100"})

        assert [o["id"] for o in response.json()["results"]] == [str(big.id)]

    def test_date_range_filter(self, admin_api_client, order_factory):
        old = order_factory()
        Order.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=10))
        recent = order_factory()

        start = (timezone.now() - timedelta(days=1)).date().isoformat()
        response = admin_api_client.get(ADMIN_URL, {"start_date": start})

        assert [o["id"] for o in response.json()["results"]] == [str(recent.id)]

    def test_search_by_customer_email(self, admin_api_client, order_factory):
        order_factory()
        grace = order_factory(customer_email="grace@example.com")

        response = admin_api_client.get(ADMIN_URL, {"search": "grace@"})

        assert [o["id"] for o in response.json()["results"]] == [str(grace.id)]

    def test_search_by_order_number(self, admin_api_client, order_factory):
        order_factory()
        target = order_factory()

        response = admin_api_client.get(ADMIN_URL, {"search": target.order_number})

        assert [o["id"] for o in response.json()["results"]] == [str(target.id)]

    def test_retrieve_includes_admin_fields(self, admin_api_client, order_factory):
        order = order_factory(owner="buyer-9", admin_notes="VIP")

        body = admin_api_client.get(f"{ADMIN_URL}{order.id}/").json()

        assert body["admin_notes"] == "VIP"
        assert body["owner"] == "buyer-9"

    def test_retrieve_unknown_is_404(self, admin_api_client):
        response = admin_api_client.get(f"{ADMIN_URL}00000000-0000-0000-0000-000000000000/")
        assert response.status_code == 404


class TestAdminCommands:
    def test_update_status(self, admin_api_client, order_factory, mailoutbox):
        order = order_factory()

        response = admin_api_client.put(
            f"{ADMIN_URL}{order.id}/status/",
            {"status": "order_dispatched", "note": "left warehouse"},
            format="json",
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "order_dispatched"
        assert [h["status"] for h in body["status_history"]] == [
            "order_placed",
            "order_dispatched",
        ]
        assert body["status_history"][-1]["note"] == "left warehouse"
        assert mailoutbox[-1].subject == (
            f"Order Update - {order.order_number} - Order Dispatched"
        )

    def test_update_status_invalid_value(self, admin_api_client, order_factory):
        order = order_factory()

        response = admin_api_client.put(
            f"{ADMIN_URL}{order.id}/status/", {"status": "shipped"}, format="json"
        )

        assert response.status_code == 400

    def test_update_status_unknown_order(self, admin_api_client):
        response = admin_api_client.put(
            f"{ADMIN_URL}00000000-0000-0000-0000-000000000000/status/",
            {"status": "completed"},
            format="json",
        )
        assert response.status_code == 404

    def test_add_note(self, admin_api_client, order_factory):
        order = order_factory()

        response = admin_api_client.put(
            f"{ADMIN_URL}{order.id}/notes/", {"note": "call first"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["admin_notes"] == "call first"

    def test_blank_note_is_400(self, admin_api_client, order_factory):
        order = order_factory()

        response = admin_api_client.put(
            f"{ADMIN_URL}{order.id}/notes/", {"note": "  "}, format="json"
        )

        assert response.status_code == 400

    def test_update_shipping(self, admin_api_client, order_factory):
        order = order_factory()

        response = admin_api_client.patch(
            f"{ADMIN_URL}{order.id}/shipping/",
            {"trackingNumber": "1Z999", "estimatedDelivery": "2030-01-15T12:00:00Z"},
            format="json",
        )

        assert response.status_code == 200
        body = response.json()
        assert body["tracking_number"] == "1Z999"
        assert body["estimated_delivery"].startswith("2030-01-15")
        assert body["shipping_method"] == "Standard"


class TestAdminReports:
    def test_stats(self, admin_api_client, order_factory):
        order_factory()
        order_factory(status=OrderStatus.COMPLETED, total=Decimal("10.00"))

        response = admin_api_client.get(f"{ADMIN_URL}stats/", {"period": 7})

        assert response.status_code == 200
        body = response.json()
        assert body["period"] == 7
        assert body["total_orders"] == 2
        assert body["total_revenue"] == "31.20"
        assert body["average_order_value"] == "15.60"
        assert body["status_counts"] == {"order_placed": 1, "completed": 1}
        assert len(body["recent_orders"]) == 2

    @pytest.mark.parametrize("period", ["0", "-3", "abc", "3651", "1000000000"])
    def test_stats_bad_period(self, admin_api_client, period):
        response = admin_api_client.get(f"{ADMIN_URL}stats/", {"period": period})
        assert response.status_code == 400

    def test_stats_longest_period(self, admin_api_client, order_factory):
        order_factory()

        response = admin_api_client.get(f"{ADMIN_URL}stats/", {"period": 3650})

        assert response.status_code == 200
        assert response.json()["total_orders"] == 1

    def test_export_all(self, admin_api_client, order_factory):
        order_factory()
        order_factory(status=OrderStatus.COMPLETED)

        response = admin_api_client.get(f"{ADMIN_URL}export/", {"status": "completed"})

        assert response.status_code == 200
        assert response["Content-Type"].startswith("text/csv")
        assert "orders.csv" in response["Content-Disposition"]
        rows = list(csv.reader(io.StringIO(response.content.decode())))
        assert rows[0] == ORDERS_HEADER
        assert len(rows) == 2
        assert rows[1][2] == "completed"

    def test_export_one(self, admin_api_client, order_factory):
        order = order_factory()

        response = admin_api_client.get(f"{ADMIN_URL}{order.id}/export/")

        assert response.status_code == 200
        assert f"order-{order.order_number}.csv" in response["Content-Disposition"]
        rows = list(csv.reader(io.StringIO(response.content.decode())))
        assert rows[0] == ORDER_ITEMS_HEADER
        row = dict(zip(ORDER_ITEMS_HEADER, rows[1]))
        assert row["Item Image URL"] == "https://api.shop.test/uploads/sticker.png"

    def test_export_one_unknown_is_404(self, admin_api_client):
        response = admin_api_client.get(
            f"{ADMIN_URL}00000000-0000-0000-0000-000000000000/export/"
        )
        assert response.status_code == 404
