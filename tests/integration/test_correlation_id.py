"""Correlation id propagation through ``RequestContextMiddleware``."""

import logging
import uuid

import pytest

pytestmark = pytest.mark.integration

CATALOG_URL = "/api/v1/catalog/products/"


def _messages(caplog, event):
    return [r.getMessage() for r in caplog.records if event in r.getMessage()]


class TestCorrelationIdMiddleware:
    def test_echoes_caller_request_id(self, api_client):
        response = api_client.get(CATALOG_URL, HTTP_X_REQUEST_ID="storefront-7f3a")
        assert response["X-Request-ID"] == "storefront-7f3a"

    def test_generates_uuid4_without_header(self, api_client):
        request_id = api_client.get(CATALOG_URL)["X-Request-ID"]
        assert uuid.UUID(request_id).version == 4

    def test_each_request_gets_its_own_id(self, api_client):
        first = api_client.get(CATALOG_URL)["X-Request-ID"]
        second = api_client.get(CATALOG_URL)["X-Request-ID"]
        assert first != second

    def test_request_log_carries_id(self, api_client, caplog):
        with caplog.at_level(logging.INFO):
            api_client.get(CATALOG_URL, HTTP_X_REQUEST_ID="req-finished-1")

        finished = _messages(caplog, "request.finished")
        assert finished and "req-finished-1" in finished[-1]

    def test_domain_events_carry_id(self, auth_client, caplog):
        with caplog.at_level(logging.INFO):
            auth_client.post(
                "/api/v1/cart/",
                {"title": "Custom Sticker", "quantity": 2, "total": "10.00"},
                format="json",
                HTTP_X_REQUEST_ID="cart-add-42",
            )

        added = _messages(caplog, "cart.line_added")
        assert added and "cart-add-42" in added[-1]
