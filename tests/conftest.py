from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

import pytest
from rest_framework.test import APIClient

from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.repositories.django_repository import OrderDjangoRepository
from tests.doubles import FakeGateway


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users / identities
# ---------------------------------------------------------------------------


@pytest.fixture()
def user(django_user_model):
    return django_user_model.objects.create_user(
        username="buyer", email="buyer@example.com", password="buyer-pass-123"
    )


@pytest.fixture()
def other_user(django_user_model):
    return django_user_model.objects.create_user(
        username="other", email="other@example.com", password="other-pass-123"
    )


@pytest.fixture()
def identity(user) -> str:
    return str(user.pk)


@pytest.fixture()
def auth_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def admin_api_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture()
def fake_gateway():
    return FakeGateway()


# ---------------------------------------------------------------------------
# Checkout payloads and orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def checkout_payload() -> Dict[str, Any]:
    return {
        "paymentData": {
            "cardNumber": "4111 1111 1111 1111",
            "expirationDate": "12/30",
            "cvv": "123",
        },
        "customerInfo": {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "email": "ada@example.com",
            "phone": "555-0100",
            "address": {
                "street": "1 Analytical Way",
                "city": "London",
                "state": "LDN",
                "zipCode": "10001",
                "country": "UK",
            },
        },
        "shippingInfo": {
            "method": "Standard",
            "address": {
                "street": "1 Analytical Way",
                "city": "London",
                "state": "LDN",
                "zipCode": "10001",
                "country": "UK",
            },
        },
        "cartItems": [{"title": "Custom Sticker", "quantity": 3, "total": 15.00}],
        "pricing": {
            "subtotal": 15,
            "tax": 1.2,
            "shipping": 5,
            "discount": 0,
            "total": 21.2,
        },
    }


@pytest.fixture()
def order_factory():
    """Create a persisted order with one item, payment and initial history."""
    repo = OrderDjangoRepository()

    def _make(owner: str = "buyer-1", **overrides: Any):
        items = overrides.pop(
            "items",
            [
                {
                    "title": "Custom Sticker",
                    "category": "custom_design",
                    "quantity": 3,
                    "unit_price": Decimal("5.00"),
                    "total_price": Decimal("15.00"),
                    "image_url": "/uploads/sticker.png",
                    "imprint_files": ["/uploads/front.png"],
                }
            ],
        )
        data = {
            "owner": owner,
            "customer_first_name": "Ada",
            "customer_last_name": "Lovelace",
            "customer_email": "ada@example.com",
            "customer_phone": "555-0100",
            "customer_address": {"street": "1 Analytical Way", "city": "London"},
            "subtotal": Decimal("15.00"),
            "tax": Decimal("1.20"),
            "shipping_cost": Decimal("5.00"),
            "discount": Decimal("0.00"),
            "total": Decimal("21.20"),
            "status": OrderStatus.ORDER_PLACED,
            "shipping_method": "Standard",
            "shipping_address": {"street": "1 Analytical Way", "city": "London"},
            "items": items,
            "payment": {
                "method": "Credit Card",
                "transaction_id": "T1",
                "auth_code": "A1B2C3",
                "amount": Decimal("21.20"),
                "currency": "USD",
                "status": PaymentStatus.COMPLETED,
            },
        }
        data.update(overrides)
        order = repo.create(data)
        repo.add_history(order, OrderStatus.ORDER_PLACED, "Order placed")
        return repo.get_by_id(str(order.id))

    return _make
