"""Django ORM implementation of the Order repository.

Writes to the aggregate (Order + items + payment) happen inside one
``transaction.atomic()`` block.  Status updates lock the order row with
``select_for_update()``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.models import Order, OrderItem, OrderPayment, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_PREFETCH = ("items", "status_history")


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        data = dict(data)
        items = data.pop("items", [])
        payment = data.pop("payment")

        order = Order(**data)
        order.save()

        OrderItem.objects.bulk_create(
            [OrderItem(order=order, **item_data) for item_data in items]
        )
        OrderPayment.objects.create(order=order, **payment)

        logger.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
            item_count=len(items),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _base(self):
        return Order.objects.select_related("payment").prefetch_related(*_PREFETCH)

    def get_by_id(self, id: str) -> Optional[Order]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return self._base().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_owner(self, id: str, owner: str) -> Optional[Order]:
        try:
            return self._base().filter(id=id, owner=owner).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = self._base()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_for_owner(self, owner: str) -> List[Order]:
        return list(self._base().filter(owner=owner))

    def queryset(self, filters: Optional[Dict[str, Any]] = None):
        """Un-prefetched queryset, safe for ``values()`` and aggregates."""
        queryset = Order.objects.select_related("payment")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_for_update(self, id: str) -> Optional[Order]:
        """Row-locked read; must run inside a transaction."""
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        logger.info("order.saved", order_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        order = self.get_by_id(id)
        if not order:
            return False
        order.delete()
        logger.info("order.deleted", order_id=str(id))
        return True

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def add_history(
        self,
        order: Order,
        status: str,
        note: str = "",
        user: Any = None,
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order=order,
            status=status,
            note=note or "",
            user=user if isinstance(user, get_user_model()) else None,
        )
        logger.info(
            "order.history_added",
            order_id=str(order.id),
            status=status,
        )
        return history
