"""Order service layer (Use Cases).

Post-checkout order management: admin status changes, notes, shipping
updates and dashboard stats, plus the buyer's own order views and
reorder.  Order creation lives in ``checkout.py``.

Rules enforced:
- Status must be one of the five ``OrderStatus`` values; any status may
  follow any other.
- Every status update appends a history entry, even when the status does
  not change.
- Admin notes are never blank.
- Buyers only ever see their own orders.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from modules.cart.constants import LineCategory
from modules.cart.dtos import add_line_adapter
from modules.notifications.tasks import send_status_update_task
from modules.orders.constants import (
    DEFAULT_STATS_PERIOD_DAYS,
    RECENT_ORDERS_LIMIT,
    OrderStatus,
)
from modules.orders.dtos import OrderStatsDTO, RecentOrderDTO
from modules.orders.exceptions import InvalidAdminNote, InvalidOrderStatus, OrderNotFound

if TYPE_CHECKING:
    from modules.cart.models import CartLine
    from modules.cart.services import CartService
    from modules.orders.dtos import UpdateShippingDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_CENTS = Decimal("0.01")
_SHIPPING_TEXT_FIELDS = ("tracking_number", "shipping_method")


class OrderService:
    """Application service for order management use-cases.

    Receives its collaborators via constructor injection.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        cart_service: Optional[CartService] = None,
    ) -> None:
        self._order_repo = order_repository
        self._cart = cart_service

    # ------------------------------------------------------------------
    # Admin commands
    # ------------------------------------------------------------------

    def update_status(
        self,
        order_id: str,
        new_status: str,
        note: Optional[str] = None,
        user: Any = None,
    ) -> Order:
        """Set the order status and append a history entry.

        Locks the order row while writing.  The buyer is notified
        asynchronously afterwards; a dispatch failure is logged and does
        not affect the returned order.

        Raises:
            InvalidOrderStatus: ``new_status`` is not an order status.
            OrderNotFound: order does not exist.
        """
        if new_status not in OrderStatus.values:
            raise InvalidOrderStatus(
                f"Invalid status '{new_status}'. "
                f"Expected one of: {', '.join(OrderStatus.values)}."
            )

        with transaction.atomic():
            order = self._order_repo.get_for_update(order_id)
            if not order:
                raise OrderNotFound(f"Order {order_id} not found.")

            log = logger.bind(
                order_id=str(order_id),
                old_status=order.status,
                new_status=new_status,
            )
            order.status = new_status
            order.save(update_fields=["status", "updated_at"])
            self._order_repo.add_history(order, new_status, note or "", user)
            log.info("order.status_updated")

        self._notify_status_change(order, new_status, note)
        return self._order_repo.get_by_id(str(order_id)) or order

    @transaction.atomic
    def add_admin_note(self, order_id: str, note: str) -> Order:
        """Replace the admin-only note.

        Raises:
            InvalidAdminNote: note is blank.
            OrderNotFound: order does not exist.
        """
        if not note or not note.strip():
            raise InvalidAdminNote("Admin note is required.")

        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        order.admin_notes = note.strip()
        order.save(update_fields=["admin_notes", "updated_at"])
        logger.info("order.admin_note_added", order_id=str(order_id))
        return self._order_repo.get_by_id(str(order_id)) or order

    @transaction.atomic
    def update_shipping(self, order_id: str, dto: UpdateShippingDTO) -> Order:
        """Apply only the shipping fields present in ``dto``.

        Raises:
            OrderNotFound: order does not exist.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        changes = dto.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if field in _SHIPPING_TEXT_FIELDS and value is None:
                value = ""
            setattr(order, field, value)

        if changes:
            order.save(update_fields=[*changes, "updated_at"])
        logger.info(
            "order.shipping_updated",
            order_id=str(order_id),
            fields=sorted(changes),
        )
        return self._order_repo.get_by_id(str(order_id)) or order

    # ------------------------------------------------------------------
    # Admin queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Raises ``OrderNotFound`` if the order does not exist."""
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        return self._order_repo.list(filters)

    def order_stats(self, period_days: int = DEFAULT_STATS_PERIOD_DAYS) -> OrderStatsDTO:
        since = timezone.now() - timedelta(days=period_days)
        in_period = self._order_repo.queryset({"created_at__gte": since}).order_by()

        totals = in_period.aggregate(count=Count("id"), revenue=Sum("total"))
        total_orders = totals["count"] or 0
        total_revenue = (totals["revenue"] or Decimal("0")).quantize(_CENTS)
        average = (
            (total_revenue / total_orders).quantize(_CENTS)
            if total_orders
            else Decimal("0.00")
        )
        status_counts = {
            row["status"]: row["count"]
            for row in in_period.values("status").annotate(count=Count("id"))
        }
        recent = self._order_repo.queryset()[:RECENT_ORDERS_LIMIT]

        return OrderStatsDTO(
            period=period_days,
            total_orders=total_orders,
            total_revenue=total_revenue,
            average_order_value=average,
            status_counts=status_counts,
            recent_orders=[RecentOrderDTO.model_validate(order) for order in recent],
        )

    # ------------------------------------------------------------------
    # Buyer queries / commands
    # ------------------------------------------------------------------

    def list_orders_for(self, identity: str) -> List[Order]:
        return self._order_repo.list_for_owner(identity)

    def get_order_for(self, identity: str, order_id: str) -> Order:
        """Raises ``OrderNotFound`` unless ``identity`` placed the order."""
        order = self._order_repo.get_for_owner(order_id, identity)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    @transaction.atomic
    def reorder(self, identity: str, order_id: str) -> List[CartLine]:
        """Copy the items of a past order back into the buyer's cart.

        Raises:
            OrderNotFound: order does not exist or belongs to someone else.
        """
        if self._cart is None:
            raise RuntimeError("OrderService.reorder requires a cart service.")

        order = self.get_order_for(identity, order_id)
        lines = []
        for item in order.items.all():
            dto = add_line_adapter.validate_python(
                {
                    "category": (
                        item.category if item.category in LineCategory.values else None
                    ),
                    "product_id": item.product_id,
                    "title": item.title,
                    "image_url": item.image_url or None,
                    "size": item.size,
                    "size_quantities": item.size_quantities,
                    "color_name": item.color_name,
                    "color_code": item.color_code,
                    "options": item.options,
                    "quantity": item.quantity,
                    "total": item.total_price,
                    "imprint_files": item.imprint_files,
                    "imprint_locations": item.imprint_locations,
                    "notes": item.notes,
                }
            )
            lines.append(self._cart.add(identity, dto))

        logger.info(
            "order.reordered",
            order_id=str(order_id),
            owner=identity,
            added=len(lines),
        )
        return lines

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _notify_status_change(
        self, order: Order, new_status: str, note: Optional[str]
    ) -> None:
        try:
            send_status_update_task.delay(
                order.customer_email,
                order.order_number,
                new_status,
                note,
                order.customer_name,
            )
        except Exception as exc:
            logger.error(
                "order.status_notification_dispatch_failed",
                order_id=str(order.id),
                error=str(exc),
            )
