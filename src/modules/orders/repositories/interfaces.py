"""Order repository interface.

Extends ``IRepository[Order]`` with what the Order aggregate needs:
atomic creation with items and payment, status history, owner-scoped
reads and row locking.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes OrderItem, OrderPayment and OrderStatusHistory
    children.  Creation must be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items and payment record atomically.

        ``data`` holds the ``Order`` field values plus ``items`` (list of
        ``OrderItem`` field dicts) and ``payment`` (``OrderPayment`` fields).
        """

    @abstractmethod
    def add_history(
        self,
        order: Order,
        status: str,
        note: str = "",
        user: Any = None,
    ) -> OrderStatusHistory:
        """Append a status history entry.  Entries are never updated."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock."""

    @abstractmethod
    def get_for_owner(self, id: str, owner: str) -> Optional[Order]:
        """Retrieve an order only if ``owner`` placed it."""

    @abstractmethod
    def list_for_owner(self, owner: str) -> List[Order]:
        """Orders placed by ``owner``, newest first."""

    @abstractmethod
    def queryset(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """Base queryset for admin listing, filtering and stats."""
