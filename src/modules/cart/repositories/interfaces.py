"""Cart repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.cart.models import CartLine


class ICartRepository(IRepository["CartLine"]):
    """Repository contract for cart lines."""

    @abstractmethod
    def list_for_owner(self, owner: str) -> List[CartLine]:
        """All lines owned by ``owner``, oldest first."""

    @abstractmethod
    def get_many(self, ids: Iterable[str]) -> List[CartLine]:
        """Lines matching any of ``ids``, regardless of owner."""

    @abstractmethod
    def delete_many(self, ids: Iterable[str]) -> int:
        """Delete lines by id; returns the number of rows removed."""

    @abstractmethod
    def delete_for_owner(self, owner: str) -> int:
        """Delete every line owned by ``owner``."""
