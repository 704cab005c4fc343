"""Cart service layer (Use Cases).

Every operation is scoped to the caller's identity.  ``add`` only
requires a display title; the DTO fills in a derived quantity and total
where the client left them out.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List

import structlog
from django.db import transaction

from modules.cart.exceptions import CartLineForbidden, CartLineNotFound
from modules.cart.models import CartLine

if TYPE_CHECKING:
    from modules.cart.dtos import AddCartLineDTO
    from modules.cart.repositories.interfaces import ICartRepository

logger = structlog.get_logger(__name__)


class CartService:
    """Application service for cart use-cases.

    Receives an ``ICartRepository`` via constructor injection.
    """

    def __init__(self, repository: ICartRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add(self, identity: str, dto: AddCartLineDTO) -> CartLine:
        line = CartLine(owner=identity, **dto.line_fields())
        line = self._repo.save(line)
        logger.info(
            "cart.line_added",
            owner=identity,
            line_id=str(line.id),
            category=line.category,
        )
        return line

    @transaction.atomic
    def remove(self, identity: str, line_id: str) -> None:
        """Remove one line.

        Raises:
            CartLineNotFound: no line with this id.
            CartLineForbidden: the line belongs to another identity.
        """
        line = self._repo.get_by_id(line_id)
        if not line:
            raise CartLineNotFound(f"Cart line {line_id} not found.")
        if line.owner != identity:
            logger.warning("cart.remove_forbidden", owner=identity, line_id=line_id)
            raise CartLineForbidden(f"Cart line {line_id} belongs to another user.")
        self._repo.delete(line_id)
        logger.info("cart.line_removed", owner=identity, line_id=line_id)

    @transaction.atomic
    def remove_many(self, identity: str, line_ids: Iterable[str]) -> int:
        """Remove several lines at once and return how many were deleted.

        Ids that do not exist are skipped, but the whole call is refused if
        any id belongs to someone else or if none of them exist.
        """
        requested = list(dict.fromkeys(str(i) for i in line_ids))
        lines = self._repo.get_many(requested)
        if not lines:
            raise CartLineNotFound("No matching cart lines found.")

        foreign = [str(line.id) for line in lines if line.owner != identity]
        if foreign:
            logger.warning("cart.remove_many_forbidden", owner=identity, line_ids=foreign)
            raise CartLineForbidden("Some cart lines belong to another user.")

        removed = self._repo.delete_many([str(line.id) for line in lines])
        logger.info(
            "cart.lines_removed",
            owner=identity,
            requested=len(requested),
            removed=removed,
        )
        return removed

    def clear(self, identity: str) -> int:
        return self._repo.delete_for_owner(identity)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self, identity: str) -> List[CartLine]:
        return self._repo.list_for_owner(identity)
