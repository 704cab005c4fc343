"""Django ORM implementation of the cart repository."""

from __future__ import annotations

import uuid
from typing import Any, Dict, Iterable, List, Optional

import structlog
from django.db import transaction

from modules.cart.models import CartLine
from modules.cart.repositories.interfaces import ICartRepository

logger = structlog.get_logger(__name__)


def _valid_ids(ids: Iterable[str]) -> List[str]:
    """Drop malformed UUIDs so look-ups never raise on bad client input."""
    valid = []
    for value in ids:
        try:
            valid.append(str(uuid.UUID(str(value))))
        except ValueError:
            continue
    return valid


class CartDjangoRepository(ICartRepository):
    """Concrete cart repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[CartLine]:
        ids = _valid_ids([id])
        if not ids:
            return None
        return CartLine.objects.filter(id=ids[0]).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[CartLine]:
        queryset = CartLine.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_for_owner(self, owner: str) -> List[CartLine]:
        return list(CartLine.objects.filter(owner=owner))

    def get_many(self, ids: Iterable[str]) -> List[CartLine]:
        return list(CartLine.objects.filter(id__in=_valid_ids(ids)))

    @transaction.atomic
    def save(self, entity: CartLine) -> CartLine:
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        line = self.get_by_id(id)
        if not line:
            return False
        line.delete()
        return True

    @transaction.atomic
    def delete_many(self, ids: Iterable[str]) -> int:
        deleted, _ = CartLine.objects.filter(id__in=_valid_ids(ids)).delete()
        return deleted

    @transaction.atomic
    def delete_for_owner(self, owner: str) -> int:
        deleted, _ = CartLine.objects.filter(owner=owner).delete()
        if deleted:
            logger.info("cart.cleared", owner=owner, removed=deleted)
        return deleted
