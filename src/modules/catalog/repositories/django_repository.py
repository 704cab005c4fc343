"""Django ORM implementation of the catalog repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.catalog.models import ApparelProduct
from modules.catalog.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete catalog repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[ApparelProduct]:
        """Returns ``None`` for missing, soft-deleted or malformed IDs."""
        try:
            return ApparelProduct.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[ApparelProduct]:
        return list(self.queryset(filters))

    def queryset(self, filters: Optional[Dict[str, Any]] = None):
        queryset = ApparelProduct.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: ApparelProduct) -> ApparelProduct:
        entity.save()
        logger.info("catalog.product_saved", product_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("catalog.product_soft_deleted", product_id=str(id))
        return True
