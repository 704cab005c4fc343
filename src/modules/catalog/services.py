"""Catalog service layer (Use Cases).

Apparel product CRUD for the admin back office.  Reads are public;
the view layer restricts writes to staff.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.catalog.exceptions import ProductNotFound
from modules.catalog.models import ApparelProduct

if TYPE_CHECKING:
    from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
    from modules.catalog.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

_JSON_FIELDS = ("details", "measurement_table", "color_swatches", "prices")


class ProductService:
    """Application service for catalog use-cases.

    Receives an ``IProductRepository`` via constructor injection.
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> ApparelProduct:
        data = dto.model_dump(mode="json")
        product = ApparelProduct(**data)
        product = self._repo.save(product)
        logger.info("catalog.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> ApparelProduct:
        """Apply the supplied fields.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        changes = dto.model_dump(mode="json", exclude_none=True)
        for field, value in changes.items():
            setattr(product, field, value)

        product = self._repo.save(product)
        logger.info(
            "catalog.updated",
            product_id=str(id),
            fields=sorted(changes),
        )
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Soft-delete a product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[ApparelProduct]:
        return self._repo.list(filters)

    def get_product(self, id: str) -> ApparelProduct:
        """Raises ``ProductNotFound`` if the product does not exist."""
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product
