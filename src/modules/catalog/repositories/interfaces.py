"""Catalog repository interface."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.catalog.models import ApparelProduct


class IProductRepository(IRepository["ApparelProduct"]):
    """Repository contract for apparel products.

    ``get_by_id`` and ``list`` only ever see live (non-deleted) rows.
    """
