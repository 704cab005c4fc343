"""Catalog URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.catalog.views import ApparelProductViewSet

router = DefaultRouter(trailing_slash=True)
router.register("products", ApparelProductViewSet, basename="catalog-product")

urlpatterns = router.urls
