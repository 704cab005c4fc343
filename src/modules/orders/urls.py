"""Order URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.orders.views import AdminOrderViewSet, CheckoutViewSet, OrderViewSet

router = DefaultRouter(trailing_slash=True)
router.register("payments/checkout", CheckoutViewSet, basename="checkout")
router.register("orders", OrderViewSet, basename="order")
router.register("admin/orders", AdminOrderViewSet, basename="admin-order")

urlpatterns = router.urls
