"""Order API views.

- ``CheckoutViewSet``: ``POST /payments/checkout/``.
- ``OrderViewSet``: the buyer's own orders and reorder.
- ``AdminOrderViewSet``: staff order management, stats and CSV export.

Domain exceptions are caught and translated into HTTP status codes here;
the views never swallow generic exceptions.
"""

from __future__ import annotations

from django.conf import settings
from django.http import HttpResponse
from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.cart.repositories.django_repository import CartDjangoRepository
from modules.cart.serializers import CartLineSerializer
from modules.cart.services import CartService
from modules.core.identity import get_identity
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.checkout import CheckoutService
from modules.orders.constants import DEFAULT_STATS_PERIOD_DAYS, MAX_STATS_PERIOD_DAYS
from modules.orders.dtos import AdminNoteDTO, UpdateShippingDTO, UpdateStatusDTO
from modules.orders.exceptions import (
    CheckoutValidationError,
    InvalidAdminNote,
    InvalidOrderStatus,
    MissingCheckoutData,
    OrderNotFound,
    OrderPersistenceFailed,
    PaymentDeclined,
    PaymentIndeterminate,
)
from modules.orders.exports import export_order_items_csv, export_orders_csv
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    AdminOrderSerializer,
    CheckoutOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
)
from modules.orders.services import OrderService
from modules.payments.exceptions import CardValidationError, GatewayConfigurationError
from modules.payments.gateway import AuthorizeNetGateway

_NOT_FOUND = {"detail": "Order not found."}


def _validation_error(exc: PydanticValidationError) -> Response:
    return Response(
        {"detail": exc.errors(include_url=False, include_context=False)},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _csv_response(content: str, filename: str) -> HttpResponse:
    response = HttpResponse(content, content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f"attachment; filename={filename}"
    return response


class CheckoutViewSet(GenericViewSet):
    """Single-action ViewSet running ``CheckoutService``."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "checkout"
    queryset = Order.objects.none()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CheckoutService(
            gateway=AuthorizeNetGateway(),
            order_repository=OrderDjangoRepository(),
            cart_service=CartService(repository=CartDjangoRepository()),
        )

    def create(self, request: Request) -> Response:
        """POST /api/v1/payments/checkout/

        201 order created; 400 missing/invalid data or declined card;
        202 charged but the order is pending manual review; 502 payment
        outcome unknown; 500 gateway not configured.
        """
        try:
            result = self._service.checkout(
                get_identity(request), request.data, user=request.user
            )
        except MissingCheckoutData as exc:
            return Response(
                {
                    "success": False,
                    "error": "Missing required payment information",
                    "missing": exc.missing,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        except CheckoutValidationError as exc:
            return Response(
                {"success": False, "error": str(exc), "details": exc.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except CardValidationError as exc:
            return Response(
                {"success": False, "error": exc.message, "field": exc.field},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except PaymentDeclined as exc:
            return Response(
                {"success": False, "message": "Payment failed", "error": exc.reason},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except PaymentIndeterminate:
            return Response(
                {
                    "success": False,
                    "error": (
                        "Payment status unknown. Please do not retry; "
                        "contact support to confirm whether you were charged."
                    ),
                },
                status=status.HTTP_502_BAD_GATEWAY,
            )
        except OrderPersistenceFailed as exc:
            return Response(
                {
                    "success": True,
                    "message": "Payment received, order confirmation pending",
                    "transactionId": exc.transaction_id,
                },
                status=status.HTTP_202_ACCEPTED,
            )
        except GatewayConfigurationError:
            return Response(
                {"success": False, "error": "Payment service is not configured."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(
            {
                "success": True,
                "message": "Payment processed successfully",
                "order": CheckoutOrderSerializer(result.order).data,
                "transactionId": result.transaction_id,
            },
            status=status.HTTP_201_CREATED,
        )


class OrderViewSet(GenericViewSet):
    """The caller's own orders.  ``admin_notes`` is never exposed here."""

    permission_classes = [IsAuthenticated]
    queryset = Order.objects.none()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            cart_service=CartService(repository=CartDjangoRepository()),
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/"""
        orders = self._service.list_orders_for(get_identity(request))
        return Response(OrderSerializer(orders, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order_for(get_identity(request), pk or "")
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def reorder(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/reorder/"""
        try:
            lines = self._service.reorder(get_identity(request), pk or "")
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(
            {
                "message": "Items added to cart successfully",
                "addedItems": len(lines),
                "items": CartLineSerializer(lines, many=True).data,
            }
        )


class AdminOrderViewSet(GenericViewSet):
    """Staff order management via ``OrderService``."""

    permission_classes = [IsAdminUser]
    filterset_class = OrderFilter
    search_fields = [
        "order_number",
        "customer_first_name",
        "customer_last_name",
        "customer_email",
    ]
    ordering_fields = ["created_at", "total", "status", "order_number"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Order.objects.none()
    serializer_class = AdminOrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._repo = OrderDjangoRepository()
        self._service = OrderService(order_repository=self._repo)

    def get_queryset(self):
        return self._repo.queryset()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/orders/

        Filtering (status, date range, total range), search (order number,
        customer name or e-mail) and ordering come from ``filter_backends``.
        """
        queryset = self.filter_queryset(self.get_queryset())
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/admin/orders/{pk}/"""
        try:
            order = self._service.get_order(pk or "")
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(AdminOrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put", "patch"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/admin/orders/{pk}/status/  ``{status, note?}``"""
        try:
            dto = UpdateStatusDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _validation_error(exc)

        try:
            order = self._service.update_status(
                pk or "", dto.status.value, note=dto.note, user=request.user
            )
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(AdminOrderSerializer(order).data)

    @action(detail=True, methods=["put", "patch"], url_path="notes")
    def notes(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/admin/orders/{pk}/notes/  ``{note}``"""
        try:
            dto = AdminNoteDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _validation_error(exc)

        try:
            order = self._service.add_admin_note(pk or "", dto.note)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except InvalidAdminNote as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(AdminOrderSerializer(order).data)

    @action(detail=True, methods=["put", "patch"], url_path="shipping")
    def shipping(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/admin/orders/{pk}/shipping/"""
        try:
            dto = UpdateShippingDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _validation_error(exc)

        try:
            order = self._service.update_shipping(pk or "", dto)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(AdminOrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"])
    def stats(self, request: Request) -> Response:
        """GET /api/v1/admin/orders/stats/?period=30"""
        try:
            period = int(request.query_params.get("period", DEFAULT_STATS_PERIOD_DAYS))
        except ValueError:
            period = 0
        if not 1 <= period <= MAX_STATS_PERIOD_DAYS:
            return Response(
                {"detail": f"'period' must be between 1 and {MAX_STATS_PERIOD_DAYS} days."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        stats = self._service.order_stats(period)
        return Response(stats.model_dump(mode="json"))

    @action(detail=False, methods=["get"], url_path="export")
    def export_all(self, request: Request) -> HttpResponse:
        """GET /api/v1/admin/orders/export/"""
        queryset = self.filter_queryset(self.get_queryset())
        return _csv_response(export_orders_csv(queryset), "orders.csv")

    @action(detail=True, methods=["get"], url_path="export")
    def export_one(self, request: Request, pk: str | None = None) -> HttpResponse:
        """GET /api/v1/admin/orders/{pk}/export/"""
        try:
            order = self._service.get_order(pk or "")
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        base_url = settings.BACKEND_BASE_URL or request.build_absolute_uri("/").rstrip("/")
        return _csv_response(
            export_order_items_csv(order, base_url),
            f"order-{order.order_number}.csv",
        )
