"""Catalog API views.

Public reads, staff-only writes.  Domain exceptions are translated into
HTTP status codes here; nothing else is caught.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
from modules.catalog.exceptions import ProductNotFound
from modules.catalog.filters import ApparelProductFilter
from modules.catalog.models import ApparelProduct
from modules.catalog.repositories.django_repository import ProductDjangoRepository
from modules.catalog.serializers import ApparelProductSerializer
from modules.catalog.services import ProductService


class ApparelProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for apparel catalog CRUD via ``ProductService``."""

    filterset_class = ApparelProductFilter
    search_fields = ["title", "description"]
    ordering_fields = ["title", "created_at"]
    ordering = ["title"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = ApparelProduct.objects.none()
    serializer_class = ApparelProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._repo = ProductDjangoRepository()
        self._service = ProductService(repository=self._repo)

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            return [AllowAny()]
        return [IsAdminUser()]

    def get_queryset(self):
        return self._repo.queryset()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/catalog/products/{pk}/"""
        try:
            product = self._service.get_product(pk or "")
        except ProductNotFound:
            return Response(
                {"detail": "Product not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ApparelProductSerializer(product).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/catalog/products/"""
        try:
            dto = CreateProductDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return Response(
                {"detail": exc.errors(include_url=False, include_context=False)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        product = self._service.create_product(dto)
        return Response(
            ApparelProductSerializer(product).data,
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/catalog/products/{pk}/"""
        try:
            dto = UpdateProductDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return Response(
                {"detail": exc.errors(include_url=False, include_context=False)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.update_product(pk or "", dto)
        except ProductNotFound:
            return Response(
                {"detail": "Product not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ApparelProductSerializer(product).data)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/catalog/products/{pk}/"""
        return self.partial_update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/catalog/products/{pk}/"""
        try:
            self._service.delete_product(pk or "")
        except ProductNotFound:
            return Response(
                {"detail": "Product not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)
