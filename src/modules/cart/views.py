"""Cart API views.

Every request is scoped to the authenticated identity.  Domain
exceptions are translated into HTTP status codes here.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.cart.dtos import RemoveManyDTO, add_line_adapter
from modules.cart.exceptions import CartLineForbidden, CartLineNotFound
from modules.cart.models import CartLine
from modules.cart.repositories.django_repository import CartDjangoRepository
from modules.cart.serializers import CartLineSerializer
from modules.cart.services import CartService
from modules.core.identity import get_identity


def _validation_error(exc: PydanticValidationError) -> Response:
    return Response(
        {"detail": exc.errors(include_url=False, include_context=False)},
        status=status.HTTP_400_BAD_REQUEST,
    )


class CartViewSet(GenericViewSet):
    """ViewSet for the caller's cart via ``CartService``."""

    permission_classes = [IsAuthenticated]
    queryset = CartLine.objects.none()
    serializer_class = CartLineSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CartService(repository=CartDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/cart/"""
        lines = self._service.list(get_identity(request))
        return Response(CartLineSerializer(lines, many=True).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/cart/"""
        try:
            dto = add_line_adapter.validate_python(request.data)
        except PydanticValidationError as exc:
            return _validation_error(exc)

        line = self._service.add(get_identity(request), dto)
        return Response(
            CartLineSerializer(line).data,
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/cart/{pk}/"""
        try:
            self._service.remove(get_identity(request), pk or "")
        except CartLineNotFound:
            return Response(
                {"detail": "Cart item not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except CartLineForbidden:
            return Response(
                {"detail": "You do not have permission to remove this item."},
                status=status.HTTP_403_FORBIDDEN,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"], url_path="remove-many")
    def remove_many(self, request: Request) -> Response:
        """POST /api/v1/cart/remove-many/"""
        try:
            dto = RemoveManyDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _validation_error(exc)

        try:
            removed = self._service.remove_many(get_identity(request), dto.line_ids)
        except CartLineNotFound:
            return Response(
                {"detail": "No matching cart items found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except CartLineForbidden:
            return Response(
                {"detail": "You do not have permission to remove some of these items."},
                status=status.HTTP_403_FORBIDDEN,
            )
        return Response({"removed": removed})
