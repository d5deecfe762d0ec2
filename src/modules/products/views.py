"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.  Listing is
public; creating and updating products is reserved to admins.  Domain
and validation errors propagate to the API exception handler.
"""

from __future__ import annotations

from typing import Any, Dict

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import IsAdmin
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

PRODUCT_FIELDS = ("name", "price", "stock")


def _payload(request: Request) -> Dict[str, Any]:
    if not isinstance(request.data, dict):
        raise ValidationError({"non_field_errors": ["Expected a JSON object."]})
    return {key: request.data[key] for key in PRODUCT_FIELDS if key in request.data}


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for the product catalog.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    serializer_class = ProductSerializer
    pagination_class = None
    filter_backends: list = []
    http_method_names = ["get", "post", "patch", "head", "options"]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_permissions(self):
        if self.action == "list":
            return [AllowAny()]
        return [IsAdmin()]

    def get_queryset(self):
        return self._service.list_products()

    @extend_schema(request=ProductSerializer, responses={201: ProductSerializer})
    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        dto = CreateProductDTO(**_payload(request))
        product = self._service.create_product(dto)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ProductSerializer, responses={200: ProductSerializer})
    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        dto = UpdateProductDTO(**_payload(request))
        product = self._service.update_product(pk, dto)
        return Response(ProductSerializer(product).data)
