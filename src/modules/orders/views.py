"""Order API views.

Exposes the ``OrderService`` via HTTP using a DRF ViewSet.  Domain
exceptions propagate to the API exception handler; the view never
swallows them.
"""

from __future__ import annotations

from uuid import UUID

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.dtos import Principal
from modules.accounts.permissions import IsCustomer
from modules.core.exceptions import ValidationError
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import CreateOrderSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


def _parse_order_id(pk: str | None) -> UUID:
    try:
        return UUID(str(pk))
    except ValueError:
        raise ValidationError("Invalid order ID format.", code="invalid_order_id") from None


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).  Listing is
    not paginated and is scoped by role: customers see their own orders,
    admins see every order.
    """

    queryset = Order.objects.none()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def get_permissions(self):
        if self.action == "create":
            return [IsAuthenticated(), IsCustomer()]
        return [IsAuthenticated()]

    def _principal(self, request: Request) -> Principal:
        return Principal.from_user(request.user)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @extend_schema(request=CreateOrderSerializer, responses={201: OrderSerializer})
    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = CreateOrderDTO(
            user_id=request.user.id,
            items=[
                CreateOrderItemDTO(product_id=item["productId"], quantity=item["quantity"])
                for item in serializer.validated_data["items"]
            ],
        )
        order = self._service.create_order(dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Optional filters: ``status``, ``start_date``, ``end_date``,
        ``min_total``, ``max_total``.
        """
        filters = OrderFilter(request.query_params, queryset=Order.objects.none()).lookups()
        orders = self._service.list_orders(self._principal(request), filters)
        return Response(OrderSerializer(orders, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(_parse_order_id(pk), self._principal(request))
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    @extend_schema(request=None, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"])
    def pay(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/pay/ (idempotent)"""
        order = self._service.pay_order(_parse_order_id(pk), self._principal(request))
        return Response(OrderSerializer(order).data)

    @extend_schema(request=None, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/ (idempotent, restores stock)"""
        order = self._service.cancel_order(_parse_order_id(pk), self._principal(request))
        return Response(OrderSerializer(order).data)
