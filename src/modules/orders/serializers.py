"""Order DRF serializers for API input/output (camelCase wire format).

Business logic lives in the Service Layer, which receives Pydantic DTOs
from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    productId = serializers.UUIDField(error_messages={"invalid": "Invalid product ID format."})
    quantity = serializers.IntegerField(
        min_value=1, error_messages={"min_value": "Quantity must be at least 1."}
    )


class CreateOrderSerializer(serializers.Serializer):
    items = CreateOrderItemSerializer(
        many=True,
        allow_empty=False,
        error_messages={"empty": "Order must contain at least one item."},
    )


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    productId = serializers.UUIDField(source="product_id", read_only=True)
    unitPrice = serializers.IntegerField(source="unit_price", read_only=True)

    class Meta:
        model = OrderItem
        fields = ["productId", "quantity", "unitPrice"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    userId = serializers.UUIDField(source="user_id", read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Order
        fields = ["id", "userId", "items", "total", "status", "createdAt"]
        read_only_fields = fields
