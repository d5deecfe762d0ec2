"""Product DRF serializers for API output (camelCase wire format)."""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Product
        fields = ["id", "name", "price", "stock", "createdAt"]
        read_only_fields = fields
