"""Product DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.constants import ProductStatus


class VariantSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    sku = serializers.CharField(read_only=True)
    size = serializers.CharField(source="options.size", read_only=True, allow_null=True)
    color = serializers.CharField(
        source="options.color", read_only=True, allow_null=True
    )
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True, allow_null=True
    )
    stock = serializers.IntegerField(read_only=True)


class ProductSerializer(serializers.Serializer):
    """Read serializer for a stock ledger record."""

    id = serializers.UUIDField(read_only=True)
    sku = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    stock = serializers.IntegerField(read_only=True)
    status = serializers.CharField(read_only=True)
    has_variants = serializers.BooleanField(read_only=True)
    variants = VariantSerializer(many=True, read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class ProductQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ProductStatus.choices, required=False)


class StockAdjustmentSerializer(serializers.Serializer):
    """Validates ``POST /products/{id}/adjust-stock/``."""

    adjustment = serializers.IntegerField()
    variant_id = serializers.UUIDField(required=False, allow_null=True)
    reason = serializers.CharField(
        max_length=255, required=False, default="", allow_blank=True
    )

    def validate_adjustment(self, value: int) -> int:
        if value == 0:
            raise serializers.ValidationError("Adjustment must not be zero.")
        return value
