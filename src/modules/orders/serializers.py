"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.  Output serializers read attributes
straight off the DTOs.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import OrderStatus, PaymentMethod, SalesChannel
from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderItemDTO,
    CustomerSnapshot,
    OrderQuery,
)
from modules.products.dtos import VariantOptions

# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class CustomerSnapshotSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    phone = serializers.CharField(
        max_length=40, required=False, allow_null=True, allow_blank=True
    )
    email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)


class OptionsSnapshotSerializer(serializers.Serializer):
    size = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    color = serializers.CharField(required=False, allow_null=True, allow_blank=True)


# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single line item of an order creation request."""

    product_id = serializers.UUIDField()
    variant_id = serializers.UUIDField(required=False, allow_null=True)
    name_snapshot = serializers.CharField(max_length=255)
    sku_snapshot = serializers.CharField(
        max_length=64, required=False, default="", allow_blank=True
    )
    options_snapshot = OptionsSnapshotSerializer(required=False, allow_null=True)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    qty = serializers.IntegerField(min_value=1)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    status = serializers.ChoiceField(
        choices=OrderStatus.choices, required=False, default=OrderStatus.DRAFT
    )
    channel = serializers.ChoiceField(
        choices=SalesChannel.choices, required=False, default=SalesChannel.OFFLINE
    )
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices, required=False, default=PaymentMethod.CASH
    )
    payment_ref = serializers.CharField(
        max_length=120, required=False, allow_null=True, allow_blank=True
    )
    customer_id = serializers.UUIDField(required=False, allow_null=True)
    customer = CustomerSnapshotSerializer()
    items = CreateOrderItemSerializer(many=True, allow_empty=False)
    notes = serializers.CharField(required=False, default="", allow_blank=True)
    delivery_zip = serializers.CharField(
        max_length=20, required=False, allow_null=True, allow_blank=True
    )

    def to_dto(self) -> CreateOrderDTO:
        data = self.validated_data
        customer = data["customer"]
        return CreateOrderDTO(
            status=data["status"],
            channel=data["channel"],
            payment_method=data["payment_method"],
            payment_ref=data.get("payment_ref") or None,
            customer_id=data.get("customer_id"),
            customer=CustomerSnapshot(
                name=customer["name"],
                phone=customer.get("phone") or None,
                email=customer.get("email") or None,
            ),
            items=[
                CreateOrderItemDTO(
                    product_id=item["product_id"],
                    variant_id=item.get("variant_id"),
                    name_snapshot=item["name_snapshot"],
                    sku_snapshot=item.get("sku_snapshot", ""),
                    options_snapshot=(
                        VariantOptions(
                            size=item["options_snapshot"].get("size") or None,
                            color=item["options_snapshot"].get("color") or None,
                        )
                        if item.get("options_snapshot")
                        else None
                    ),
                    unit_price=item["unit_price"],
                    qty=item["qty"],
                )
                for item in data["items"]
            ],
            notes=data.get("notes", ""),
            delivery_zip=data.get("delivery_zip") or None,
        )


class ChangeStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class OrderQuerySerializer(serializers.Serializer):
    """Validates ``GET /orders/`` query parameters."""

    search = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    channel = serializers.ChoiceField(choices=SalesChannel.choices, required=False)
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices, required=False
    )
    from_date = serializers.DateTimeField(required=False)
    to_date = serializers.DateTimeField(required=False)

    def to_query(self) -> OrderQuery:
        data = {key: value for key, value in self.validated_data.items() if value}
        return OrderQuery(**data)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.Serializer):
    """Read serializer for line item snapshots."""

    id = serializers.UUIDField(read_only=True)
    product_id = serializers.UUIDField(read_only=True)
    variant_id = serializers.UUIDField(read_only=True, allow_null=True)
    name_snapshot = serializers.CharField(read_only=True)
    display_name = serializers.CharField(read_only=True)
    sku_snapshot = serializers.CharField(read_only=True)
    options_snapshot = OptionsSnapshotSerializer(read_only=True, allow_null=True)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    qty = serializers.IntegerField(read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


class OrderSerializer(serializers.Serializer):
    """Read serializer for orders with nested items."""

    id = serializers.UUIDField(read_only=True)
    order_number = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    channel = serializers.CharField(read_only=True)
    payment_method = serializers.CharField(read_only=True)
    payment_ref = serializers.CharField(read_only=True, allow_null=True)
    customer_id = serializers.UUIDField(read_only=True, allow_null=True)
    customer = CustomerSnapshotSerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    items_count = serializers.IntegerField(read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    discount_total = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    notes = serializers.CharField(read_only=True)
    delivery_zip = serializers.CharField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class OrderListSerializer(serializers.Serializer):
    """Lightweight serializer for order list (no nested items)."""

    id = serializers.UUIDField(read_only=True)
    order_number = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    channel = serializers.CharField(read_only=True)
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    items_count = serializers.IntegerField(read_only=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
