"""Order, OrderItem and OrderNumberCounter models.

Business rules implemented:
- ``order_number`` is unique and assigned once from ``OrderNumberCounter``.
  Soft-deleted orders keep their number, so it is never reused.
- OrderItem snapshots name, SKU, options and unit price at creation
  time; ``line_total`` is ``unit_price * qty``.
- ``created_at`` / ``updated_at`` are written by the service from its
  clock (identical at creation), not by ``auto_now``.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel, SoftDeleteModel
from modules.orders.constants import OrderStatus, PaymentMethod, SalesChannel


class Order(SoftDeleteModel):
    """Order aggregate root.

    ``order_number`` (``ORD-000001``) is the human-readable identifier;
    the UUIDv7 ``id`` is used for all internal references and API
    look-ups.  The customer is stored as a contact snapshot; the
    optional ``customer_id`` points into the customer directory, which
    lives outside this project.
    """

    order_number: models.CharField = models.CharField(
        max_length=20, unique=True, editable=False
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.DRAFT,
    )
    channel: models.CharField = models.CharField(
        max_length=20,
        choices=SalesChannel.choices,
        default=SalesChannel.OFFLINE,
    )
    payment_method: models.CharField = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
    )
    payment_ref: models.CharField = models.CharField(
        max_length=120, blank=True, default=""
    )
    customer_id: models.UUIDField = models.UUIDField(null=True, blank=True)
    customer_name: models.CharField = models.CharField(max_length=255)
    customer_phone: models.CharField = models.CharField(
        max_length=40, blank=True, default=""
    )
    customer_email: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )
    subtotal: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    discount_total: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    notes: models.TextField = models.TextField(blank=True, default="")
    delivery_zip: models.CharField = models.CharField(
        max_length=20, blank=True, default=""
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-order_number"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["channel"], name="orders_channel_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """Line item snapshot.

    ``product_id`` / ``variant_id`` are plain references, not foreign
    keys: the snapshot must survive catalog changes, and an unresolvable
    reference is a case the inventory reconciler handles explicitly.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    position: models.PositiveIntegerField = models.PositiveIntegerField(default=0)
    product_id: models.UUIDField = models.UUIDField()
    variant_id: models.UUIDField = models.UUIDField(null=True, blank=True)
    name_snapshot: models.CharField = models.CharField(max_length=255)
    sku_snapshot: models.CharField = models.CharField(
        max_length=64, blank=True, default=""
    )
    size: models.CharField = models.CharField(max_length=32, blank=True, default="")
    color: models.CharField = models.CharField(max_length=32, blank=True, default="")
    unit_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )
    qty: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )
    line_total: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(qty__gte=1),
                name="order_items_qty_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name_snapshot} x{self.qty} ({self.line_total})"


class OrderNumberCounter(models.Model):
    """Single-row sequence behind ``order_number``.

    ``value`` is the next number to hand out.  The row is created lazily
    by the repository, seeded one past the highest stored order number.
    """

    key = models.CharField(max_length=32, unique=True)
    value = models.PositiveIntegerField()

    class Meta:
        db_table = "order_number_counters"

    def __str__(self) -> str:
        return f"{self.key}={self.value}"
