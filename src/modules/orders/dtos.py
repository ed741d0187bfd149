"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers), the
Service layer and the repositories.  DTOs are immutable
(``frozen=True``); the service produces updated copies instead of
mutating records in place.

- ``CustomerSnapshot``: customer contact captured on the order.
- ``CreateOrderItemDTO`` / ``OrderItemDTO``: line item input / record.
- ``CreateOrderDTO``: order draft (everything but id, number, timestamps).
- ``OrderDTO``: the persisted order record.
- ``OrderPatchDTO``: non-status fields accepted by ``update_order``.
- ``OrderQuery``: list filters.
- ``StockProblem`` / ``InventoryValidation``: pre-flight check output.
- ``OrderResult``: return value of the engine's commands.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import uuid6
from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.orders.constants import (
    OrderErrorCode,
    OrderStatus,
    PaymentMethod,
    SalesChannel,
)
from modules.products.dtos import VariantOptions
from shared.domain.money import ZERO, line_total, money_sum, to_money

if TYPE_CHECKING:
    from modules.orders.models import Order


# ---------------------------------------------------------------------------
# Shared value objects
# ---------------------------------------------------------------------------


class CustomerSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Customer name must not be empty.")
        return v.strip()


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single line item of an order draft.

    ``unit_price`` is the price snapshot taken by the caller when the
    line was added; it is never re-read from the catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    variant_id: Optional[UUID] = None
    name_snapshot: str
    sku_snapshot: str = ""
    options_snapshot: Optional[VariantOptions] = None
    unit_price: Decimal
    qty: int

    @field_validator("qty")
    @classmethod
    def qty_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @field_validator("unit_price")
    @classmethod
    def unit_price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        v = to_money(v)
        if v < 0:
            raise ValueError("Unit price cannot be negative.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation.

    Validates:
    - ``items`` must contain at least one item.
    """

    model_config = ConfigDict(frozen=True)

    status: OrderStatus = OrderStatus.DRAFT
    channel: SalesChannel = SalesChannel.OFFLINE
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_ref: Optional[str] = None
    customer_id: Optional[UUID] = None
    customer: CustomerSnapshot
    items: List[CreateOrderItemDTO]
    notes: str = ""
    delivery_zip: Optional[str] = None

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v


class OrderPatchDTO(BaseModel):
    """Fields ``update_order`` may change.  Unknown keys are rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    channel: Optional[SalesChannel] = None
    payment_method: Optional[PaymentMethod] = None
    payment_ref: Optional[str] = None
    customer_id: Optional[UUID] = None
    customer: Optional[CustomerSnapshot] = None
    notes: Optional[str] = None
    delivery_zip: Optional[str] = None


class OrderQuery(BaseModel):
    """Filter criteria for ``list_orders``; all optional, combined with AND."""

    model_config = ConfigDict(frozen=True)

    search: Optional[str] = None
    status: Optional[OrderStatus] = None
    channel: Optional[SalesChannel] = None
    payment_method: Optional[PaymentMethod] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class OrderItemDTO(CreateOrderItemDTO):
    """Persisted line item with its computed ``line_total``."""

    id: UUID = Field(default_factory=uuid6.uuid7)
    line_total: Decimal

    @classmethod
    def from_draft(cls, item: CreateOrderItemDTO) -> OrderItemDTO:
        return cls(
            **item.model_dump(),
            line_total=line_total(item.unit_price, item.qty),
        )

    @property
    def display_name(self) -> str:
        """Snapshot name, with variant options when present."""
        label = self.options_snapshot.label() if self.options_snapshot else ""
        return f"{self.name_snapshot} ({label})" if label else self.name_snapshot


class OrderDTO(BaseModel):
    """Immutable order record."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    order_number: str
    status: OrderStatus
    channel: SalesChannel
    payment_method: PaymentMethod
    payment_ref: Optional[str] = None
    customer_id: Optional[UUID] = None
    customer: CustomerSnapshot
    items: List[OrderItemDTO]
    subtotal: Decimal
    discount_total: Decimal = ZERO
    total: Decimal
    notes: str = ""
    delivery_zip: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def items_count(self) -> int:
        return len(self.items)

    @classmethod
    def from_entity(cls, order: Order) -> OrderDTO:
        """Build a record from an Order model instance.

        Assumes ``items`` are prefetched.
        """
        items = [
            OrderItemDTO(
                id=item.id,
                product_id=item.product_id,
                variant_id=item.variant_id,
                name_snapshot=item.name_snapshot,
                sku_snapshot=item.sku_snapshot,
                options_snapshot=(
                    VariantOptions(size=item.size or None, color=item.color or None)
                    if item.size or item.color
                    else None
                ),
                unit_price=item.unit_price,
                qty=item.qty,
                line_total=item.line_total,
            )
            for item in order.items.all()
        ]
        return cls(
            id=order.id,
            order_number=order.order_number,
            status=order.status,
            channel=order.channel,
            payment_method=order.payment_method,
            payment_ref=order.payment_ref or None,
            customer_id=order.customer_id,
            customer=CustomerSnapshot(
                name=order.customer_name,
                phone=order.customer_phone or None,
                email=order.customer_email or None,
            ),
            items=items,
            subtotal=order.subtotal,
            discount_total=order.discount_total,
            total=order.total,
            notes=order.notes,
            delivery_zip=order.delivery_zip or None,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


def compute_order_totals(items: List[OrderItemDTO]) -> Dict[str, Decimal]:
    """Subtotal is the sum of line totals; no discounts at this stage."""
    subtotal = money_sum(item.line_total for item in items)
    return {"subtotal": subtotal, "discount_total": ZERO, "total": subtotal}


# ---------------------------------------------------------------------------
# Inventory validation
# ---------------------------------------------------------------------------


class StockProblem(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: UUID
    product_id: UUID
    variant_id: Optional[UUID] = None
    name: str
    needed: int
    available: int
    reason: str = "insufficient"

    def describe(self) -> str:
        if self.reason == "unresolved":
            return f"{self.name} (product reference could not be resolved)"
        return f"{self.name} (need {self.needed}, available {self.available})"


class InventoryValidation(BaseModel):
    model_config = ConfigDict(frozen=True)

    problems: List[StockProblem] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.problems

    def message(self) -> str:
        """One message listing every problem."""
        return "Insufficient stock: " + ", ".join(p.describe() for p in self.problems)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class OrderResult(BaseModel):
    """Outcome of an engine command; callers branch on ``success``."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error: Optional[OrderErrorCode] = None
    message: Optional[str] = None
    problems: List[StockProblem] = Field(default_factory=list)
    order: Optional[OrderDTO] = None

    @classmethod
    def ok(cls, order: OrderDTO) -> OrderResult:
        return cls(success=True, order=order)

    @classmethod
    def fail(
        cls,
        error: OrderErrorCode,
        message: str,
        problems: Optional[List[StockProblem]] = None,
    ) -> OrderResult:
        return cls(success=False, error=error, message=message, problems=problems or [])

    def as_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
