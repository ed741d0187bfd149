"""Order domain constants.

Defines status choices, sales channels, payment methods, the engine's
result codes and the order-number format.  There is no transition
table: any status may be requested from any other except itself; the
inventory side effects are decided by ``INVENTORY_DECREMENT_ON``.
"""

from __future__ import annotations

from typing import Iterable, Optional

from django.db import models


class OrderStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    PLACED = "PLACED", "Placed"
    PAID = "PAID", "Paid"
    FULFILLED = "FULFILLED", "Fulfilled"
    CANCELLED = "CANCELLED", "Cancelled"
    REFUNDED = "REFUNDED", "Refunded"


class SalesChannel(models.TextChoices):
    OFFLINE = "OFFLINE", "In store"
    ONLINE = "ONLINE", "Online store"
    WHATSAPP = "WHATSAPP", "WhatsApp"
    INSTAGRAM = "INSTAGRAM", "Instagram"


class PaymentMethod(models.TextChoices):
    CASH = "CASH", "Cash"
    TRANSFER = "TRANSFER", "Bank transfer"
    CARD_LINK = "CARD_LINK", "Payment link"
    OTHER = "OTHER", "Other"


class OrderErrorCode(models.TextChoices):
    NOT_FOUND = "NOT_FOUND", "Order not found"
    NO_OP = "NO_OP", "Status unchanged"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK", "Insufficient stock"


# Status whose entry consumes inventory (overridable via settings).
INVENTORY_DECREMENT_ON = OrderStatus.PAID

ORDER_NUMBER_PREFIX = "ORD-"
ORDER_NUMBER_WIDTH = 6

# Fields ``update_order`` may patch; everything else goes through the
# guarded status transition or is fixed at creation.
PATCHABLE_FIELDS = frozenset(
    {
        "channel",
        "payment_method",
        "payment_ref",
        "customer_id",
        "customer",
        "notes",
        "delivery_zip",
    }
)


def format_order_number(counter: int) -> str:
    """``7`` -> ``"ORD-000007"``."""
    if counter < 1:
        raise ValueError("Order number counter starts at 1.")
    return f"{ORDER_NUMBER_PREFIX}{counter:0{ORDER_NUMBER_WIDTH}d}"


def parse_order_number(order_number: str) -> Optional[int]:
    """Inverse of ``format_order_number``; ``None`` for foreign formats."""
    if not order_number.startswith(ORDER_NUMBER_PREFIX):
        return None
    digits = order_number[len(ORDER_NUMBER_PREFIX):]
    if not digits.isdigit():
        return None
    return int(digits)


def next_counter_after(order_numbers: Iterable[str]) -> int:
    """Counter value one past the highest parseable order number (1 if none)."""
    highest = 0
    for order_number in order_numbers:
        value = parse_order_number(order_number)
        if value is not None and value > highest:
            highest = value
    return highest + 1
