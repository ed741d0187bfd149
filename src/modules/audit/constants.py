"""Audit trail constants.

Only the actions emitted by the order lifecycle and stock adjustment
paths are listed; the wider back-office records many more.
"""

from django.db import models


class AuditAction(models.TextChoices):
    ORDER_CREATED = "ORDER_CREATED", "Order created"
    ORDER_UPDATED = "ORDER_UPDATED", "Order updated"
    ORDER_STATUS_CHANGED = "ORDER_STATUS_CHANGED", "Order status changed"
    INVENTORY_DECREMENTED = "INVENTORY_DECREMENTED", "Inventory decremented"
    INVENTORY_RESTOCKED = "INVENTORY_RESTOCKED", "Inventory restocked"
    STOCK_ADJUSTED = "STOCK_ADJUSTED", "Stock adjusted"
    VARIANT_STOCK_ADJUSTED = "VARIANT_STOCK_ADJUSTED", "Variant stock adjusted"


class AuditEntityType(models.TextChoices):
    ORDER = "order", "Order"
    PRODUCT = "product", "Product"


SYSTEM_ACTOR_ID = "system"
SYSTEM_ACTOR_NAME = "System"
SYSTEM_ACTOR_ROLE = "ADMIN"
