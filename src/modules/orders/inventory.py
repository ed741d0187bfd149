"""Inventory reconciliation for the order lifecycle.

Three pure steps, consumed only by ``OrderService``:

- ``validate_inventory``: can the current stock satisfy every line item?
- ``decrement_stock``: product record after consuming one line item.
- ``restock_stock``: product record after returning one line item.

``InventoryReconciler`` binds them to a stock ledger and the audit
recorder and applies them item by item.  Validation is the guarantee
that stock never goes negative; the floor in ``decrement_stock`` is a
backstop, and hitting it is logged as a data-integrity error.

Line items whose product (or requested variant) cannot be resolved
are *unresolved*.  Items without a variant always draw on the
product's own ``stock``, even when the product has variants.  In
permissive mode (the default) unresolved items impose no stock
constraint and are skipped by decrement/restock; in strict mode
validation reports them.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple
from uuid import UUID

import structlog

from modules.audit.constants import AuditAction, AuditEntityType
from modules.audit.dtos import AuditChange, AuditEntity
from modules.orders.dtos import InventoryValidation, StockProblem
from shared.domain.clock import Clock, SystemClock

if TYPE_CHECKING:
    from modules.audit.recorder import AuditRecorder
    from modules.orders.dtos import OrderDTO, OrderItemDTO
    from modules.products.dtos import ProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

StockKey = Tuple[UUID, Optional[UUID]]


# ---------------------------------------------------------------------------
# Pure functions
# ---------------------------------------------------------------------------


def resolve_available(product: Optional[ProductDTO], item: OrderItemDTO) -> Optional[int]:
    """Stock the item draws from, or ``None`` if the reference is unresolved."""
    if product is None:
        return None
    if item.variant_id is not None:
        variant = product.get_variant(item.variant_id)
        return variant.stock if variant is not None else None
    return product.stock


def validate_inventory(
    order: OrderDTO, ledger: IProductRepository, strict: bool = False
) -> InventoryValidation:
    """Check every line item against current stock.

    Demand is accumulated per product/variant, so several lines drawing
    from the same stock are checked against what the earlier lines
    left over.  ``available`` in a problem is that remaining quantity.
    """
    problems: List[StockProblem] = []
    claimed: Dict[StockKey, int] = defaultdict(int)
    products: Dict[UUID, Optional[ProductDTO]] = {}

    for item in order.items:
        if item.product_id not in products:
            products[item.product_id] = ledger.get_by_id(item.product_id)
        stock = resolve_available(products[item.product_id], item)

        if stock is None:
            if strict:
                problems.append(
                    StockProblem(
                        item_id=item.id,
                        product_id=item.product_id,
                        variant_id=item.variant_id,
                        name=item.display_name,
                        needed=item.qty,
                        available=0,
                        reason="unresolved",
                    )
                )
            else:
                logger.warning(
                    "inventory.unresolved_reference_skipped",
                    order_id=str(order.id),
                    product_id=str(item.product_id),
                    variant_id=str(item.variant_id) if item.variant_id else None,
                )
            continue

        key: StockKey = (item.product_id, item.variant_id)
        remaining = max(0, stock - claimed[key])
        if remaining < item.qty:
            problems.append(
                StockProblem(
                    item_id=item.id,
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    name=item.display_name,
                    needed=item.qty,
                    available=remaining,
                )
            )
        claimed[key] += item.qty

    return InventoryValidation(problems=problems)


def decrement_stock(
    product: ProductDTO, item: OrderItemDTO, now: datetime
) -> Tuple[ProductDTO, int, int, bool]:
    """Consume ``item.qty`` units.

    Returns ``(updated_product, before, after, floored)`` where
    ``floored`` is true when the result had to be clamped at zero.
    """
    before = _current_stock(product, item)
    raw = before - item.qty
    after = max(0, raw)
    return _with_stock(product, item, after, now), before, after, raw < 0


def restock_stock(
    product: ProductDTO, item: OrderItemDTO, now: datetime
) -> Tuple[ProductDTO, int, int]:
    """Return ``item.qty`` units.  Returns ``(updated_product, before, after)``."""
    before = _current_stock(product, item)
    after = before + item.qty
    return _with_stock(product, item, after, now), before, after


def _current_stock(product: ProductDTO, item: OrderItemDTO) -> int:
    stock = resolve_available(product, item)
    if stock is None:
        raise LookupError(
            f"Line item {item.id} does not resolve against product {product.id}."
        )
    return stock


def _with_stock(
    product: ProductDTO, item: OrderItemDTO, stock: int, now: datetime
) -> ProductDTO:
    if item.variant_id is not None:
        return product.with_variant_stock(item.variant_id, stock, now)
    return product.with_stock(stock, now)


# ---------------------------------------------------------------------------
# Ledger-bound reconciler
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StockMovement:
    """One applied line-item mutation."""

    item: OrderItemDTO
    before: int
    after: int
    floored: bool = False

    def as_metadata(self) -> Dict[str, Any]:
        return {
            "product_id": str(self.item.product_id),
            "variant_id": str(self.item.variant_id) if self.item.variant_id else None,
            "qty": self.item.qty,
            "name": self.item.display_name,
        }


class InventoryReconciler:
    """Applies decrements and restocks through the stock ledger.

    Each product write is audited on the product entity; each run ends
    with one summary event on the order entity.
    """

    def __init__(
        self,
        ledger: IProductRepository,
        audit: AuditRecorder,
        strict_references: bool = False,
        clock: Optional[Clock] = None,
    ) -> None:
        self._ledger = ledger
        self._audit = audit
        self._strict = strict_references
        self._clock = clock or SystemClock()

    @property
    def strict_references(self) -> bool:
        return self._strict

    def validate(self, order: OrderDTO) -> InventoryValidation:
        return validate_inventory(order, self._ledger, strict=self._strict)

    def decrement(self, order: OrderDTO) -> List[StockMovement]:
        movements: List[StockMovement] = []
        for item in order.items:
            product = self._resolve(order, item)
            if product is None:
                continue
            updated, before, after, floored = decrement_stock(
                product, item, self._clock.now()
            )
            if floored:
                logger.error(
                    "inventory.stock_floor_reached",
                    order_id=str(order.id),
                    product_id=str(item.product_id),
                    variant_id=str(item.variant_id) if item.variant_id else None,
                    stock=before,
                    qty=item.qty,
                )
            movement = StockMovement(item, before, after, floored)
            self._persist(order, product, updated, movement)
            movements.append(movement)

        metadata: Dict[str, Any] = {"items": [m.as_metadata() for m in movements]}
        floored_items = [m.as_metadata() for m in movements if m.floored]
        if floored_items:
            metadata["floored"] = floored_items
        self._audit.record(
            AuditAction.INVENTORY_DECREMENTED,
            entity=order_entity(order),
            metadata=metadata,
        )
        logger.info(
            "inventory.decremented",
            order_id=str(order.id),
            items=len(movements),
            floored=len(floored_items),
        )
        return movements

    def restock(self, order: OrderDTO) -> List[StockMovement]:
        movements: List[StockMovement] = []
        for item in order.items:
            product = self._resolve(order, item)
            if product is None:
                continue
            updated, before, after = restock_stock(product, item, self._clock.now())
            movement = StockMovement(item, before, after)
            self._persist(order, product, updated, movement)
            movements.append(movement)

        self._audit.record(
            AuditAction.INVENTORY_RESTOCKED,
            entity=order_entity(order),
            metadata={"items": [m.as_metadata() for m in movements]},
        )
        logger.info("inventory.restocked", order_id=str(order.id), items=len(movements))
        return movements

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve(self, order: OrderDTO, item: OrderItemDTO) -> Optional[ProductDTO]:
        # Re-read per item: an earlier line may have just updated this product.
        product = self._ledger.get_by_id(item.product_id)
        if resolve_available(product, item) is None:
            logger.warning(
                "inventory.item_skipped",
                order_id=str(order.id),
                product_id=str(item.product_id),
                variant_id=str(item.variant_id) if item.variant_id else None,
            )
            return None
        return product

    def _persist(
        self,
        order: OrderDTO,
        product: ProductDTO,
        updated: ProductDTO,
        movement: StockMovement,
    ) -> None:
        self._ledger.update_product(updated)

        item = movement.item
        if item.variant_id is not None:
            variant = updated.get_variant(item.variant_id)
            action = AuditAction.VARIANT_STOCK_ADJUSTED
            changes = [
                AuditChange(
                    field=f"variants.{variant.sku if variant else item.variant_id}.stock",
                    from_=movement.before,
                    to=movement.after,
                ),
                AuditChange(field="stock", from_=product.stock, to=updated.stock),
            ]
        else:
            action = AuditAction.STOCK_ADJUSTED
            changes = [
                AuditChange(field="stock", from_=movement.before, to=movement.after)
            ]

        self._audit.record(
            action,
            entity=AuditEntity(
                type=AuditEntityType.PRODUCT, id=str(product.id), label=product.name
            ),
            changes=changes,
            metadata={
                "order_id": str(order.id),
                "order_number": order.order_number,
                "qty": item.qty,
                "floored": movement.floored,
            },
        )


def order_entity(order: OrderDTO) -> AuditEntity:
    return AuditEntity(
        type=AuditEntityType.ORDER, id=str(order.id), label=order.order_number
    )
