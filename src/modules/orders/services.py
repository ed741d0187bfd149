"""Order service layer (Use Cases).

Orchestrates order creation, patching and the guarded status
transition.  The service itself opens no transaction: callers that
persist to a database (the API views) wrap each command in
``transaction.atomic()`` so the unit of work stays at the edge.

Business rules enforced:
- Entering the trigger status (``PAID`` by default) decrements stock
  exactly once; leaving it for ``CANCELLED`` restocks.
- Stock is validated as a whole before any decrement; a shortage
  rejects the command and mutates nothing.
- ``status`` only changes through ``change_order_status``.
- Order numbers are allocated after validation, so a rejected
  creation consumes no number.

Side effects of a successful transition run in a fixed order:
status commit, ``ORDER_STATUS_CHANGED`` audit, per-item stock writes
(each audited), inventory summary audit.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
import uuid6
from pydantic import BaseModel

from modules.audit.constants import AuditAction
from modules.audit.dtos import AuditChange
from modules.orders.constants import (
    INVENTORY_DECREMENT_ON,
    PATCHABLE_FIELDS,
    OrderErrorCode,
    OrderStatus,
    format_order_number,
)
from modules.orders.dtos import (
    OrderDTO,
    OrderItemDTO,
    OrderPatchDTO,
    OrderResult,
    compute_order_totals,
)
from modules.orders.exceptions import ProtectedOrderField
from modules.orders.inventory import InventoryReconciler, order_entity
from shared.domain.clock import Clock, SystemClock

if TYPE_CHECKING:
    from modules.audit.recorder import AuditRecorder
    from modules.orders.dtos import CreateOrderDTO, OrderQuery
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

NOT_FOUND_MESSAGE = "Order not found."
NO_OP_MESSAGE = "The order already has that status."


class OrderService:
    """Application service for Order use-cases.

    Receives repositories, the audit recorder and the clock via
    constructor injection (DIP).  Inventory policy is passed in
    explicitly; ``from_settings`` reads it from Django settings.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        audit: AuditRecorder,
        *,
        trigger_status: OrderStatus = INVENTORY_DECREMENT_ON,
        strict_inventory: bool = False,
        validate_on_create: bool = True,
        clock: Optional[Clock] = None,
    ) -> None:
        self._order_repo = order_repository
        self._audit = audit
        self._clock = clock or SystemClock()
        self._trigger = OrderStatus(trigger_status)
        self._validate_on_create = validate_on_create
        self._inventory = InventoryReconciler(
            ledger=product_repository,
            audit=audit,
            strict_references=strict_inventory,
            clock=self._clock,
        )

    @classmethod
    def from_settings(
        cls,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        audit: AuditRecorder,
        clock: Optional[Clock] = None,
    ) -> OrderService:
        from django.conf import settings

        return cls(
            order_repository,
            product_repository,
            audit,
            trigger_status=getattr(
                settings, "ORDERS_INVENTORY_DECREMENT_ON", INVENTORY_DECREMENT_ON
            ),
            strict_inventory=getattr(
                settings, "ORDERS_STRICT_INVENTORY_REFERENCES", False
            ),
            validate_on_create=getattr(
                settings, "ORDERS_VALIDATE_STOCK_ON_CREATE", True
            ),
            clock=clock,
        )

    @property
    def trigger_status(self) -> OrderStatus:
        return self._trigger

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, draft: CreateOrderDTO) -> OrderResult:
        """Create an order from a draft.

        Steps:
        1. Build line items, totals and a single timestamp.
        2. If the draft starts in the trigger status, validate stock;
           a shortage returns ``INSUFFICIENT_STOCK`` and persists nothing.
        3. Allocate the order number and persist.
        4. Audit ``ORDER_CREATED``.
        5. If created in the trigger status, decrement stock.
        """
        now = self._clock.now()
        items = [OrderItemDTO.from_draft(item) for item in draft.items]
        order = OrderDTO(
            id=uuid6.uuid7(),
            order_number="",
            status=draft.status,
            channel=draft.channel,
            payment_method=draft.payment_method,
            payment_ref=draft.payment_ref,
            customer_id=draft.customer_id,
            customer=draft.customer,
            items=items,
            notes=draft.notes,
            delivery_zip=draft.delivery_zip,
            created_at=now,
            updated_at=now,
            **compute_order_totals(items),
        )
        log = logger.bind(order_id=str(order.id), status=order.status)
        log.info("order.creation_started", items_count=order.items_count)

        in_trigger = order.status == self._trigger
        if in_trigger and self._validate_on_create:
            validation = self._inventory.validate(order)
            if not validation.is_valid:
                log.warning(
                    "order.creation_rejected",
                    problems=len(validation.problems),
                )
                return OrderResult.fail(
                    OrderErrorCode.INSUFFICIENT_STOCK,
                    validation.message(),
                    validation.problems,
                )

        order = order.model_copy(
            update={
                "order_number": format_order_number(
                    self._order_repo.allocate_order_number()
                )
            }
        )
        order = self._order_repo.save(order)

        self._audit.record(
            AuditAction.ORDER_CREATED,
            entity=order_entity(order),
            metadata={
                "status": str(order.status),
                "channel": str(order.channel),
                "total": str(order.total),
                "items_count": order.items_count,
            },
        )
        log.info("order.created", order_number=order.order_number, total=str(order.total))

        if in_trigger:
            self._inventory.decrement(order)

        return OrderResult.ok(order)

    def update_order(self, order_id: UUID, patch: Dict[str, Any]) -> bool:
        """Apply a non-status patch.

        Returns ``False`` when the order does not exist.

        Raises:
            ProtectedOrderField: the patch names a field outside
                ``PATCHABLE_FIELDS`` (``status`` included).
            pydantic.ValidationError: a patched value is invalid.
        """
        protected = set(patch) - PATCHABLE_FIELDS
        if protected:
            raise ProtectedOrderField(protected)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            return False

        updates = OrderPatchDTO(**patch).model_dump(exclude_unset=True)
        updated = OrderDTO.model_validate(
            {**order.model_dump(), **updates, "updated_at": self._clock.now()}
        )

        changes = [
            AuditChange(
                field=field,
                from_=_jsonable(getattr(order, field)),
                to=_jsonable(getattr(updated, field)),
            )
            for field in sorted(updates)
            if getattr(order, field) != getattr(updated, field)
        ]

        self._order_repo.save(updated)
        self._audit.record(
            AuditAction.ORDER_UPDATED,
            entity=order_entity(updated),
            changes=changes,
        )
        logger.info(
            "order.updated",
            order_id=str(order_id),
            fields=[change.field for change in changes],
        )
        return True

    def change_order_status(self, order_id: UUID, new_status: str) -> OrderResult:
        """Transition an order to ``new_status``.

        Returns ``NOT_FOUND`` for unknown orders, ``NO_OP`` when the
        status would not change and ``INSUFFICIENT_STOCK`` (with every
        failing item) when entering the trigger status is not covered
        by current stock.

        An unknown status value is a caller error, not an engine outcome:
        the API rejects it in ``ChangeStatusSerializer`` before the service
        runs.

        Raises:
            ValueError: ``new_status`` is not an ``OrderStatus``; nothing is
                read or written.
        """
        target = OrderStatus(new_status)
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            logger.warning("order.not_found", order_id=str(order_id))
            return OrderResult.fail(OrderErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)

        log = logger.bind(
            order_id=str(order_id),
            current_status=order.status,
            new_status=target,
        )

        if order.status == target:
            log.info("order.status_unchanged")
            return OrderResult.fail(OrderErrorCode.NO_OP, NO_OP_MESSAGE)

        should_decrement = target == self._trigger and order.status != self._trigger
        should_restock = (
            target == OrderStatus.CANCELLED and order.status == self._trigger
        )

        if should_decrement:
            validation = self._inventory.validate(order)
            if not validation.is_valid:
                log.warning(
                    "order.status_change_rejected",
                    problems=len(validation.problems),
                )
                return OrderResult.fail(
                    OrderErrorCode.INSUFFICIENT_STOCK,
                    validation.message(),
                    validation.problems,
                )

        updated = order.model_copy(
            update={"status": target, "updated_at": self._clock.now()}
        )
        self._order_repo.save(updated)
        self._audit.record(
            AuditAction.ORDER_STATUS_CHANGED,
            entity=order_entity(updated),
            changes=[
                AuditChange(field="status", from_=str(order.status), to=str(target))
            ],
        )
        log.info("order.status_changed")

        if should_decrement:
            self._inventory.decrement(updated)
        elif should_restock:
            self._inventory.restock(updated)

        return OrderResult.ok(self._order_repo.get_by_id(order_id) or updated)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_by_id(self, order_id: UUID) -> Optional[OrderDTO]:
        return self._order_repo.get_by_id(order_id)

    def list_orders(self, query: Optional[OrderQuery] = None) -> List[OrderDTO]:
        """Orders matching ``query`` (all live orders when omitted), newest first."""
        return self._order_repo.list(query)


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value
