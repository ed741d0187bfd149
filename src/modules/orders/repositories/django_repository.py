"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API and maps
model instances to ``OrderDTO`` records.  ``save`` writes the Order and
its OrderItems in one ``transaction.atomic()`` block.

The order-number counter is a locked row (``select_for_update``) in
``order_number_counters``.  On first use it is seeded one past the
highest order number ever stored, soft-deleted orders included, so a
restart or a fresh repository instance never hands out a used number.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.constants import next_counter_after
from modules.orders.dtos import OrderDTO, OrderQuery
from modules.orders.filters import OrderFilter
from modules.orders.models import Order, OrderItem, OrderNumberCounter
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

COUNTER_KEY = "order_number"


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: UUID) -> Optional[OrderDTO]:
        """Retrieve a live order with its items (one batched query).

        Returns ``None`` for non-existent, soft-deleted or invalid IDs.
        """
        try:
            order = (
                Order.objects.alive()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None
        return OrderDTO.from_entity(order) if order else None

    def list(self, query: Optional[OrderQuery] = None) -> List[OrderDTO]:
        """List live orders filtered through ``OrderFilter``, newest first."""
        queryset = Order.objects.alive().prefetch_related("items")
        if query is not None:
            data = query.model_dump(mode="json", exclude_none=True)
            queryset = OrderFilter(data, queryset=queryset).qs
        queryset = queryset.order_by("-created_at", "-order_number")
        return [OrderDTO.from_entity(order) for order in queryset]

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: OrderDTO) -> OrderDTO:
        """Upsert the order row and replace its item rows."""
        order = Order.objects.select_for_update().filter(id=entity.id).first()
        if order is None:
            order = Order(id=entity.id)

        order.order_number = entity.order_number
        order.status = entity.status
        order.channel = entity.channel
        order.payment_method = entity.payment_method
        order.payment_ref = entity.payment_ref or ""
        order.customer_id = entity.customer_id
        order.customer_name = entity.customer.name
        order.customer_phone = entity.customer.phone or ""
        order.customer_email = entity.customer.email or ""
        order.subtotal = entity.subtotal
        order.discount_total = entity.discount_total
        order.total = entity.total
        order.notes = entity.notes
        order.delivery_zip = entity.delivery_zip or ""
        order.created_at = entity.created_at
        order.updated_at = entity.updated_at
        order.save()

        # Snapshots are immutable, so items are only written once.
        if not order.items.exists():
            OrderItem.objects.bulk_create(
                [
                    OrderItem(
                        id=item.id,
                        order=order,
                        position=position,
                        product_id=item.product_id,
                        variant_id=item.variant_id,
                        name_snapshot=item.name_snapshot,
                        sku_snapshot=item.sku_snapshot,
                        size=(item.options_snapshot.size or "")
                        if item.options_snapshot
                        else "",
                        color=(item.options_snapshot.color or "")
                        if item.options_snapshot
                        else "",
                        unit_price=item.unit_price,
                        qty=item.qty,
                        line_total=item.line_total,
                    )
                    for position, item in enumerate(entity.items)
                ]
            )

        logger.info(
            "order.saved",
            order_id=str(order.id),
            order_number=order.order_number,
            status=order.status,
        )
        saved = Order.objects.prefetch_related("items").get(id=order.id)
        return OrderDTO.from_entity(saved)

    @transaction.atomic
    def delete(self, id: UUID) -> bool:
        """Soft-delete an order by ID.  The row (and its number) stays."""
        order = Order.objects.alive().filter(id=id).first()
        if not order:
            return False
        order.delete()
        logger.info("order.soft_deleted", order_id=str(id))
        return True

    # ------------------------------------------------------------------
    # Order number counter
    # ------------------------------------------------------------------

    @transaction.atomic
    def allocate_order_number(self) -> int:
        counter = self._locked_counter()
        value = counter.value
        counter.value = value + 1
        counter.save(update_fields=["value"])
        logger.info("order.number_allocated", counter=value)
        return value

    @transaction.atomic
    def peek_order_number(self) -> int:
        return self._locked_counter().value

    def _locked_counter(self) -> OrderNumberCounter:
        counter = (
            OrderNumberCounter.objects.select_for_update()
            .filter(key=COUNTER_KEY)
            .first()
        )
        if counter is None:
            start = next_counter_after(
                Order.objects.values_list("order_number", flat=True)
            )
            counter = OrderNumberCounter.objects.create(key=COUNTER_KEY, value=start)
            logger.info("order.counter_initialized", start=start)
        return counter
