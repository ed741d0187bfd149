"""In-memory order store.

Backs unit tests and database-less use of the engine.  Deleted orders
leave the mapping but their numbers stay counted.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional
from uuid import UUID

from modules.orders.constants import next_counter_after
from modules.orders.dtos import OrderDTO, OrderQuery
from modules.orders.repositories.interfaces import IOrderRepository


class InMemoryOrderRepository(IOrderRepository):
    def __init__(self, seed_orders: Iterable[OrderDTO] = ()) -> None:
        self._orders: Dict[UUID, OrderDTO] = {o.id: o for o in seed_orders}
        self._counter = next_counter_after(o.order_number for o in self._orders.values())

    def get_by_id(self, id: UUID) -> Optional[OrderDTO]:
        return self._orders.get(id)

    def list(self, query: Optional[OrderQuery] = None) -> List[OrderDTO]:
        orders = [o for o in self._orders.values() if matches(o, query)]
        return sorted(orders, key=lambda o: (o.created_at, o.order_number), reverse=True)

    def save(self, entity: OrderDTO) -> OrderDTO:
        self._orders[entity.id] = entity
        return entity

    def delete(self, id: UUID) -> bool:
        return self._orders.pop(id, None) is not None

    def allocate_order_number(self) -> int:
        value = self._counter
        self._counter += 1
        return value

    def peek_order_number(self) -> int:
        return self._counter


def matches(order: OrderDTO, query: Optional[OrderQuery]) -> bool:
    """Python rendition of the ``OrderFilter`` semantics."""
    if query is None:
        return True
    if query.status and order.status != query.status:
        return False
    if query.channel and order.channel != query.channel:
        return False
    if query.payment_method and order.payment_method != query.payment_method:
        return False
    if query.from_date and order.created_at < query.from_date:
        return False
    if query.to_date and order.created_at > query.to_date:
        return False
    if query.search:
        needle = query.search.strip().lower()
        haystack = [
            order.order_number,
            order.customer.name,
            order.customer.phone or "",
            order.customer.email or "",
        ]
        if not any(needle in value.lower() for value in haystack):
            return False
    return True
