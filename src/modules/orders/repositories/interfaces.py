"""Order repository interface.

Extends ``IRepository[OrderDTO]`` with the methods the order engine
needs: query-based listing and the order-number counter.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.dtos import OrderDTO, OrderQuery


class IOrderRepository(IRepository["OrderDTO"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes its line items; ``save`` persists both
    atomically as one full-record upsert.
    """

    @abstractmethod
    def get_by_id(self, id: UUID) -> Optional[OrderDTO]:
        """Retrieve an order, or ``None`` if unknown or soft-deleted."""

    @abstractmethod
    def list(self, query: Optional[OrderQuery] = None) -> List[OrderDTO]:
        """Orders matching ``query``, newest first."""

    @abstractmethod
    def save(self, entity: OrderDTO) -> OrderDTO:
        """Insert or replace the order with ``entity.id``."""

    @abstractmethod
    def delete(self, id: UUID) -> bool:
        """Soft-delete an order.  Its number is never reused."""

    @abstractmethod
    def allocate_order_number(self) -> int:
        """Consume and return the next counter value."""

    @abstractmethod
    def peek_order_number(self) -> int:
        """Return the next counter value without consuming it."""
