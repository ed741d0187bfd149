"""Order repositories package."""

from modules.orders.repositories.in_memory import InMemoryOrderRepository
from modules.orders.repositories.interfaces import IOrderRepository

__all__ = ["IOrderRepository", "InMemoryOrderRepository"]
