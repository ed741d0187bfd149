"""Product repositories package (stock ledger implementations)."""

from modules.products.repositories.in_memory import InMemoryProductRepository
from modules.products.repositories.interfaces import IProductRepository

__all__ = ["IProductRepository", "InMemoryProductRepository"]
