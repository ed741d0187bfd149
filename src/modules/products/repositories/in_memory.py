"""In-memory stock ledger.

Used by unit tests and by callers that run the engine without a
database.  Records are immutable DTOs, so storing them by reference is
safe.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from modules.products.dtos import ProductDTO
from modules.products.repositories.interfaces import IProductRepository


class InMemoryProductRepository(IProductRepository):
    def __init__(self, products: Iterable[ProductDTO] = ()) -> None:
        self._products: Dict[UUID, ProductDTO] = {p.id: p for p in products}
        self.write_count = 0

    def get_by_id(self, id: UUID) -> Optional[ProductDTO]:
        return self._products.get(id)

    def update_product(self, product: ProductDTO) -> ProductDTO:
        self._products[product.id] = product
        self.write_count += 1
        return product

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[ProductDTO]:
        products = sorted(self._products.values(), key=lambda p: p.name)
        if not filters:
            return products
        return [
            p
            for p in products
            if all(getattr(p, key) == value for key, value in filters.items())
        ]

    def delete(self, id: UUID) -> bool:
        return self._products.pop(id, None) is not None
