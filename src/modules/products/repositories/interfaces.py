"""Product repository interface (the stock ledger contract).

Extends ``IRepository[ProductDTO]`` with the two operations the
inventory reconciler depends on: ``get_by_id`` and ``update_product``.
``update_product`` is a full-record upsert by id: callers always pass a
complete, updated record (variants and aggregate stock included) and no
partial-field merge takes place.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.dtos import ProductDTO


class IProductRepository(IRepository["ProductDTO"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_by_id(self, id: UUID) -> Optional[ProductDTO]:
        """Return the product record, or ``None`` if unknown or deleted."""

    @abstractmethod
    def update_product(self, product: ProductDTO) -> ProductDTO:
        """Replace the stored record for ``product.id`` (insert if absent)."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[ProductDTO]:
        """List products with optional filters."""

    def save(self, entity: ProductDTO) -> ProductDTO:
        return self.update_product(entity)
