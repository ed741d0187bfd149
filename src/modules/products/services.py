"""Product stock service (manual stock adjustments).

The only sanctioned way to change stock outside the order lifecycle.
Order-driven decrements and restocks live in
``modules.orders.inventory`` and must not be re-derived here.

Business rules enforced:
- Stock never goes below zero: an adjustment that would do so is
  rejected, not floored.
- Adjusting a variant recomputes the product's aggregate stock.
- Every adjustment is recorded in the audit trail.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog

from modules.audit.constants import AuditAction, AuditEntityType
from modules.audit.dtos import AuditChange, AuditEntity
from modules.products.exceptions import (
    InvalidStockAdjustment,
    ProductNotFound,
    VariantNotFound,
)
from shared.domain.clock import Clock, SystemClock

if TYPE_CHECKING:
    from modules.audit.recorder import AuditRecorder
    from modules.products.dtos import ProductDTO, StockAdjustmentDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductStockService:
    """Application service for catalog stock use-cases.

    Receives the stock ledger and audit recorder via constructor
    injection.
    """

    def __init__(
        self,
        repository: IProductRepository,
        audit: AuditRecorder,
        clock: Optional[Clock] = None,
    ) -> None:
        self._repo = repository
        self._audit = audit
        self._clock = clock or SystemClock()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def adjust_stock(self, dto: StockAdjustmentDTO) -> ProductDTO:
        """Apply a signed stock adjustment to a product or one of its variants.

        Raises:
            ProductNotFound: the product does not exist.
            VariantNotFound: ``variant_id`` is not declared by the product.
            InvalidStockAdjustment: the result would be negative.
        """
        log = logger.bind(
            product_id=str(dto.product_id),
            variant_id=str(dto.variant_id) if dto.variant_id else None,
            adjustment=dto.adjustment,
        )

        product = self._repo.get_by_id(dto.product_id)
        if product is None:
            raise ProductNotFound(f"Product {dto.product_id} not found.")

        now = self._clock.now()
        if dto.variant_id is not None:
            variant = product.get_variant(dto.variant_id)
            if variant is None:
                raise VariantNotFound(
                    f"Variant {dto.variant_id} not found on product {product.sku}."
                )
            before = variant.stock
            after = before + dto.adjustment
            if after < 0:
                log.warning("product.stock_adjustment_rejected", current=before)
                raise InvalidStockAdjustment(
                    f"Variant {variant.sku}: cannot adjust by {dto.adjustment}, "
                    f"only {before} in stock."
                )
            updated = product.with_variant_stock(variant.id, after, now)
            action = AuditAction.VARIANT_STOCK_ADJUSTED
            changes = [
                AuditChange(field=f"variants.{variant.sku}.stock", from_=before, to=after),
                AuditChange(field="stock", from_=product.stock, to=updated.stock),
            ]
        else:
            if product.declares_variants:
                raise InvalidStockAdjustment(
                    f"Product {product.sku} tracks stock per variant; "
                    "pass a variant_id."
                )
            before = product.stock
            after = before + dto.adjustment
            if after < 0:
                log.warning("product.stock_adjustment_rejected", current=before)
                raise InvalidStockAdjustment(
                    f"Product {product.sku}: cannot adjust by {dto.adjustment}, "
                    f"only {before} in stock."
                )
            updated = product.with_stock(after, now)
            action = AuditAction.STOCK_ADJUSTED
            changes = [AuditChange(field="stock", from_=before, to=after)]

        saved = self._repo.update_product(updated)
        self._audit.record(
            action,
            entity=AuditEntity(
                type=AuditEntityType.PRODUCT, id=str(product.id), label=product.name
            ),
            changes=changes,
            metadata=self._adjustment_metadata(dto),
        )
        log.info("product.stock_adjusted", stock=saved.stock)
        return saved

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product(self, product_id: UUID) -> ProductDTO:
        """Retrieve a single product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFound(f"Product {product_id} not found.")
        return product

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[ProductDTO]:
        return self._repo.list(filters)

    @staticmethod
    def _adjustment_metadata(dto: StockAdjustmentDTO) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {"adjustment": dto.adjustment}
        if dto.reason:
            metadata["reason"] = dto.reason
        return metadata
