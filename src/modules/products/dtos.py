"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
``ProductDTO`` is the full stock-ledger record exchanged through
``IProductRepository``: readers get it from ``get_by_id`` and writers
hand back a complete, updated copy to ``update_product``.  DTOs are
immutable (``frozen=True``); updates go through the ``with_*`` helpers,
which return new records.

- ``VariantOptions``: size/color pair shared with order line snapshots.
- ``ProductVariantDTO``: one variant with its own stock.
- ``ProductDTO``: product with aggregate stock and variants.
- ``StockAdjustmentDTO``: input for a manual stock adjustment.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

import uuid6
from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.products.constants import ProductStatus
from shared.domain.money import to_money

if TYPE_CHECKING:
    from modules.products.models import Product


class VariantOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    size: Optional[str] = None
    color: Optional[str] = None

    def label(self) -> str:
        """``"M Red"``-style label; empty when no option is set."""
        return " ".join(part for part in (self.size, self.color) if part)


class ProductVariantDTO(BaseModel):
    """Immutable variant record."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid6.uuid7)
    sku: str
    options: VariantOptions = Field(default_factory=VariantOptions)
    price: Optional[Decimal] = None
    stock: int = 0
    updated_at: datetime

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock cannot be negative.")
        return v

    @field_validator("price")
    @classmethod
    def quantize_price(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return None if v is None else to_money(v)


class ProductDTO(BaseModel):
    """Immutable product record as stored in the stock ledger."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid6.uuid7)
    sku: str
    name: str
    price: Decimal
    stock: int = 0
    status: ProductStatus = ProductStatus.ACTIVE
    has_variants: bool = False
    variants: List[ProductVariantDTO] = Field(default_factory=list)
    updated_at: datetime

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock cannot be negative.")
        return v

    @field_validator("price")
    @classmethod
    def quantize_price(cls, v: Decimal) -> Decimal:
        return to_money(v)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def declares_variants(self) -> bool:
        return self.has_variants or bool(self.variants)

    def get_variant(self, variant_id: UUID) -> Optional[ProductVariantDTO]:
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None

    def variant_stock_total(self) -> int:
        return sum(v.stock for v in self.variants)

    # ------------------------------------------------------------------
    # Copy-on-write updates
    # ------------------------------------------------------------------

    def with_stock(self, stock: int, now: datetime) -> ProductDTO:
        """Return a copy with a new base stock (products without variants)."""
        return self.model_copy(update={"stock": stock, "updated_at": now})

    def with_variant_stock(
        self, variant_id: UUID, stock: int, now: datetime
    ) -> ProductDTO:
        """Return a copy with one variant's stock replaced.

        The aggregate ``stock`` is recomputed as the sum of all variants,
        including the updated one.

        Raises:
            KeyError: if the product has no variant with that id.
        """
        if self.get_variant(variant_id) is None:
            raise KeyError(f"Variant {variant_id} not found on product {self.id}.")
        if stock < 0:
            raise ValueError("Stock cannot be negative.")
        variants = [
            v.model_copy(update={"stock": stock, "updated_at": now})
            if v.id == variant_id
            else v
            for v in self.variants
        ]
        return self.model_copy(
            update={
                "variants": variants,
                "stock": sum(v.stock for v in variants),
                "updated_at": now,
            }
        )

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @classmethod
    def from_entity(cls, product: Product) -> ProductDTO:
        """Build a ledger record from a Product model instance.

        Assumes ``variants`` are prefetched.
        """
        variants = [
            ProductVariantDTO(
                id=variant.id,
                sku=variant.sku,
                options=VariantOptions(
                    size=variant.size or None,
                    color=variant.color or None,
                ),
                price=variant.price,
                stock=variant.stock,
                updated_at=variant.updated_at,
            )
            for variant in product.variants.all()
        ]
        return cls(
            id=product.id,
            sku=product.sku,
            name=product.name,
            price=product.price,
            stock=product.stock,
            status=product.status,
            has_variants=product.has_variants,
            variants=variants,
            updated_at=product.updated_at,
        )


class StockAdjustmentDTO(BaseModel):
    """Immutable input for ``ProductStockService.adjust_stock``."""

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    adjustment: int
    variant_id: Optional[UUID] = None
    reason: str = ""

    @field_validator("adjustment")
    @classmethod
    def adjustment_must_not_be_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("Adjustment must not be zero.")
        return v
