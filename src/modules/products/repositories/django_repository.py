"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API and maps
model instances to ``ProductDTO`` records.  Error handling follows the
Null Object pattern: look-ups return ``None`` instead of raising, and
the caller decides what a missing product means.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.products.dtos import ProductDTO
from modules.products.models import Product, ProductVariant
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete stock ledger backed by Django ORM."""

    def get_by_id(self, id: UUID) -> Optional[ProductDTO]:
        """Retrieve a live product with its variants.

        Returns ``None`` for non-existent, soft-deleted or invalid IDs.
        """
        try:
            product = (
                Product.objects.alive()
                .prefetch_related("variants")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None
        return ProductDTO.from_entity(product) if product else None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[ProductDTO]:
        """List live products with optional Django ORM look-ups.

        Examples of valid filters::

            {"status": "ACTIVE"}
            {"name__icontains": "shirt"}
        """
        queryset = Product.objects.alive().prefetch_related("variants")
        if filters:
            queryset = queryset.filter(**filters)
        return [ProductDTO.from_entity(product) for product in queryset]

    @transaction.atomic
    def update_product(self, product: ProductDTO) -> ProductDTO:
        """Upsert the product row and synchronise its variant rows.

        Variants present in the record are updated or created; variants
        absent from it are removed.
        """
        entity = Product.objects.select_for_update().filter(id=product.id).first()
        if entity is None:
            entity = Product(id=product.id)

        entity.sku = product.sku
        entity.name = product.name
        entity.price = product.price
        entity.stock = product.stock
        entity.status = product.status
        entity.has_variants = product.has_variants
        entity.save()

        existing = {variant.id: variant for variant in entity.variants.all()}
        keep_ids = []
        for position, variant_dto in enumerate(product.variants):
            variant = existing.get(variant_dto.id) or ProductVariant(
                id=variant_dto.id, product=entity
            )
            variant.sku = variant_dto.sku
            variant.size = variant_dto.options.size or ""
            variant.color = variant_dto.options.color or ""
            variant.price = variant_dto.price
            variant.stock = variant_dto.stock
            variant.position = position
            variant.save()
            keep_ids.append(variant_dto.id)

        removed, _ = entity.variants.exclude(id__in=keep_ids).delete()

        logger.info(
            "product.saved",
            product_id=str(entity.id),
            sku=entity.sku,
            stock=entity.stock,
            variant_count=len(keep_ids),
            variants_removed=removed,
        )
        refreshed = Product.objects.prefetch_related("variants").get(id=entity.id)
        return ProductDTO.from_entity(refreshed)

    @transaction.atomic
    def delete(self, id: UUID) -> bool:
        """Soft-delete a product by ID.

        Returns ``True`` if the product was found and soft-deleted,
        ``False`` if no live product exists with the given ID.
        """
        product = Product.objects.alive().filter(id=id).first()
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True
