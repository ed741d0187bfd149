"""Unit tests for ProductStockService (manual stock adjustments)."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.audit.constants import AuditAction
from modules.products.dtos import StockAdjustmentDTO
from modules.products.exceptions import (
    InvalidStockAdjustment,
    ProductNotFound,
    VariantNotFound,
)
from modules.products.repositories.in_memory import InMemoryProductRepository
from modules.products.services import ProductStockService

pytestmark = pytest.mark.unit


@pytest.fixture()
def tee(make_product):
    return make_product(stock=5)


@pytest.fixture()
def hoodie(make_variant_product):
    return make_variant_product()


@pytest.fixture()
def stock_service(tee, hoodie, audit, clock):
    repository = InMemoryProductRepository([tee, hoodie])
    return ProductStockService(repository, audit, clock=clock), repository


class TestAdjustBaseStock:
    def test_positive_adjustment(self, stock_service, tee, audit_sink):
        service, repository = stock_service

        result = service.adjust_stock(
            StockAdjustmentDTO(product_id=tee.id, adjustment=3, reason="recount")
        )

        assert result.stock == 8
        assert repository.get_by_id(tee.id).stock == 8
        event = audit_sink.events[-1]
        assert event.action == AuditAction.STOCK_ADJUSTED
        assert event.changes[0].from_ == 5
        assert event.changes[0].to == 8
        assert event.metadata == {"adjustment": 3, "reason": "recount"}

    def test_adjustment_below_zero_rejected(self, stock_service, tee, audit_sink):
        service, repository = stock_service

        with pytest.raises(InvalidStockAdjustment):
            service.adjust_stock(StockAdjustmentDTO(product_id=tee.id, adjustment=-6))

        assert repository.get_by_id(tee.id).stock == 5
        assert audit_sink.events == []

    def test_unknown_product(self, stock_service):
        service, _ = stock_service
        with pytest.raises(ProductNotFound):
            service.adjust_stock(StockAdjustmentDTO(product_id=uuid4(), adjustment=1))

    def test_product_with_variants_requires_variant_id(self, stock_service, hoodie):
        service, _ = stock_service
        with pytest.raises(InvalidStockAdjustment):
            service.adjust_stock(StockAdjustmentDTO(product_id=hoodie.id, adjustment=1))


class TestAdjustVariantStock:
    def test_recomputes_aggregate(self, stock_service, hoodie, audit_sink):
        service, _ = stock_service
        blue = hoodie.variants[1]

        result = service.adjust_stock(
            StockAdjustmentDTO(product_id=hoodie.id, variant_id=blue.id, adjustment=-4)
        )

        assert result.get_variant(blue.id).stock == 0
        assert result.stock == 3
        event = audit_sink.events[-1]
        assert event.action == AuditAction.VARIANT_STOCK_ADJUSTED
        assert [c.field for c in event.changes] == [f"variants.{blue.sku}.stock", "stock"]

    def test_unknown_variant(self, stock_service, hoodie):
        service, _ = stock_service
        with pytest.raises(VariantNotFound):
            service.adjust_stock(
                StockAdjustmentDTO(product_id=hoodie.id, variant_id=uuid4(), adjustment=1)
            )


class TestQueries:
    def test_get_product(self, stock_service, tee):
        service, _ = stock_service
        assert service.get_product(tee.id) == tee

    def test_get_missing_product(self, stock_service):
        service, _ = stock_service
        with pytest.raises(ProductNotFound):
            service.get_product(uuid4())

    def test_list_products_filters_by_attribute(self, stock_service, hoodie):
        service, _ = stock_service
        assert service.list_products({"has_variants": True}) == [hoodie]
