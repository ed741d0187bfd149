"""Unit tests for the stock ledger DTOs.

Covers:
- Non-negative stock validation.
- Copy-on-write stock updates and the variant aggregate invariant.
"""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.products.dtos import StockAdjustmentDTO, VariantOptions

pytestmark = pytest.mark.unit


class TestProductDTO:
    def test_negative_stock_rejected(self, make_product):
        with pytest.raises(ValidationError):
            make_product(stock=-1)

    def test_price_is_quantized(self, make_product):
        assert str(make_product(price="10").price) == "10.00"

    def test_is_frozen(self, make_product):
        product = make_product()
        with pytest.raises(ValidationError):
            product.stock = 3

    def test_with_stock_returns_new_record(self, make_product):
        product = make_product(stock=5)
        later = product.updated_at + timedelta(minutes=1)

        updated = product.with_stock(2, later)

        assert updated.stock == 2
        assert updated.updated_at == later
        assert product.stock == 5


class TestVariantAggregate:
    def test_with_variant_stock_recomputes_aggregate(self, make_variant_product):
        product = make_variant_product()
        red = product.variants[0]

        updated = product.with_variant_stock(red.id, 1, product.updated_at)

        assert updated.get_variant(red.id).stock == 1
        assert updated.stock == updated.variant_stock_total() == 5

    def test_unknown_variant_raises(self, make_variant_product):
        product = make_variant_product()
        with pytest.raises(KeyError):
            product.with_variant_stock(uuid4(), 1, product.updated_at)

    def test_negative_variant_stock_raises(self, make_variant_product):
        product = make_variant_product()
        with pytest.raises(ValueError):
            product.with_variant_stock(product.variants[0].id, -1, product.updated_at)

    def test_declares_variants(self, make_product, make_variant_product):
        assert make_variant_product().declares_variants
        assert not make_product().declares_variants


class TestVariantOptions:
    def test_label(self):
        assert VariantOptions(size="M", color="Red").label() == "M Red"
        assert VariantOptions(color="Red").label() == "Red"
        assert VariantOptions().label() == ""


class TestStockAdjustmentDTO:
    def test_zero_adjustment_rejected(self):
        with pytest.raises(ValidationError):
            StockAdjustmentDTO(product_id=uuid4(), adjustment=0)
