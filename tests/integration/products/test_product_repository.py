"""Integration tests for ProductDjangoRepository."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from modules.products.models import Product, ProductVariant

pytestmark = pytest.mark.integration

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_round_trip_with_variants(product_repo, hoodie):
    stored = product_repo.get_by_id(hoodie.id)

    assert stored.sku == "HOOD-001"
    assert stored.has_variants is True
    assert [v.options.label() for v in stored.variants] == ["M Red", "L Blue"]
    assert stored.stock == stored.variant_stock_total() == 7


def test_variant_stock_write_syncs_rows(product_repo, hoodie):
    red = hoodie.variants[0]

    product_repo.update_product(hoodie.with_variant_stock(red.id, 1, NOW))

    assert ProductVariant.objects.get(id=red.id).stock == 1
    assert Product.objects.get(id=hoodie.id).stock == 5


def test_dropped_variant_is_removed(product_repo, hoodie):
    kept = hoodie.variants[:1]

    product_repo.update_product(
        hoodie.model_copy(update={"variants": kept, "stock": kept[0].stock})
    )

    assert list(
        ProductVariant.objects.filter(product_id=hoodie.id).values_list("id", flat=True)
    ) == [kept[0].id]


def test_soft_deleted_product_is_invisible(product_repo, tee):
    assert product_repo.delete(tee.id) is True

    assert product_repo.get_by_id(tee.id) is None
    assert product_repo.get_by_id(uuid4()) is None
    assert product_repo.delete(tee.id) is False


def test_list_filters(product_repo, tee, hoodie):
    assert {p.id for p in product_repo.list()} == {tee.id, hoodie.id}
    assert [p.id for p in product_repo.list({"sku": "TEE-001"})] == [tee.id]
