"""Integration tests for the ``seed_data`` management command."""

from __future__ import annotations

from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command

from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.products.models import Product

pytestmark = pytest.mark.integration


def run_seed() -> str:
    out = StringIO()
    call_command("seed_data", stdout=out)
    return out.getvalue()


def test_seeds_catalog_and_orders():
    output = run_seed()

    assert Product.objects.alive().count() == 5
    assert Order.objects.count() == 10
    assert get_user_model().objects.filter(username="admin", is_superuser=True).exists()
    assert "next_order_number=ORD-000011" in output


def test_variant_products_keep_aggregate_stock():
    run_seed()

    tee = Product.objects.prefetch_related("variants").get(sku="TEE-001")
    assert tee.has_variants
    assert tee.stock == sum(v.stock for v in tee.variants.all()) == 25


def test_is_idempotent():
    run_seed()
    output = run_seed()

    assert Product.objects.count() == 5
    assert Order.objects.count() == 10
    assert "orders=0" in output


def test_next_created_order_continues_the_sequence():
    run_seed()

    assert OrderDjangoRepository().allocate_order_number() == 11
