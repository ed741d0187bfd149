from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from modules.audit.recorder import AuditRecorder
from modules.audit.sinks import InMemoryAuditSink
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO, CustomerSnapshot
from modules.orders.repositories.in_memory import InMemoryOrderRepository
from modules.orders.services import OrderService
from modules.products.dtos import ProductDTO, ProductVariantDTO, VariantOptions
from modules.products.repositories.in_memory import InMemoryProductRepository
from shared.domain.clock import FrozenClock

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Engine building blocks (no database)
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock():
    return FrozenClock(T0, tick=timedelta(seconds=1))


@pytest.fixture()
def audit_sink():
    return InMemoryAuditSink()


@pytest.fixture()
def audit(audit_sink, clock):
    return AuditRecorder(audit_sink, clock=clock)


@pytest.fixture()
def make_product():
    def _make(sku="TEE-001", name="Basic Tee", price="19.90", stock=5, **kwargs):
        return ProductDTO(
            sku=sku,
            name=name,
            price=Decimal(price),
            stock=stock,
            updated_at=T0,
            **kwargs,
        )

    return _make


@pytest.fixture()
def make_variant_product():
    """Product with variants; ``stock`` is the sum of the variant stock."""

    def _make(sku="HOOD-001", name="Hoodie", variant_stock=(("M", "Red", 3), ("L", "Blue", 4))):
        variants = [
            ProductVariantDTO(
                sku=f"{sku}-{size}-{color}".upper(),
                options=VariantOptions(size=size, color=color),
                stock=stock,
                updated_at=T0,
            )
            for size, color, stock in variant_stock
        ]
        return ProductDTO(
            sku=sku,
            name=name,
            price=Decimal("59.90"),
            stock=sum(v.stock for v in variants),
            has_variants=True,
            variants=variants,
            updated_at=T0,
        )

    return _make


@pytest.fixture()
def line_for():
    """Build a draft line item pointing at a product (and optionally a variant)."""

    def _line(product, qty=1, variant=None, unit_price=None):
        return CreateOrderItemDTO(
            product_id=product.id,
            variant_id=variant.id if variant else None,
            name_snapshot=product.name,
            sku_snapshot=variant.sku if variant else product.sku,
            options_snapshot=variant.options if variant else None,
            unit_price=unit_price if unit_price is not None else product.price,
            qty=qty,
        )

    return _line


@pytest.fixture()
def make_draft():
    def _draft(*items, status=OrderStatus.DRAFT, **kwargs):
        kwargs.setdefault("customer", CustomerSnapshot(name="Ana Souza"))
        return CreateOrderDTO(status=status, items=list(items), **kwargs)

    return _draft


@pytest.fixture()
def ledger():
    return InMemoryProductRepository()


@pytest.fixture()
def order_store():
    return InMemoryOrderRepository()


@pytest.fixture()
def service(order_store, ledger, audit, clock):
    return OrderService(order_store, ledger, audit, clock=clock)
