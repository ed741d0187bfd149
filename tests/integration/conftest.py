from __future__ import annotations

import pytest

from modules.audit.recorder import AuditRecorder
from modules.audit.django_sink import DjangoAuditSink
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all integration tests."""


@pytest.fixture()
def product_repo():
    return ProductDjangoRepository()


@pytest.fixture()
def order_repo():
    return OrderDjangoRepository()


@pytest.fixture()
def db_service(order_repo, product_repo):
    """OrderService wired to the database repositories and audit table."""
    return OrderService(order_repo, product_repo, AuditRecorder(DjangoAuditSink()))


@pytest.fixture()
def tee(product_repo, make_product):
    return product_repo.update_product(make_product(stock=5))


@pytest.fixture()
def hoodie(product_repo, make_variant_product):
    return product_repo.update_product(make_variant_product())


@pytest.fixture()
def order_payload():
    """JSON body for ``POST /api/v1/orders/``."""

    def _payload(*lines, status="DRAFT", **overrides):
        body = {
            "status": status,
            "channel": "ONLINE",
            "payment_method": "CARD_LINK",
            "customer": {"name": "Ana Souza", "email": "ana@example.com"},
            "items": [],
        }
        for product, qty, *variant in lines:
            variant = variant[0] if variant else None
            body["items"].append(
                {
                    "product_id": str(product.id),
                    "variant_id": str(variant.id) if variant else None,
                    "name_snapshot": product.name,
                    "sku_snapshot": variant.sku if variant else product.sku,
                    "unit_price": str(product.price),
                    "qty": qty,
                }
            )
        body.update(overrides)
        return body

    return _payload
