from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import List

import uuid6
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from modules.orders.constants import (
    OrderStatus,
    PaymentMethod,
    SalesChannel,
    format_order_number,
)
from modules.orders.dtos import (
    CreateOrderItemDTO,
    CustomerSnapshot,
    OrderDTO,
    OrderItemDTO,
    compute_order_totals,
)
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.products.constants import ProductStatus
from modules.products.dtos import ProductDTO, ProductVariantDTO, VariantOptions
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

SEED_CUSTOMERS = [
    ("Ana Souza", "+55 11 91234-0001", "ana@example.com"),
    ("Bruno Lima", "+55 11 91234-0002", None),
    ("Carla Mendes", None, "carla@example.com"),
    ("Daniel Costa", "+55 21 98888-0004", "daniel@example.com"),
    ("Helena Ferreira", "+55 31 97777-0005", None),
]

# (status, channel, payment method, days ago, [(product index, variant index, qty)])
SEED_ORDERS = [
    (OrderStatus.FULFILLED, SalesChannel.ONLINE, PaymentMethod.CARD_LINK, 30, [(0, 1, 2)]),
    (OrderStatus.FULFILLED, SalesChannel.OFFLINE, PaymentMethod.CASH, 27, [(2, None, 1)]),
    (OrderStatus.CANCELLED, SalesChannel.WHATSAPP, PaymentMethod.TRANSFER, 24, [(1, 0, 1)]),
    (OrderStatus.PAID, SalesChannel.INSTAGRAM, PaymentMethod.TRANSFER, 20, [(0, 0, 1), (3, None, 2)]),
    (OrderStatus.REFUNDED, SalesChannel.ONLINE, PaymentMethod.CARD_LINK, 16, [(4, None, 1)]),
    (OrderStatus.PAID, SalesChannel.OFFLINE, PaymentMethod.CASH, 12, [(2, None, 3)]),
    (OrderStatus.PLACED, SalesChannel.WHATSAPP, PaymentMethod.OTHER, 8, [(1, 2, 1)]),
    (OrderStatus.PLACED, SalesChannel.ONLINE, PaymentMethod.CARD_LINK, 5, [(0, 2, 1), (4, None, 1)]),
    (OrderStatus.DRAFT, SalesChannel.OFFLINE, PaymentMethod.CASH, 2, [(3, None, 4)]),
    (OrderStatus.DRAFT, SalesChannel.INSTAGRAM, PaymentMethod.TRANSFER, 1, [(1, 1, 2)]),
]


class Command(BaseCommand):
    help = "Seed database with demo catalog and order data."

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        with transaction.atomic():
            users_created = self._seed_users()
            products = self._seed_products()
            orders_created = self._seed_orders(products)

        next_number = format_order_number(OrderDjangoRepository().peek_order_number())
        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"products={len(products)}, "
                f"orders={orders_created}, "
                f"next_order_number={next_number}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        if User.objects.filter(username="admin").exists():
            return 0
        User.objects.create_superuser("admin", password="admin123")
        return 1

    def _seed_products(self) -> List[ProductDTO]:
        self.stdout.write("Creating products...")
        repository = ProductDjangoRepository()
        now = timezone.now()

        def variants(sku: str, rows) -> List[ProductVariantDTO]:
            return [
                ProductVariantDTO(
                    sku=f"{sku}-{size}-{color}".upper(),
                    options=VariantOptions(size=size, color=color),
                    stock=stock,
                    updated_at=now,
                )
                for size, color, stock in rows
            ]

        catalog = [
            ("TEE-001", "Basic Tee", "19.90", variants(
                "TEE-001", [("S", "White", 8), ("M", "White", 12), ("L", "Black", 5)]
            )),
            ("HOOD-001", "Zip Hoodie", "59.90", variants(
                "HOOD-001", [("M", "Grey", 4), ("L", "Grey", 6), ("XL", "Navy", 2)]
            )),
            ("MUG-001", "Ceramic Mug", "12.50", []),
            ("CAP-001", "Snapback Cap", "24.00", []),
            ("TOTE-001", "Canvas Tote", "15.00", []),
        ]
        base_stock = {"MUG-001": 40, "CAP-001": 15, "TOTE-001": 25}

        products: List[ProductDTO] = []
        for sku, name, price, product_variants in catalog:
            existing = Product.objects.alive().filter(sku=sku).first()
            if existing is not None:
                products.append(repository.get_by_id(existing.id))
                continue
            products.append(
                repository.update_product(
                    ProductDTO(
                        sku=sku,
                        name=name,
                        price=Decimal(price),
                        stock=sum(v.stock for v in product_variants)
                        if product_variants
                        else base_stock[sku],
                        status=ProductStatus.ACTIVE,
                        has_variants=bool(product_variants),
                        variants=product_variants,
                        updated_at=now,
                    )
                )
            )
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, products: List[ProductDTO]) -> int:
        self.stdout.write("Creating orders...")
        if Order.objects.exists():
            self.stdout.write(self.style.WARNING("Skipping orders (already seeded)."))
            return 0

        repository = OrderDjangoRepository()
        now = timezone.now()
        for index, (status, channel, payment, days_ago, lines) in enumerate(SEED_ORDERS):
            name, phone, email = SEED_CUSTOMERS[index % len(SEED_CUSTOMERS)]
            items = []
            for product_index, variant_index, qty in lines:
                product = products[product_index]
                variant = (
                    product.variants[variant_index] if variant_index is not None else None
                )
                items.append(
                    OrderItemDTO.from_draft(
                        CreateOrderItemDTO(
                            product_id=product.id,
                            variant_id=variant.id if variant else None,
                            name_snapshot=product.name,
                            sku_snapshot=variant.sku if variant else product.sku,
                            options_snapshot=variant.options if variant else None,
                            unit_price=(variant.price if variant else None)
                            or product.price,
                            qty=qty,
                        )
                    )
                )
            created_at = now - timedelta(days=days_ago)
            repository.save(
                OrderDTO(
                    id=uuid6.uuid7(),
                    order_number=format_order_number(index + 1),
                    status=status,
                    channel=channel,
                    payment_method=payment,
                    customer=CustomerSnapshot(name=name, phone=phone, email=email),
                    items=items,
                    notes="Seed order",
                    created_at=created_at,
                    updated_at=created_at,
                    **compute_order_totals(items),
                )
            )

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return len(SEED_ORDERS)
