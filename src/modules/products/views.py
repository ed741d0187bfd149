"""Product API views.

Exposes the stock ledger read side and ``ProductStockService`` via
HTTP using DRF ViewSets.  Domain exceptions are caught and translated
into appropriate HTTP status codes.  The view never swallows generic
exceptions.
"""

from __future__ import annotations

from uuid import UUID

from django.db import transaction
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.audit.actors import request_recorder
from modules.core.pagination import StandardResultsSetPagination
from modules.products.dtos import StockAdjustmentDTO
from modules.products.exceptions import (
    InvalidStockAdjustment,
    ProductNotFound,
    VariantNotFound,
)
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    ProductQuerySerializer,
    ProductSerializer,
    StockAdjustmentSerializer,
)
from modules.products.services import ProductStockService


def _not_found(message: str = "Product not found.") -> Response:
    return Response({"detail": message}, status=status.HTTP_404_NOT_FOUND)


class ProductViewSet(GenericViewSet):
    """ViewSet for stock ledger reads and manual stock adjustments.

    Uses ``ProductStockService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    serializer_class = ProductSerializer
    pagination_class = StandardResultsSetPagination

    def get_service(self) -> ProductStockService:
        return ProductStockService(
            repository=ProductDjangoRepository(),
            audit=request_recorder(self.request),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        query = ProductQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        products = self.get_service().list_products(dict(query.validated_data))

        page = self.paginate_queryset(products)
        serializer = ProductSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self.get_service().get_product(UUID(str(pk)))
        except (ProductNotFound, ValueError):
            return _not_found()
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Stock adjustment
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="adjust-stock")
    def adjust_stock(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/products/{pk}/adjust-stock/

        Accepts ``{"adjustment": N, "variant_id": ..., "reason": ...}``.
        """
        try:
            product_id = UUID(str(pk))
        except ValueError:
            return _not_found()

        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        dto = StockAdjustmentDTO(
            product_id=product_id,
            adjustment=data["adjustment"],
            variant_id=data.get("variant_id"),
            reason=data.get("reason", ""),
        )

        try:
            with transaction.atomic():
                product = self.get_service().adjust_stock(dto)
        except ProductNotFound:
            return _not_found()
        except VariantNotFound as exc:
            return _not_found(str(exc))
        except InvalidStockAdjustment as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )

        return Response(ProductSerializer(product).data)
