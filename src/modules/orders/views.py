"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Each command runs inside ``transaction.atomic()``; the service itself
stays transaction-agnostic.  ``OrderResult`` error codes and domain
exceptions are translated into HTTP status codes here.  The view never
swallows generic exceptions.
"""

from __future__ import annotations

from uuid import UUID

from django.db import transaction
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.audit.actors import request_recorder
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.constants import OrderErrorCode
from modules.orders.dtos import OrderResult
from modules.orders.exceptions import ProtectedOrderField
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    ChangeStatusSerializer,
    CreateOrderSerializer,
    OrderListSerializer,
    OrderQuerySerializer,
    OrderSerializer,
)
from modules.orders.services import NOT_FOUND_MESSAGE, OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

ERROR_STATUS = {
    OrderErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    OrderErrorCode.NO_OP: status.HTTP_400_BAD_REQUEST,
    OrderErrorCode.INSUFFICIENT_STOCK: status.HTTP_409_CONFLICT,
}


def _parse_uuid(pk: str | None) -> UUID | None:
    if pk is None:
        return None
    try:
        return UUID(str(pk))
    except ValueError:
        return None


def _not_found() -> Response:
    return Response({"detail": NOT_FOUND_MESSAGE}, status=status.HTTP_404_NOT_FOUND)


def _error_response(result: OrderResult) -> Response:
    payload = result.as_payload()
    body = {
        "detail": payload["message"],
        "code": payload["error"],
        "problems": payload["problems"],
    }
    return Response(body, status=ERROR_STATUS[result.error])


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Builds an ``OrderService`` per request so the audit actor is the
    requesting user.  Does **not** extend ``ModelViewSet``: all ORM
    access goes through the service/repository layer.
    """

    serializer_class = OrderSerializer
    pagination_class = StandardResultsSetPagination

    def get_service(self) -> OrderService:
        return OrderService.from_settings(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            audit=request_recorder(self.request),
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = serializer.to_dto()
        except (PydanticValidationError, ValueError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            result = self.get_service().create_order(dto)

        if not result.success:
            return _error_response(result)
        return Response(OrderSerializer(result.order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Query parameters mirror ``OrderQuery``; results are paginated.
        """
        query_serializer = OrderQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        orders = self.get_service().list_orders(query_serializer.to_query())

        page = self.paginate_queryset(orders)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order_id = _parse_uuid(pk)
        if order_id is None:
            return _not_found()
        order = self.get_service().get_by_id(order_id)
        if order is None:
            return _not_found()
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Patch (non-status fields)
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/

        Status changes are rejected here; use ``POST /orders/{id}/status/``.
        """
        order_id = _parse_uuid(pk)
        if order_id is None:
            return _not_found()

        service = self.get_service()
        try:
            with transaction.atomic():
                updated = service.update_order(order_id, dict(request.data))
        except ProtectedOrderField as exc:
            return Response(
                {"detail": str(exc), "fields": exc.fields},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except (PydanticValidationError, ValueError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        if not updated:
            return _not_found()
        return Response(OrderSerializer(service.get_by_id(order_id)).data)

    # ------------------------------------------------------------------
    # Status transition (dedicated action)
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/status/

        Entering the inventory trigger status decrements stock;
        cancelling from it restocks.
        """
        order_id = _parse_uuid(pk)
        if order_id is None:
            return _not_found()

        serializer = ChangeStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            result = self.get_service().change_order_status(
                order_id, serializer.validated_data["status"]
            )

        if not result.success:
            return _error_response(result)
        return Response(OrderSerializer(result.order).data)
