"""Order URL configuration.

Routes::

    GET   /orders/               list (filters: search, status, channel,
                                 payment_method, from_date, to_date)
    POST  /orders/               create
    GET   /orders/{id}/          retrieve
    PATCH /orders/{id}/          patch non-status fields
    POST  /orders/{id}/status/   status transition
"""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.orders.views import OrderViewSet

router = DefaultRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
