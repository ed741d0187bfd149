"""Product URL configuration.

Routes::

    GET   /products/                      list (filter: status)
    GET   /products/{id}/                 retrieve with variants
    POST  /products/{id}/adjust-stock/    manual stock adjustment
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.products.views import ProductViewSet

router = SimpleRouter(trailing_slash=True)
router.register("products", ProductViewSet, basename="product")

urlpatterns = router.urls
