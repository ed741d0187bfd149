"""Product domain exceptions.

Raised by the stock adjustment service when catalog rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist or has been soft-deleted."""


class VariantNotFound(Exception):
    """The product exists but does not declare the requested variant."""


class InvalidStockAdjustment(Exception):
    """The adjustment is zero or would drive stock below zero."""
