"""Order domain exceptions.

The engine's expected outcomes (missing order, no-op transition,
insufficient stock) are returned as ``OrderResult`` values, not raised.
Exceptions are reserved for invalid input; the API layer (Views)
catches them and translates them into HTTP responses.
"""

from __future__ import annotations


class ProtectedOrderField(Exception):
    """A patch tried to change a field outside ``PATCHABLE_FIELDS``."""

    def __init__(self, fields):
        self.fields = sorted(fields)
        super().__init__(
            "Fields cannot be changed with update_order: " + ", ".join(self.fields)
        )
