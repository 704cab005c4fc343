"""Cart domain exceptions."""

from __future__ import annotations


class CartLineNotFound(Exception):
    """No cart line matches the requested id(s)."""


class CartLineForbidden(Exception):
    """The cart line belongs to a different identity."""
