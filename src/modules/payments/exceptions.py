"""Payment domain exceptions.

Business declines are *not* exceptions; the gateway returns them as a
``GatewayOutcome`` with ``success=False``.  Only malformed card input and
transport/configuration problems raise.
"""

from __future__ import annotations


class CardValidationError(Exception):
    """Card data failed local validation; the gateway was never contacted."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class GatewayConfigurationError(Exception):
    """Gateway credentials or endpoint are missing."""


class GatewayTransportError(Exception):
    """The gateway could not be reached or answered with something unreadable."""
