"""Order domain exceptions.

Raised by the service layer; the API layer catches them and translates
them into HTTP responses.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class OrderNotFound(Exception):
    """The requested order does not exist or is not visible to the caller."""


class InvalidOrderStatus(Exception):
    """The status is not one of the five order statuses."""


class InvalidAdminNote(Exception):
    """An admin note was blank."""


class MissingCheckoutData(Exception):
    """One or more required checkout sections were absent."""

    def __init__(self, missing: List[str]) -> None:
        super().__init__(f"Missing required payment information: {', '.join(missing)}")
        self.missing = missing


class CheckoutValidationError(Exception):
    """Checkout payload was present but malformed."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class PaymentDeclined(Exception):
    """The gateway declined the charge.  Nothing was persisted."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class PaymentIndeterminate(Exception):
    """The charge may or may not have gone through (timeout or transport error).

    Must never be reported to the buyer as a decline.
    """


class OrderPersistenceFailed(Exception):
    """Funds were captured but the order could not be written."""

    def __init__(self, transaction_id: Optional[str], auth_code: Optional[str]) -> None:
        super().__init__(
            f"Payment {transaction_id} captured but order could not be recorded."
        )
        self.transaction_id = transaction_id
        self.auth_code = auth_code
