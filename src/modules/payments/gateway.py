"""Authorize.Net payment gateway adapter.

Submits a single ``authCaptureTransaction`` (authorize and settle in one
step) to the Authorize.Net JSON API and normalizes the answer into a
``GatewayOutcome``.

Outcome mapping:

- approved (``resultCode == "Ok"``, ``responseCode == "1"``): success with
  transaction id and auth code.
- declined / rejected by the gateway: ``success=False`` with the gateway's
  first error text as ``reason``.  Never raised.
- timeout: ``success=False``, ``reason="timed out"``, ``indeterminate=True``.
  The charge may still have gone through.
- connection errors, HTTP errors, unreadable bodies: ``GatewayTransportError``.
- missing credentials: ``GatewayConfigurationError``.
"""

from __future__ import annotations

import json
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

import requests
import structlog
from django.conf import settings

from modules.payments.cards import validate_card
from modules.payments.dtos import CardInfo, GatewayOutcome
from modules.payments.exceptions import (
    GatewayConfigurationError,
    GatewayTransportError,
)

logger = structlog.get_logger(__name__)

APPROVED_RESULT_CODE = "Ok"
APPROVED_RESPONSE_CODE = "1"
DEFAULT_FAILURE_REASON = "Payment failed"
TIMEOUT_REASON = "timed out"

_CENTS = Decimal("0.01")


def format_amount(amount: Decimal) -> str:
    return str(Decimal(amount).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _failure_reason(body: Dict[str, Any]) -> str:
    transaction = body.get("transactionResponse") or {}
    errors = transaction.get("errors") or []
    if errors and errors[0].get("errorText"):
        return errors[0]["errorText"]

    messages = (body.get("messages") or {}).get("message") or []
    if messages and messages[0].get("text"):
        return messages[0]["text"]

    return DEFAULT_FAILURE_REASON


def parse_outcome(body: Dict[str, Any]) -> GatewayOutcome:
    """Map a decoded ``createTransactionResponse`` to a ``GatewayOutcome``."""
    result_code = (body.get("messages") or {}).get("resultCode")
    transaction = body.get("transactionResponse") or {}
    response_code = transaction.get("responseCode")

    if result_code == APPROVED_RESULT_CODE and response_code in (
        None,
        APPROVED_RESPONSE_CODE,
    ):
        return GatewayOutcome(
            success=True,
            transaction_id=transaction.get("transId"),
            auth_code=transaction.get("authCode"),
        )

    return GatewayOutcome(
        success=False,
        transaction_id=transaction.get("transId") or None,
        reason=_failure_reason(body),
    )


class AuthorizeNetGateway:
    """Authorize-and-capture client for the Authorize.Net JSON API.

    Credentials, endpoint and timeout default to Django settings.  A
    ``requests.Session`` can be injected for connection reuse or tests.
    """

    def __init__(
        self,
        login_id: Optional[str] = None,
        transaction_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._login_id = login_id if login_id is not None else settings.AUTHORIZE_NET_LOGIN_ID
        self._transaction_key = (
            transaction_key
            if transaction_key is not None
            else settings.AUTHORIZE_NET_TRANSACTION_KEY
        )
        self._endpoint = endpoint or settings.AUTHORIZE_NET_ENDPOINT
        self._timeout = timeout or settings.PAYMENT_GATEWAY_TIMEOUT
        self._session = session or requests.Session()

    def _build_payload(
        self, card_number: str, card: CardInfo, amount: Decimal
    ) -> Dict[str, Any]:
        return {
            "createTransactionRequest": {
                "merchantAuthentication": {
                    "name": self._login_id,
                    "transactionKey": self._transaction_key,
                },
                "transactionRequest": {
                    "transactionType": "authCaptureTransaction",
                    "amount": format_amount(amount),
                    "payment": {
                        "creditCard": {
                            "cardNumber": card_number,
                            "expirationDate": card.expiration_date,
                            "cardCode": card.cvv,
                        }
                    },
                },
            }
        }

    def authorize_and_capture(self, card: CardInfo, amount: Decimal) -> GatewayOutcome:
        """Charge ``amount`` to ``card``.

        Raises:
            CardValidationError: card data is malformed (no network call made).
            GatewayConfigurationError: credentials are not configured.
            GatewayTransportError: the gateway could not be reached.
        """
        card_number = validate_card(card.card_number, card.expiration_date, card.cvv)

        if not self._login_id or not self._transaction_key or not self._endpoint:
            logger.error("payment.gateway_unconfigured")
            raise GatewayConfigurationError("Payment gateway credentials are not configured.")

        log = logger.bind(card_last4=card_number[-4:], amount=format_amount(amount))
        log.info("payment.authorize_started")

        try:
            response = self._session.post(
                self._endpoint,
                json=self._build_payload(card_number, card, amount),
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.Timeout:
            log.warning("payment.authorize_timed_out", timeout=self._timeout)
            return GatewayOutcome(success=False, reason=TIMEOUT_REASON, indeterminate=True)
        except requests.RequestException as exc:
            log.error("payment.transport_error", error=str(exc))
            raise GatewayTransportError(f"Payment gateway unreachable: {exc}") from exc

        # The gateway prefixes its JSON with a UTF-8 byte-order mark.
        try:
            body = json.loads(response.content.decode("utf-8-sig"))
        except (UnicodeDecodeError, ValueError) as exc:
            log.error("payment.unreadable_response", status_code=response.status_code)
            raise GatewayTransportError("Payment gateway returned an unreadable response.") from exc

        if not isinstance(body, dict):
            raise GatewayTransportError("Payment gateway returned an unexpected payload.")

        outcome = parse_outcome(body)
        if outcome.success:
            log.info("payment.authorized", transaction_id=outcome.transaction_id)
        else:
            log.info("payment.declined", reason=outcome.reason)
        return outcome
