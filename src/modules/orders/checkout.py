"""Checkout workflow.

One checkout attempt moves through these stages::

    received -> validating -> authorizing -> (authorized | declined)
             -> persisting -> (persisted | persist_failed)
             -> finalizing -> done

- ``received``: every top-level section must be present, otherwise
  ``MissingCheckoutData``.  A body that is not a JSON object counts as
  missing every section.
- ``validating``: payload shape and pricing balance
  (``CheckoutValidationError``); card fields are checked by the gateway
  adapter before it makes any network call (``CardValidationError``).
- ``authorizing``: a decline raises ``PaymentDeclined``; a timeout or
  transport error raises ``PaymentIndeterminate``.  Nothing is persisted
  and the cart is untouched in both cases.
- ``persisting``: order, items, payment and the first history entry are
  written in one transaction.  If that fails the funds are already
  captured: the full context is logged at CRITICAL and
  ``OrderPersistenceFailed`` is raised.  No refund is attempted.
- ``finalizing``: the buyer's cart is cleared.  A failure here is logged
  and the order stands.
- ``done``: the confirmation e-mail is queued.  Queueing errors are logged
  and never reach the buyer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional

import structlog
from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
from pydantic import ValidationError as PydanticValidationError

from modules.notifications.tasks import send_order_confirmation_task
from modules.orders.constants import (
    INITIAL_HISTORY_NOTE,
    PAYMENT_METHOD_CARD,
    REQUIRED_CHECKOUT_SECTIONS,
    CheckoutStage,
    OrderStatus,
    PaymentStatus,
)
from modules.orders.dtos import CheckoutDTO
from modules.orders.exceptions import (
    CheckoutValidationError,
    MissingCheckoutData,
    OrderPersistenceFailed,
    PaymentDeclined,
    PaymentIndeterminate,
)
from modules.orders.snapshots import order_snapshot
from modules.payments.exceptions import GatewayTransportError

if TYPE_CHECKING:
    from modules.cart.services import CartService
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.payments.dtos import GatewayOutcome
    from modules.payments.gateway import AuthorizeNetGateway

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    order: Order
    transaction_id: str
    auth_code: Optional[str]


class CheckoutService:
    """Coordinates payment capture, order persistence and follow-up work.

    Collaborators are injected: the payment gateway, the order repository
    and the cart service.
    """

    def __init__(
        self,
        gateway: AuthorizeNetGateway,
        order_repository: IOrderRepository,
        cart_service: CartService,
    ) -> None:
        self._gateway = gateway
        self._orders = order_repository
        self._cart = cart_service

    def checkout(
        self,
        identity: str,
        payload: Mapping[str, Any],
        user: Any = None,
    ) -> CheckoutResult:
        """Run one checkout attempt for ``identity``.

        Raises:
            MissingCheckoutData: a required section is absent.
            CheckoutValidationError: the payload is malformed.
            CardValidationError: card data failed local checks.
            PaymentDeclined: the gateway declined the charge.
            PaymentIndeterminate: the charge outcome is unknown.
            GatewayConfigurationError: gateway credentials are missing.
            OrderPersistenceFailed: charged but the order was not recorded.
        """
        log = logger.bind(owner=identity)
        log.info("checkout.received", stage=CheckoutStage.RECEIVED)

        if not isinstance(payload, Mapping):
            payload = {}
        missing = [section for section in REQUIRED_CHECKOUT_SECTIONS if not payload.get(section)]
        if missing:
            log.warning("checkout.rejected", stage=CheckoutStage.RECEIVED, missing=missing)
            raise MissingCheckoutData(missing)

        try:
            dto = CheckoutDTO.model_validate(dict(payload))
        except PydanticValidationError as exc:
            log.warning(
                "checkout.rejected",
                stage=CheckoutStage.VALIDATING,
                error_count=exc.error_count(),
            )
            raise CheckoutValidationError(
                "Invalid checkout data.",
                exc.errors(include_url=False, include_context=False, include_input=False),
            ) from exc

        log = log.bind(amount=str(dto.pricing.total), card=dto.payment_data.masked_number)
        outcome = self._authorize(dto, log)

        log = log.bind(transaction_id=outcome.transaction_id, auth_code=outcome.auth_code)
        log.info("checkout.persisting", stage=CheckoutStage.PERSISTING)
        try:
            order = self._persist(identity, dto, outcome, user)
        except Exception as exc:
            log.critical(
                "checkout.persist_failed",
                stage=CheckoutStage.PERSIST_FAILED,
                payload=dto.masked(),
                error=str(exc),
                exc_info=True,
            )
            raise OrderPersistenceFailed(outcome.transaction_id, outcome.auth_code) from exc

        log = log.bind(order_id=str(order.id), order_number=order.order_number)
        log.info("checkout.persisted", stage=CheckoutStage.PERSISTED)

        self._finalize(identity, order, log)

        log.info("checkout.done", stage=CheckoutStage.DONE)
        return CheckoutResult(
            order=order,
            transaction_id=outcome.transaction_id or "",
            auth_code=outcome.auth_code,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _authorize(self, dto: CheckoutDTO, log: Any) -> GatewayOutcome:
        log.info("checkout.authorizing", stage=CheckoutStage.AUTHORIZING)
        try:
            outcome = self._gateway.authorize_and_capture(dto.payment_data, dto.pricing.total)
        except GatewayTransportError as exc:
            log.error("checkout.payment_indeterminate", error=str(exc))
            raise PaymentIndeterminate(str(exc)) from exc

        if outcome.indeterminate:
            log.error("checkout.payment_indeterminate", reason=outcome.reason)
            raise PaymentIndeterminate(outcome.reason or "payment status unknown")

        if not outcome.success:
            log.info("checkout.declined", stage=CheckoutStage.DECLINED, reason=outcome.reason)
            raise PaymentDeclined(outcome.reason or "Payment failed")

        log.info("checkout.authorized", stage=CheckoutStage.AUTHORIZED)
        return outcome

    @transaction.atomic
    def _persist(
        self,
        identity: str,
        dto: CheckoutDTO,
        outcome: GatewayOutcome,
        user: Any,
    ) -> Order:
        now = timezone.now()
        customer = dto.customer_info
        pricing = dto.pricing
        order = self._orders.create(
            {
                "owner": identity,
                "order_date": now,
                "customer_first_name": customer.first_name,
                "customer_last_name": customer.last_name,
                "customer_email": customer.email,
                "customer_phone": customer.phone,
                "customer_address": customer.address,
                "subtotal": pricing.subtotal,
                "tax": pricing.tax,
                "shipping_cost": pricing.shipping,
                "discount": pricing.discount,
                "total": pricing.total,
                "status": OrderStatus.ORDER_PLACED,
                "shipping_method": dto.shipping_info.method,
                "shipping_address": dto.shipping_info.address,
                "items": [
                    item.snapshot(position)
                    for position, item in enumerate(dto.cart_items)
                ],
                "payment": {
                    "method": PAYMENT_METHOD_CARD,
                    "transaction_id": outcome.transaction_id or "",
                    "auth_code": outcome.auth_code or "",
                    "amount": pricing.total,
                    "currency": settings.PAYMENT_CURRENCY,
                    "status": PaymentStatus.COMPLETED,
                    "paid_at": now,
                },
            }
        )
        self._orders.add_history(order, OrderStatus.ORDER_PLACED, INITIAL_HISTORY_NOTE, user)
        return self._orders.get_by_id(str(order.id)) or order

    def _finalize(self, identity: str, order: Order, log: Any) -> None:
        log.info("checkout.finalizing", stage=CheckoutStage.FINALIZING)
        try:
            self._cart.clear(identity)
        except DatabaseError as exc:
            log.error("checkout.cart_clear_failed", error=str(exc))

        try:
            send_order_confirmation_task.delay(order.customer_email, order_snapshot(order))
        except Exception as exc:
            log.error("checkout.notification_dispatch_failed", error=str(exc))
