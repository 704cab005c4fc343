"""Order e-mail notifications.

Renders a plain-text and an HTML template per message and hands them to
Django's mail backend.  Every failure surfaces as ``NotificationFailure``;
there is no retry.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

import structlog
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

from modules.notifications.exceptions import NotificationFailure

logger = structlog.get_logger(__name__)

STATUS_COLORS = {
    "order_placed": "#f39c12",
    "in_printing": "#3498db",
    "order_dispatched": "#9b59b6",
    "completed": "#27ae60",
    "cancelled": "#e74c3c",
}
DEFAULT_STATUS_COLOR = "#7f8c8d"

STATUS_MESSAGES = {
    "order_placed": "Your order has been received and is being processed.",
    "in_printing": "Your order is now in production and being printed.",
    "order_dispatched": "Great news! Your order has been dispatched and is on its way.",
    "completed": "Your order has been completed and delivered successfully.",
    "cancelled": (
        "Your order has been cancelled. "
        "Please contact us if you have any questions."
    ),
}
DEFAULT_STATUS_MESSAGE = "Your order status has been updated."

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


def status_text(status: str) -> str:
    """``order_dispatched`` -> ``Order Dispatched``."""
    return status.replace("_", " ").title()


def absolute_url(url: Optional[str], base_url: str) -> str:
    if not url:
        return ""
    if _ABSOLUTE_URL.match(url):
        return url
    base = base_url.rstrip("/")
    if url.startswith("/"):
        return f"{base}{url}"
    return f"{base}/{url}"


class NotificationDispatcher:
    """Sends order confirmation and status update e-mails."""

    def __init__(
        self,
        from_email: Optional[str] = None,
        shop_name: Optional[str] = None,
        base_url: Optional[str] = None,
        connection: Any = None,
    ) -> None:
        self._from_email = from_email or settings.DEFAULT_FROM_EMAIL
        self._shop_name = shop_name or settings.SHOP_NAME
        self._base_url = base_url or settings.BACKEND_BASE_URL
        self._connection = connection

    def send_order_confirmation(
        self, recipient: str, order_snapshot: Dict[str, Any]
    ) -> None:
        """Raises ``NotificationFailure`` if the message cannot be sent."""
        order_number = order_snapshot.get("order_number", "")
        items = [
            {**item, "image_url": absolute_url(item.get("image_url"), self._base_url)}
            for item in order_snapshot.get("items") or []
        ]
        status = order_snapshot.get("status", "")
        context = {
            "order": {**order_snapshot, "items": items},
            "status_text": status_text(status),
            "status_color": STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR),
        }
        self._send(
            recipient,
            subject=f"Order Confirmation - {order_number}",
            template="notifications/order_confirmation",
            context=context,
            order_number=order_number,
        )

    def send_status_update(
        self,
        recipient: str,
        order_number: str,
        new_status: str,
        note: Optional[str] = None,
        customer_name: str = "",
    ) -> None:
        """Raises ``NotificationFailure`` if the message cannot be sent."""
        context = {
            "order_number": order_number,
            "customer_name": customer_name,
            "status": new_status,
            "status_text": status_text(new_status),
            "status_color": STATUS_COLORS.get(new_status, DEFAULT_STATUS_COLOR),
            "status_message": STATUS_MESSAGES.get(new_status, DEFAULT_STATUS_MESSAGE),
            "note": note,
        }
        self._send(
            recipient,
            subject=f"Order Update - {order_number} - {status_text(new_status)}",
            template="notifications/status_update",
            context=context,
            order_number=order_number,
        )

    def _send(
        self,
        recipient: str,
        subject: str,
        template: str,
        context: Dict[str, Any],
        order_number: str,
    ) -> None:
        log = logger.bind(order_number=order_number, template=template)
        if not recipient:
            log.warning("notification.no_recipient")
            raise NotificationFailure(f"No recipient for order {order_number}.")

        context = {
            **context,
            "shop_name": self._shop_name,
            "year": timezone.now().year,
        }
        try:
            text_body = render_to_string(f"{template}.txt", context)
            html_body = render_to_string(f"{template}.html", context)
            message = EmailMultiAlternatives(
                subject=subject,
                body=text_body,
                from_email=f"{self._shop_name} <{self._from_email}>",
                to=[recipient],
                connection=self._connection,
            )
            message.attach_alternative(html_body, "text/html")
            message.send()
        except Exception as exc:
            log.error("notification.send_failed", error=str(exc))
            raise NotificationFailure(
                f"Could not send '{subject}' to {recipient}: {exc}"
            ) from exc

        log.info("notification.sent", subject=subject)
