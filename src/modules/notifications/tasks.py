"""Celery tasks for order e-mails.

Delivery is at-most-once: a ``NotificationFailure`` is logged and the
task ends without retrying.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from celery import shared_task

from modules.notifications.dispatcher import NotificationDispatcher
from modules.notifications.exceptions import NotificationFailure

logger = structlog.get_logger(__name__)


@shared_task(name="notifications.send_order_confirmation")
def send_order_confirmation_task(recipient: str, order_snapshot: Dict[str, Any]) -> bool:
    try:
        NotificationDispatcher().send_order_confirmation(recipient, order_snapshot)
    except NotificationFailure as exc:
        logger.error(
            "notification.confirmation_dropped",
            order_number=order_snapshot.get("order_number"),
            error=str(exc),
        )
        return False
    return True


@shared_task(name="notifications.send_status_update")
def send_status_update_task(
    recipient: str,
    order_number: str,
    new_status: str,
    note: Optional[str] = None,
    customer_name: str = "",
) -> bool:
    try:
        NotificationDispatcher().send_status_update(
            recipient,
            order_number,
            new_status,
            note=note,
            customer_name=customer_name,
        )
    except NotificationFailure as exc:
        logger.error(
            "notification.status_update_dropped",
            order_number=order_number,
            status=new_status,
            error=str(exc),
        )
        return False
    return True
