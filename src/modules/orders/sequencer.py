"""Order number sequencer.

Order numbers are ``ORD`` + ``YYMMDD`` + a daily sequence padded to three
digits (``ORD251019007``).  The sequence comes from an atomic
increment on ``OrderSequence``: the row for the day is created if
missing, then bumped with ``UPDATE ... SET last_value = last_value + 1``
and read back in the same transaction.  Concurrent callers serialize on
the row lock, so two orders on the same day never share a number.
Counting existing orders would race and is not used.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import structlog
from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from modules.orders.constants import SEQUENCE_WIDTH
from modules.orders.models import OrderSequence

logger = structlog.get_logger(__name__)


def date_key_for(moment: Optional[datetime] = None) -> str:
    """``YYMMDD`` for ``moment`` in the configured local time zone."""
    moment = moment or timezone.now()
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment)
    return moment.strftime("%y%m%d")


def format_order_number(prefix: str, date_key: str, sequence: int) -> str:
    """Sequences past 999 widen instead of wrapping."""
    return f"{prefix}{date_key}{sequence:0{SEQUENCE_WIDTH}d}"


class OrderNumberSequencer:
    def __init__(self, prefix: Optional[str] = None) -> None:
        self._prefix = prefix if prefix is not None else settings.ORDER_NUMBER_PREFIX

    def next_value(self, date_key: str) -> int:
        """Atomically increment and return the counter for ``date_key``."""
        with transaction.atomic():
            try:
                with transaction.atomic():
                    OrderSequence.objects.get_or_create(date_key=date_key)
            except IntegrityError:
                # Another transaction inserted the row first.
                pass
            OrderSequence.objects.filter(date_key=date_key).update(
                last_value=F("last_value") + 1
            )
            return (
                OrderSequence.objects.filter(date_key=date_key)
                .values_list("last_value", flat=True)
                .get()
            )

    def next_number(self, date_key: str) -> str:
        value = self.next_value(date_key)
        number = format_order_number(self._prefix, date_key, value)
        logger.debug("order.sequence_issued", date_key=date_key, sequence=value)
        return number
