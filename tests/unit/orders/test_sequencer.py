"""Unit tests for the order number sequencer."""

from __future__ import annotations

from datetime import datetime, timezone as dt_timezone

import pytest

from modules.orders.models import OrderSequence
from modules.orders.sequencer import (
    OrderNumberSequencer,
    date_key_for,
    format_order_number,
)

pytestmark = pytest.mark.unit


class TestFormatting:
    def test_three_digit_padding(self):
        assert format_order_number("ORD", "251019", 7) == "ORD251019007"

    def test_sequence_past_999_widens(self):
        assert format_order_number("ORD", "251019", 1000) == "ORD2510191000"

    def test_date_key_uses_local_time(self, settings):
        settings.TIME_ZONE = "America/New_York"
        # 02:00 UTC on the 20th is still the 19th in New York.
        moment = datetime(2025, 10, 20, 2, 0, tzinfo=dt_timezone.utc)
        assert date_key_for(moment) == "251019"


class TestOrderNumberSequencer:
    def test_first_number_of_the_day(self):
        assert OrderNumberSequencer().next_number("251019") == "ORD251019001"

    def test_numbers_are_sequential(self):
        sequencer = OrderNumberSequencer()
        numbers = [sequencer.next_number("251019") for _ in range(3)]
        assert numbers == ["ORD251019001", "ORD251019002", "ORD251019003"]

    def test_each_day_restarts_at_one(self):
        sequencer = OrderNumberSequencer()
        sequencer.next_number("251019")
        sequencer.next_number("251019")
        assert sequencer.next_number("251020") == "ORD251020001"

    def test_counter_is_persisted(self):
        OrderNumberSequencer().next_value("251019")
        OrderNumberSequencer().next_value("251019")
        assert OrderSequence.objects.get(date_key="251019").last_value == 2

    def test_custom_prefix(self):
        assert OrderNumberSequencer(prefix="HMD").next_number("251019") == "HMD251019001"

    def test_existing_row_continues(self):
        OrderSequence.objects.create(date_key="251019", last_value=41)
        assert OrderNumberSequencer().next_number("251019") == "ORD251019042"


class TestOrderSaveAssignsNumber:
    def test_number_assigned_once(self, order_factory):
        order = order_factory()
        original = order.order_number

        assert original.startswith("ORD")
        assert original.endswith("001")

        order.tracking_number = "1Z999"
        order.save()
        order.refresh_from_db()
        assert order.order_number == original

    def test_two_orders_get_distinct_numbers(self, order_factory):
        first = order_factory()
        second = order_factory()
        assert first.order_number != second.order_number
