"""Order number concurrency integration test.

Proves that the atomic ``UPDATE ... SET last_value = last_value + 1`` in
``OrderNumberSequencer`` never hands the same number to two callers.

Scenarios:
- 10 threads each request the next order number for the same day; all
  10 numbers are distinct and cover 001..010.
- Two transactions interleaved by hand: while the first holds its
  increment uncommitted, the second waits, then gets the next value.

Uses ``TransactionTestCase`` so each thread runs in its own committed
transaction on its own connection.  The test settings put SQLite in a
file with ``BEGIN IMMEDIATE`` and a busy timeout, so a second writer
queues on the lock the way it queues on the row lock under PostgreSQL.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed

import django
from django.db import transaction
from django.test import TransactionTestCase

from modules.orders.models import OrderSequence
from modules.orders.sequencer import OrderNumberSequencer

logger = logging.getLogger(__name__)

DATE_KEY = "251019"
NUM_WORKERS = 10
WAIT_SECONDS = 10


class TestSequencerConcurrency(TransactionTestCase):
    """Concurrent callers on the same day get distinct numbers."""

    def _next_number_in_thread(self, thread_id: int) -> str:
        django.db.connections.close_all()
        try:
            number = OrderNumberSequencer().next_number(DATE_KEY)
        finally:
            django.db.connections.close_all()
        logger.warning("Thread %d: got %s", thread_id, number)
        return number

    def test_concurrent_numbers_are_unique(self):
        results = []

        with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
            futures = {
                pool.submit(self._next_number_in_thread, i): i
                for i in range(NUM_WORKERS)
            }
            for future in as_completed(futures):
                results.append(future.result())

        self.assertEqual(len(set(results)), NUM_WORKERS, f"Duplicates in {results}")
        self.assertEqual(
            sorted(results),
            [f"ORD{DATE_KEY}{n:03d}" for n in range(1, NUM_WORKERS + 1)],
        )
        self.assertEqual(
            OrderSequence.objects.get(date_key=DATE_KEY).last_value, NUM_WORKERS
        )

    def test_second_caller_waits_for_first_commit(self):
        first_holding = threading.Event()
        release_first = threading.Event()
        second_done = threading.Event()
        values = {}
        errors = []

        def first():
            try:
                with transaction.atomic():
                    values["first"] = OrderNumberSequencer().next_value(DATE_KEY)
                    first_holding.set()
                    release_first.wait(WAIT_SECONDS)
            except Exception as exc:
                errors.append(exc)
                first_holding.set()
            finally:
                django.db.connections.close_all()

        def second():
            try:
                values["second"] = OrderNumberSequencer().next_value(DATE_KEY)
            except Exception as exc:
                errors.append(exc)
            finally:
                second_done.set()
                django.db.connections.close_all()

        first_thread = threading.Thread(target=first)
        first_thread.start()
        self.assertTrue(first_holding.wait(WAIT_SECONDS))

        second_thread = threading.Thread(target=second)
        second_thread.start()

        # The first increment is still uncommitted, so the second caller blocks.
        self.assertFalse(second_done.wait(0.5))
        self.assertNotIn("second", values)

        release_first.set()
        first_thread.join(WAIT_SECONDS)
        second_thread.join(WAIT_SECONDS)

        self.assertEqual(errors, [])
        self.assertEqual(values, {"first": 1, "second": 2})
        self.assertEqual(OrderSequence.objects.get(date_key=DATE_KEY).last_value, 2)
