"""Tests for InMemoryAvailabilityStore."""
from __future__ import annotations

import asyncio
import datetime as _dt
import unittest
from uuid import uuid4

from fieldbook.core.exceptions import DuplicateIdError, NotFoundError
from fieldbook.scheduling.interval import Interval
from fieldbook.scheduling.store import InMemoryAvailabilityStore
from fieldbook.scheduling.types import BlockReason, BookingStatus, Commitment

UTC = _dt.timezone.utc


def _run(coro):
    return asyncio.run(coro)


def _iv(h1: int, h2: int) -> Interval:
    return Interval(
        _dt.datetime(2026, 11, 2, h1, tzinfo=UTC),
        _dt.datetime(2026, 11, 2, h2, tzinfo=UTC),
    )


class TestInMemoryAvailabilityStore(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryAvailabilityStore()

    def test_insert_and_get(self):
        c = _run(self.store.insert(Commitment.booking("F1", _iv(9, 10), "u1")))
        self.assertEqual(_run(self.store.get(c.id)), c)
        self.assertEqual(self.store.size, 1)

    def test_duplicate_id_rejected(self):
        c = _run(self.store.insert(Commitment.booking("F1", _iv(9, 10), "u1")))
        with self.assertRaises(DuplicateIdError):
            _run(self.store.insert(c))

    def test_commitments_for_filters_field_and_window(self):
        a = _run(self.store.insert(Commitment.booking("F1", _iv(11, 12), "u1")))
        b = _run(self.store.insert(Commitment.block("F1", _iv(9, 10), BlockReason.EVENT, "mgr")))
        _run(self.store.insert(Commitment.booking("F1", _iv(14, 15), "u1")))
        _run(self.store.insert(Commitment.booking("F2", _iv(9, 10), "u1")))

        found = _run(self.store.commitments_for("F1", _iv(8, 12)))

        self.assertEqual([c.id for c in found], [b.id, a.id])

    def test_remove(self):
        c = _run(self.store.insert(Commitment.block("F1", _iv(9, 10), BlockReason.EVENT, "mgr")))
        self.assertEqual(_run(self.store.remove(c.id)), c)
        self.assertIsNone(_run(self.store.get(c.id)))
        with self.assertRaises(NotFoundError):
            _run(self.store.remove(c.id))

    def test_set_status(self):
        c = _run(self.store.insert(Commitment.booking("F1", _iv(9, 10), "u1")))
        updated = _run(self.store.set_status(c.id, BookingStatus.CANCELLED))
        self.assertEqual(updated.status, BookingStatus.CANCELLED)
        self.assertTrue(_run(self.store.get(c.id)).is_cancelled)

    def test_set_status_rejects_blocks_and_unknown_ids(self):
        block = _run(self.store.insert(Commitment.block("F1", _iv(9, 10), BlockReason.EVENT, "mgr")))
        with self.assertRaises(NotFoundError):
            _run(self.store.set_status(block.id, BookingStatus.CANCELLED))
        with self.assertRaises(NotFoundError):
            _run(self.store.set_status(uuid4(), BookingStatus.CANCELLED))

    def test_blocks_for_owner_spans_fields(self):
        b1 = _run(self.store.insert(Commitment.block("F1", _iv(9, 10), BlockReason.EVENT, "mgr")))
        b2 = _run(self.store.insert(Commitment.block("F2", _iv(10, 11), BlockReason.PERSONAL, "mgr")))
        _run(self.store.insert(Commitment.block("F1", _iv(12, 13), BlockReason.EVENT, "other")))
        _run(self.store.insert(Commitment.booking("F1", _iv(13, 14), "mgr")))

        found = _run(self.store.blocks_for_owner("mgr", _iv(0, 23)))

        self.assertEqual([c.id for c in found], [b1.id, b2.id])

    def test_transaction_serialises_same_field(self):
        order = []

        async def writer(name: str):
            async with self.store.transaction("F1"):
                order.append(f"{name}:in")
                await asyncio.sleep(0)
                order.append(f"{name}:out")

        async def main():
            await asyncio.gather(writer("a"), writer("b"))

        _run(main())
        self.assertEqual(order, ["a:in", "a:out", "b:in", "b:out"])

    def test_transaction_does_not_serialise_different_fields(self):
        order = []

        async def writer(field_id: str):
            async with self.store.transaction(field_id):
                order.append(f"{field_id}:in")
                await asyncio.sleep(0)
                order.append(f"{field_id}:out")

        async def main():
            await asyncio.gather(writer("F1"), writer("F2"))

        _run(main())
        self.assertEqual(order, ["F1:in", "F2:in", "F1:out", "F2:out"])


if __name__ == "__main__":
    unittest.main()
