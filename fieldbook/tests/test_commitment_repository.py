"""Unit tests for CommitmentRepository with a mocked AsyncSession."""
from __future__ import annotations

import asyncio
import datetime as _dt
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from fieldbook.core.exceptions import DuplicateIdError, NotFoundError
from fieldbook.infra.database.models import CommitmentRecord
from fieldbook.infra.database.repositories import CommitmentRepository
from fieldbook.infra.database.repositories.commitment import _FIELD_LOCK_SQL, to_domain, to_row
from fieldbook.scheduling.interval import Interval
from fieldbook.scheduling.types import BlockReason, BookingStatus, Commitment, CommitmentKind

UTC = _dt.timezone.utc


def _run(coro):
    return asyncio.run(coro)


def _iv(h1: int, h2: int) -> Interval:
    return Interval(
        _dt.datetime(2026, 11, 2, h1, tzinfo=UTC),
        _dt.datetime(2026, 11, 2, h2, tzinfo=UTC),
    )


def _fake_record(**kwargs):
    defaults = {
        "id": uuid4(),
        "field_id": "F1",
        "start_time": _dt.datetime(2026, 11, 2, 9, tzinfo=UTC),
        "end_time": _dt.datetime(2026, 11, 2, 10, tzinfo=UTC),
        "kind": "booking",
        "status": "confirmed",
        "reason": None,
        "note": None,
        "owner_ref": "u1",
        "owner_name": "Ana",
        "created_at": _dt.datetime(2026, 11, 1, tzinfo=UTC),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def _session(get=None, rows=None):
    session = MagicMock()
    session.get = AsyncMock(return_value=get)
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows or []
    session.execute = AsyncMock(return_value=result)
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


class TestRowMapping(unittest.TestCase):
    def test_to_domain_booking(self):
        rec = _fake_record()
        c = to_domain(rec)
        self.assertEqual(c.id, rec.id)
        self.assertEqual(c.kind, CommitmentKind.BOOKING)
        self.assertEqual(c.status, BookingStatus.CONFIRMED)
        self.assertIsNone(c.reason)
        self.assertEqual(c.interval, _iv(9, 10))

    def test_to_domain_block(self):
        c = to_domain(_fake_record(kind="block", status=None, reason="maintenance", note="resurfacing"))
        self.assertTrue(c.is_block)
        self.assertEqual(c.reason, BlockReason.MAINTENANCE)
        self.assertEqual(c.note, "resurfacing")

    def test_to_row_uses_plain_values(self):
        block = Commitment.block("F1", _iv(9, 10), BlockReason.EVENT, "mgr", note="cup final")
        row = to_row(block)
        self.assertEqual(row["kind"], "block")
        self.assertEqual(row["reason"], "event")
        self.assertIsNone(row["status"])
        self.assertEqual(row["start_time"], block.interval.start)


class TestCommitmentRepository(unittest.TestCase):
    def test_commitments_for_maps_rows(self):
        rows = [_fake_record(), _fake_record(kind="block", status=None, reason="event")]
        session = _session(rows=rows)
        repo = CommitmentRepository(session)

        found = _run(repo.commitments_for("F1", _iv(8, 12)))

        self.assertEqual([c.id for c in found], [r.id for r in rows])
        stmt = session.execute.call_args.args[0]
        sql = str(stmt)
        self.assertIn("commitments.field_id", sql)
        self.assertIn("commitments.start_time <", sql)
        self.assertIn("commitments.end_time >", sql)

    def test_insert_creates_row(self):
        session = _session(get=None)
        repo = CommitmentRepository(session)
        booking = Commitment.booking("F1", _iv(9, 10), "u1", owner_name="Ana")

        stored = _run(repo.insert(booking))

        added = session.add.call_args.args[0]
        self.assertIsInstance(added, CommitmentRecord)
        self.assertEqual(added.id, booking.id)
        self.assertEqual(added.status, "confirmed")
        session.flush.assert_awaited()
        self.assertEqual(stored.id, booking.id)
        self.assertEqual(stored.owner_name, "Ana")

    def test_insert_duplicate_id(self):
        session = _session(get=_fake_record())
        repo = CommitmentRepository(session)
        with self.assertRaises(DuplicateIdError):
            _run(repo.insert(Commitment.booking("F1", _iv(9, 10), "u1")))
        session.add.assert_not_called()

    def test_remove(self):
        rec = _fake_record(kind="block", status=None, reason="personal")
        session = _session(get=rec)
        repo = CommitmentRepository(session)

        removed = _run(repo.remove(rec.id))

        self.assertEqual(removed.id, rec.id)
        session.delete.assert_awaited_once_with(rec)

    def test_remove_missing(self):
        repo = CommitmentRepository(_session(get=None))
        with self.assertRaises(NotFoundError):
            _run(repo.remove(uuid4()))

    def test_get_missing_returns_none(self):
        repo = CommitmentRepository(_session(get=None))
        self.assertIsNone(_run(repo.get(uuid4())))

    def test_set_status(self):
        rec = _fake_record()
        session = _session(get=rec)
        repo = CommitmentRepository(session)

        updated = _run(repo.set_status(rec.id, BookingStatus.CANCELLED))

        self.assertEqual(rec.status, "cancelled")
        self.assertEqual(updated.status, BookingStatus.CANCELLED)

    def test_set_status_on_block_is_not_found(self):
        rec = _fake_record(kind="block", status=None, reason="event")
        repo = CommitmentRepository(_session(get=rec))
        with self.assertRaises(NotFoundError):
            _run(repo.set_status(rec.id, BookingStatus.CANCELLED))

    def test_blocks_for_owner_filters_kind(self):
        session = _session(rows=[_fake_record(kind="block", status=None, reason="event", owner_ref="mgr")])
        repo = CommitmentRepository(session)

        found = _run(repo.blocks_for_owner("mgr", _iv(0, 23)))

        self.assertEqual(len(found), 1)
        sql = str(session.execute.call_args.args[0])
        self.assertIn("commitments.owner_ref", sql)
        self.assertIn("commitments.kind", sql)


class TestFieldTransaction(unittest.TestCase):
    def test_takes_advisory_lock_and_commits(self):
        session = _session()
        repo = CommitmentRepository(session)

        async def body():
            async with repo.transaction("F1") as tx:
                self.assertIs(tx, repo)

        _run(body())

        session.execute.assert_awaited_once_with(_FIELD_LOCK_SQL, {"key": "field:F1"})
        session.commit.assert_awaited_once()
        session.rollback.assert_not_awaited()

    def test_rolls_back_on_error(self):
        session = _session()
        repo = CommitmentRepository(session)

        async def body():
            async with repo.transaction("F1"):
                raise NotFoundError("gone")

        with self.assertRaises(NotFoundError):
            _run(body())
        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()


if __name__ == "__main__":
    unittest.main()
