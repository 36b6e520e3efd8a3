"""Tests for the project exception hierarchy."""
from __future__ import annotations

import datetime as _dt
import unittest

from fieldbook.core.exceptions import (
    ConflictError,
    HoldExpiredError,
    InvalidIntervalError,
    NotFoundError,
    ProjectError,
    ValidationError,
    exception_factory,
)
from fieldbook.scheduling.detector import classify
from fieldbook.scheduling.interval import Interval
from fieldbook.scheduling.types import Commitment

UTC = _dt.timezone.utc


class TestProjectError(unittest.TestCase):
    def test_defaults_from_class(self):
        err = NotFoundError("missing")
        self.assertEqual(err.code, "NOT_FOUND")
        self.assertEqual(err.http_status, 404)
        self.assertEqual(str(err), "missing")

    def test_subclass_relationships(self):
        self.assertTrue(issubclass(InvalidIntervalError, ValidationError))
        self.assertTrue(issubclass(HoldExpiredError, ProjectError))
        self.assertEqual(HoldExpiredError("late").http_status, 410)

    def test_to_dict_includes_cause(self):
        try:
            raise KeyError("k")
        except KeyError as exc:
            err = ProjectError("wrapped", cause=exc, details={"a": 1})
        out = err.to_dict()
        self.assertEqual(out["details"], {"a": 1})
        self.assertIn("cause_traceback", out)

    def test_to_response_flattens_details(self):
        err = ValidationError("bad", details={"field": "startTime"})
        self.assertEqual(err.to_response(), {"message": "bad", "code": "VALIDATION_ERROR", "field": "startTime"})

    def test_exception_factory(self):
        Gone = exception_factory("GoneError", http_status=410)
        err = Gone("gone")
        self.assertEqual(err.code, "GONEERROR")
        self.assertEqual(err.http_status, 410)
        self.assertIsInstance(err, ProjectError)


class TestConflictError(unittest.TestCase):
    def test_carries_report_payload(self):
        slot = Interval(
            _dt.datetime(2026, 11, 2, 9, tzinfo=UTC),
            _dt.datetime(2026, 11, 2, 10, tzinfo=UTC),
        )
        booking = Commitment.booking("F1", slot, "u1")
        report = classify(slot, [booking])

        err = ConflictError("taken", report=report)

        self.assertIs(err.report, report)
        self.assertEqual(err.http_status, 409)
        body = err.to_response()
        self.assertEqual(body["code"], "CONFLICT")
        self.assertEqual(body["conflicts"][0]["bookingId"], str(booking.id))
        self.assertEqual(body["blockConflicts"], [])


if __name__ == "__main__":
    unittest.main()
