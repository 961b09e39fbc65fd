"""
Unit tests for payment_status — pure functions, no DB.

"today" is always passed explicitly so results do not depend on the wall clock.
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from app.models.rental import PaymentStatus
from app.services.payment_status import (
    classify,
    occupancy_label,
    status_label,
)


# ── Paid in full ─────────────────────────────────────────────────────────────

class TestPaidInFull:
    def test_paid_before_due_date(self):
        result = classify(1200, 1200, date(2024, 12, 1), date(2024, 11, 30), today=date(2024, 12, 10))
        assert result == PaymentStatus.PAID_ON_TIME

    def test_paid_on_due_date_counts_as_on_time(self):
        result = classify(1200, 1200, date(2024, 12, 1), date(2024, 12, 1), today=date(2024, 12, 10))
        assert result == PaymentStatus.PAID_ON_TIME

    def test_paid_after_due_date(self):
        result = classify(1350, 1350, date(2024, 12, 1), date(2024, 12, 5), today=date(2024, 12, 10))
        assert result == PaymentStatus.LATE_PAID

    def test_overpayment_is_paid(self):
        result = classify(1000, 1100, date(2024, 12, 1), date(2024, 11, 28), today=date(2024, 12, 10))
        assert result == PaymentStatus.PAID_ON_TIME

    def test_paid_status_ignores_today(self):
        # Once paid in full, the result is the same before and after the due date
        for today in (date(2024, 11, 1), date(2025, 6, 1)):
            assert classify(1350, 1350, date(2024, 12, 1), date(2024, 12, 5), today=today) == PaymentStatus.LATE_PAID

    def test_time_of_day_is_ignored(self):
        result = classify(
            1200, 1200,
            datetime(2024, 12, 1, 0, 0),
            datetime(2024, 12, 1, 23, 59),
            today=datetime(2024, 12, 10, 8, 30),
        )
        assert result == PaymentStatus.PAID_ON_TIME


# ── Unpaid ───────────────────────────────────────────────────────────────────

class TestUnpaid:
    def test_past_due_is_overdue(self):
        result = classify(1500, 0, date(2024, 12, 1), None, today=date(2024, 12, 10))
        assert result == PaymentStatus.OVERDUE

    def test_not_yet_due_is_pending(self):
        result = classify(1450, 0, date(2024, 12, 15), None, today=date(2024, 12, 1))
        assert result == PaymentStatus.PENDING

    def test_due_today_is_pending(self):
        result = classify(1450, 0, date(2024, 12, 1), None, today=date(2024, 12, 1))
        assert result == PaymentStatus.PENDING

    def test_paid_amount_without_date_is_not_paid(self):
        result = classify(1000, 1000, date(2024, 12, 1), None, today=date(2024, 12, 10))
        assert result == PaymentStatus.PENDING

    def test_zero_amount_due_never_overdue(self):
        result = classify(0, 0, date(2024, 12, 1), None, today=date(2024, 12, 10))
        assert result == PaymentStatus.PENDING


# ── Partial payments ─────────────────────────────────────────────────────────

class TestPartialPayment:
    def test_partial_after_due_date_is_overdue(self):
        result = classify(1000, 500, date(2024, 12, 1), date(2024, 12, 3), today=date(2024, 12, 10))
        assert result == PaymentStatus.OVERDUE

    def test_partial_paid_early_is_overdue_once_due_date_passes(self):
        result = classify(1000, 500, date(2024, 12, 1), date(2024, 11, 25), today=date(2024, 12, 10))
        assert result == PaymentStatus.OVERDUE

    def test_partial_before_due_date_is_pending(self):
        result = classify(1000, 500, date(2024, 12, 15), date(2024, 12, 3), today=date(2024, 12, 10))
        assert result == PaymentStatus.PENDING

    def test_one_cent_short_is_not_paid(self):
        result = classify(
            Decimal("1000.00"), Decimal("999.99"), date(2024, 12, 1), date(2024, 11, 30),
            today=date(2024, 12, 10),
        )
        assert result == PaymentStatus.OVERDUE


# ── Totality / determinism ───────────────────────────────────────────────────

class TestTotality:
    @pytest.mark.parametrize("amount_paid", [0, 500, 1000, 1500])
    @pytest.mark.parametrize("paid_date", [None, date(2024, 11, 20), date(2024, 12, 1), date(2024, 12, 20)])
    @pytest.mark.parametrize("today", [date(2024, 11, 1), date(2024, 12, 1), date(2025, 1, 1)])
    def test_always_one_status_and_deterministic(self, amount_paid, paid_date, today):
        first = classify(1000, amount_paid, date(2024, 12, 1), paid_date, today=today)
        second = classify(1000, amount_paid, date(2024, 12, 1), paid_date, today=today)
        assert first in set(PaymentStatus)
        assert first == second

    def test_defaults_to_clock(self, monkeypatch):
        from app.core import clock

        monkeypatch.setattr(clock, "today", lambda: date(2024, 12, 10))
        assert classify(1500, 0, date(2024, 12, 1), None) == PaymentStatus.OVERDUE


# ── Labels ───────────────────────────────────────────────────────────────────

class TestLabels:
    def test_status_labels(self):
        assert status_label(PaymentStatus.PAID_ON_TIME) == "Paid on Time"
        assert status_label("late_paid") == "Late Paid"
        assert status_label(PaymentStatus.OVERDUE) == "Overdue"
        assert status_label(PaymentStatus.PENDING) == "Pending"

    def test_occupancy_labels(self):
        assert occupancy_label("occupied") == "Occupied"
        assert occupancy_label("vacant") == "Vacant"
        assert occupancy_label("notice_given") == "Notice Given"

    def test_unknown_occupancy_echoed(self):
        assert occupancy_label("renovation") == "renovation"
