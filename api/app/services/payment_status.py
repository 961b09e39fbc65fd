"""
Payment status classifier — pure functions, no DB, fully unit-testable.

A payment's status is derived from four fields and the current date:

    full amount paid, paid on/before the due date  → paid_on_time
    full amount paid, paid after the due date      → late_paid
    short of the amount due, past the due date     → overdue
    anything else                                  → pending

A partial payment never counts as paid, whatever its payment date.
Status is never stored: callers recompute it on every read.
"""
from datetime import date
from decimal import Decimal
from typing import Any

from app.core import clock
from app.models.property import OccupancyStatus
from app.models.rental import PaymentStatus

STATUS_LABELS: dict[PaymentStatus, str] = {
    PaymentStatus.PAID_ON_TIME: "Paid on Time",
    PaymentStatus.LATE_PAID: "Late Paid",
    PaymentStatus.OVERDUE: "Overdue",
    PaymentStatus.PENDING: "Pending",
}

OCCUPANCY_LABELS: dict[str, str] = {
    OccupancyStatus.OCCUPIED.value: "Occupied",
    OccupancyStatus.VACANT.value: "Vacant",
    OccupancyStatus.NOTICE_GIVEN.value: "Notice Given",
}


def _to_date(dt: Any) -> date:
    # datetime is a date subclass; truncate time-of-day
    if hasattr(dt, "date"):
        return dt.date()
    return dt


def classify(
    amount_due: Decimal | float | int,
    amount_paid: Decimal | float | int,
    due_date: date,
    paid_date: date | None,
    today: date | None = None,
) -> PaymentStatus:
    """
    Classify one payment. ``today`` defaults to the business-timezone date;
    pass it explicitly wherever the result must be reproducible.
    """
    if today is None:
        today = clock.today()
    today = _to_date(today)
    due = _to_date(due_date)

    if paid_date is not None and amount_paid >= amount_due:
        if _to_date(paid_date) <= due:
            return PaymentStatus.PAID_ON_TIME
        return PaymentStatus.LATE_PAID

    if today > due and amount_paid < amount_due:
        return PaymentStatus.OVERDUE

    return PaymentStatus.PENDING


def status_label(status: PaymentStatus | str) -> str:
    return STATUS_LABELS[PaymentStatus(status)]


def occupancy_label(status: str) -> str:
    """Human label for an occupancy value; unknown values are echoed back."""
    if isinstance(status, OccupancyStatus):
        status = status.value
    return OCCUPANCY_LABELS.get(status, status)
