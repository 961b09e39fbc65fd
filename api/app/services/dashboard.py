"""
Dashboard aggregation — a pure fold over the property and payment collections.

    occupied_units            – properties with occupancy_status == "occupied"
    total_units               – all properties
    vacancy_rate              – (total − occupied) / total × 100, 0 for an empty portfolio
    total_collected_this_month – amount_paid of payments dated in today's month/year
    expected_monthly_rent     – monthly_rent summed over occupied properties only
    collection_rate           – collected / expected × 100, 0 when nothing is expected
    overdue / pending         – payments by derived status
    total_overdue_amount      – amount_due − amount_paid summed over overdue payments
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Sequence

from app.models.property import OccupancyStatus
from app.models.rental import PaymentStatus


@dataclass
class DashboardStats:
    as_of: date
    occupied_units: int
    total_units: int
    vacancy_rate: float
    total_collected_this_month: Decimal
    expected_monthly_rent: Decimal
    collection_rate: float
    overdue_payments: list = field(default_factory=list)
    pending_payments: list = field(default_factory=list)
    total_overdue_amount: Decimal = Decimal(0)


def _dec(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _is_occupied(prop: Any) -> bool:
    return prop.occupancy_status == OccupancyStatus.OCCUPIED.value


def _same_month(d: date | None, ref: date) -> bool:
    return d is not None and d.year == ref.year and d.month == ref.month


def compute_dashboard_stats(
    properties: Sequence[Any],
    payments: Iterable[Any],
    today: date,
) -> DashboardStats:
    """
    ``properties`` need ``occupancy_status`` and ``monthly_rent``; ``payments``
    need ``amount_due``, ``amount_paid``, ``payment_date`` and a derived
    ``status`` (see app.services.rent_roll.PaymentWithStatus).
    """
    payments = list(payments)

    total_units = len(properties)
    occupied = [p for p in properties if _is_occupied(p)]
    occupied_units = len(occupied)

    vacancy_rate = (
        (total_units - occupied_units) / total_units * 100 if total_units > 0 else 0.0
    )

    collected = sum(
        (_dec(p.amount_paid) for p in payments if _same_month(p.payment_date, today)),
        Decimal(0),
    )
    expected = sum((_dec(p.monthly_rent) for p in occupied), Decimal(0))
    collection_rate = float(collected / expected * 100) if expected > 0 else 0.0

    overdue = [p for p in payments if p.status == PaymentStatus.OVERDUE]
    pending = [p for p in payments if p.status == PaymentStatus.PENDING]
    total_overdue = sum(
        (_dec(p.amount_due) - _dec(p.amount_paid) for p in overdue), Decimal(0)
    )

    return DashboardStats(
        as_of=today,
        occupied_units=occupied_units,
        total_units=total_units,
        vacancy_rate=vacancy_rate,
        total_collected_this_month=collected,
        expected_monthly_rent=expected,
        collection_rate=collection_rate,
        overdue_payments=overdue,
        pending_payments=pending,
        total_overdue_amount=total_overdue,
    )
