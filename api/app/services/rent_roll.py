"""
Rent roll reads and the quick "record payment" flow.

Joined payment reads attach the derived status to each row; the dashboard and
the payments list both go through ``load_payments_with_status`` so the two
views never disagree.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from app.models.property import Property
from app.models.rental import Payment, PaymentStatus, Tenant
from app.services.payment_status import classify

logger = logging.getLogger(__name__)

_OPEN_STATUSES = frozenset({PaymentStatus.PENDING, PaymentStatus.OVERDUE})


@dataclass(frozen=True)
class PaymentWithStatus:
    """A Payment (tenant and property loaded) plus its status as of ``as_of``."""
    payment: Payment
    status: PaymentStatus
    as_of: date

    # Attribute pass-through so response models can read this with from_attributes
    @property
    def id(self) -> uuid.UUID:
        return self.payment.id

    @property
    def tenant_id(self) -> uuid.UUID:
        return self.payment.tenant_id

    @property
    def rent_due_date(self) -> date:
        return self.payment.rent_due_date

    @property
    def amount_due(self) -> Decimal:
        return self.payment.amount_due

    @property
    def amount_paid(self) -> Decimal:
        return self.payment.amount_paid

    @property
    def payment_date(self) -> date | None:
        return self.payment.payment_date

    @property
    def payment_method(self) -> str | None:
        return self.payment.payment_method

    @property
    def created_at(self):
        return self.payment.created_at

    @property
    def updated_at(self):
        return self.payment.updated_at

    @property
    def tenant(self) -> Tenant:
        return self.payment.tenant

    @property
    def outstanding(self) -> Decimal:
        return self.payment.amount_due - self.payment.amount_paid


def with_status(payments: Iterable[Payment], today: date) -> list[PaymentWithStatus]:
    """Classify each payment against ``today``; order is preserved."""
    return [
        PaymentWithStatus(
            payment=p,
            status=classify(p.amount_due, p.amount_paid, p.rent_due_date, p.payment_date, today),
            as_of=today,
        )
        for p in payments
    ]


def find_open_payment(
    payments: Iterable[PaymentWithStatus],
    tenant_id: uuid.UUID,
) -> PaymentWithStatus | None:
    """First pending or overdue payment for the tenant, in the order given."""
    for p in payments:
        if p.tenant_id == tenant_id and p.status in _OPEN_STATUSES:
            return p
    return None


# ─── Store reads ──────────────────────────────────────────────────────────────

async def load_properties(db: AsyncSession) -> list[Property]:
    result = await db.execute(select(Property).order_by(Property.unit_number))
    return list(result.scalars().all())


async def load_tenants_with_property(db: AsyncSession) -> list[Tenant]:
    """Tenants joined with their property; tenants without one are omitted."""
    result = await db.execute(
        select(Tenant)
        .join(Tenant.property)
        .options(contains_eager(Tenant.property))
        .order_by(Tenant.name)
    )
    return list(result.scalars().all())


async def load_payments_with_status(
    db: AsyncSession,
    today: date,
    tenant_name: str | None = None,
    tenant_id: uuid.UUID | None = None,
) -> list[PaymentWithStatus]:
    """
    Payments joined with tenant and the tenant's property, newest due date first.
    Payments whose tenant has no property are omitted.
    """
    query = (
        select(Payment)
        .join(Payment.tenant)
        .join(Tenant.property)
        .options(contains_eager(Payment.tenant).contains_eager(Tenant.property))
        .order_by(Payment.rent_due_date.desc())
    )
    if tenant_name:
        query = query.where(Tenant.name.ilike(f"%{tenant_name}%"))
    if tenant_id is not None:
        query = query.where(Payment.tenant_id == tenant_id)
    result = await db.execute(query)
    return with_status(result.scalars().all(), today)


async def load_payment_with_status(
    db: AsyncSession,
    payment_id: uuid.UUID,
    today: date,
) -> PaymentWithStatus | None:
    result = await db.execute(
        select(Payment)
        .join(Payment.tenant)
        .join(Tenant.property)
        .options(contains_eager(Payment.tenant).contains_eager(Tenant.property))
        .where(Payment.id == payment_id)
        .execution_options(populate_existing=True)
    )
    payment = result.scalar_one_or_none()
    if payment is None:
        return None
    return with_status([payment], today)[0]


# ─── Record payment ───────────────────────────────────────────────────────────

async def record_payment(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    payment_date: date,
    amount_paid: Decimal,
    payment_method: str,
    today: date,
) -> Payment:
    """
    Apply a received payment to the tenant's open (pending/overdue) period,
    or open a new period due today for the property's monthly rent.
    Flushes only; the caller commits.
    """
    result = await db.execute(
        select(Tenant)
        .join(Tenant.property)
        .options(contains_eager(Tenant.property))
        .where(Tenant.id == tenant_id)
    )
    tenant = result.scalar_one_or_none()
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant with a property not found")

    existing = find_open_payment(
        await load_payments_with_status(db, today, tenant_id=tenant_id), tenant_id
    )
    if existing:
        payment = existing.payment
        payment.amount_paid = amount_paid
        payment.payment_date = payment_date
        payment.payment_method = payment_method
        logger.info("Recorded %s against open payment %s for tenant %s", amount_paid, payment.id, tenant_id)
    else:
        payment = Payment(
            tenant_id=tenant_id,
            rent_due_date=today,
            amount_due=tenant.property.monthly_rent,
            amount_paid=amount_paid,
            payment_date=payment_date,
            payment_method=payment_method,
        )
        db.add(payment)
        logger.info("No open payment for tenant %s; created one due %s", tenant_id, today)

    await db.flush()
    await db.refresh(payment)
    return payment
