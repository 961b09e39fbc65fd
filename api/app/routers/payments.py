import logging
import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import today
from app.core.database import get_db
from app.models.rental import Payment, PaymentStatus, Tenant
from app.schemas.rental import (
    PaymentCreate,
    PaymentRecord,
    PaymentResponse,
    PaymentUpdate,
    PaymentWithStatusResponse,
    check_paid_amount_has_date,
)
from app.services import rent_roll

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


async def _get_payment(payment_id: uuid.UUID, db: AsyncSession) -> Payment:
    result = await db.execute(select(Payment).where(Payment.id == payment_id))
    payment = result.scalar_one_or_none()
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


async def _check_tenant(tenant_id: uuid.UUID, db: AsyncSession) -> None:
    result = await db.execute(select(Tenant.id).where(Tenant.id == tenant_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Tenant not found")


@router.get("/", response_model=list[PaymentResponse])
async def list_payments(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Payment).order_by(Payment.rent_due_date.desc()))
    return result.scalars().all()


@router.get("/with-status", response_model=list[PaymentWithStatusResponse])
async def list_payments_with_status(
    q: str | None = None,
    status: PaymentStatus | None = None,
    as_of: date = Depends(today),
    db: AsyncSession = Depends(get_db),
):
    """Rent roll: payments with tenant, unit and derived status. ``q`` matches tenant name."""
    payments = await rent_roll.load_payments_with_status(db, as_of, tenant_name=q)
    if status is not None:
        payments = [p for p in payments if p.status == status]
    # asdict() on the dataclass views would drop their pass-through attributes
    return [PaymentWithStatusResponse.model_validate(p) for p in payments]


@router.post("/record", response_model=PaymentWithStatusResponse)
async def record_payment(
    payload: PaymentRecord,
    as_of: date = Depends(today),
    db: AsyncSession = Depends(get_db),
):
    """Apply a received payment to the tenant's open period, or open a new one due today."""
    payment = await rent_roll.record_payment(
        db,
        tenant_id=payload.tenant_id,
        payment_date=payload.payment_date,
        amount_paid=payload.amount_paid,
        payment_method=payload.payment_method,
        today=as_of,
    )
    await db.commit()
    view = await rent_roll.load_payment_with_status(db, payment.id, as_of)
    return PaymentWithStatusResponse.model_validate(view)


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await _get_payment(payment_id, db)


@router.post("/", response_model=PaymentResponse, status_code=201)
async def create_payment(
    payload: PaymentCreate,
    db: AsyncSession = Depends(get_db),
):
    await _check_tenant(payload.tenant_id, db)
    payment = Payment(**payload.model_dump())
    db.add(payment)
    await db.flush()
    await db.refresh(payment)
    await db.commit()
    logger.info("Created payment %s for tenant %s due %s", payment.id, payment.tenant_id, payment.rent_due_date)
    return payment


@router.patch("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: uuid.UUID,
    payload: PaymentUpdate,
    db: AsyncSession = Depends(get_db),
):
    payment = await _get_payment(payment_id, db)
    changes = payload.model_dump(exclude_unset=True)
    if "tenant_id" in changes:
        await _check_tenant(changes["tenant_id"], db)
    try:
        check_paid_amount_has_date(
            changes.get("amount_paid", payment.amount_paid),
            changes.get("payment_date", payment.payment_date),
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    for field, value in changes.items():
        setattr(payment, field, value)
    await db.flush()
    await db.refresh(payment)
    await db.commit()
    return payment


@router.delete("/{payment_id}", status_code=204)
async def delete_payment(
    payment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    payment = await _get_payment(payment_id, db)
    await db.delete(payment)
    await db.commit()
