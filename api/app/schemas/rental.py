import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from app.models.rental import PaymentMethod, PaymentStatus
from app.schemas.property import PropertyResponse, reject_explicit_nulls
from app.services.payment_status import status_label

_Money = dict(ge=0, max_digits=14, decimal_places=2)


def check_lease_dates(start: date | None, end: date | None) -> None:
    if start is not None and end is not None and end < start:
        raise ValueError("lease_end_date cannot be before lease_start_date")


def check_paid_amount_has_date(amount_paid: Decimal | None, payment_date: date | None) -> None:
    """A recorded payment (amount_paid > 0) must carry its payment date."""
    if amount_paid and amount_paid > 0 and payment_date is None:
        raise ValueError("payment_date is required when amount_paid is greater than 0")


# ─── Tenant ────────────────────────────────────────────────────────────────

class TenantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    phone: str | None = None
    email: str | None = None
    property_id: uuid.UUID | None = None
    lease_start_date: date | None = None
    lease_end_date: date | None = None

    @model_validator(mode="after")
    def _lease_window(self):
        check_lease_dates(self.lease_start_date, self.lease_end_date)
        return self


class TenantUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = None
    email: str | None = None
    property_id: uuid.UUID | None = None
    lease_start_date: date | None = None
    lease_end_date: date | None = None

    @model_validator(mode="after")
    def _no_nulls(self):
        reject_explicit_nulls(self, ("name",))
        return self


class TenantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    phone: str | None
    email: str | None
    property_id: uuid.UUID | None
    lease_start_date: date | None
    lease_end_date: date | None
    created_at: datetime
    updated_at: datetime


class TenantWithPropertyResponse(TenantResponse):
    property: PropertyResponse


# ─── Payment ───────────────────────────────────────────────────────────────

class PaymentCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    tenant_id: uuid.UUID
    rent_due_date: date
    amount_due: Decimal = Field(**_Money)
    amount_paid: Decimal = Field(default=Decimal(0), **_Money)
    payment_date: date | None = None
    payment_method: PaymentMethod | None = None

    @model_validator(mode="after")
    def _paid_has_date(self):
        check_paid_amount_has_date(self.amount_paid, self.payment_date)
        return self


class PaymentUpdate(BaseModel):
    """Partial update. The paid-amount/date rule is checked against the merged row."""
    model_config = ConfigDict(use_enum_values=True)

    tenant_id: uuid.UUID | None = None
    rent_due_date: date | None = None
    amount_due: Decimal | None = Field(default=None, **_Money)
    amount_paid: Decimal | None = Field(default=None, **_Money)
    payment_date: date | None = None
    payment_method: PaymentMethod | None = None

    @model_validator(mode="after")
    def _no_nulls(self):
        reject_explicit_nulls(self, ("tenant_id", "rent_due_date", "amount_due", "amount_paid"))
        return self


class PaymentRecord(BaseModel):
    """Quick-entry form: every field required."""
    model_config = ConfigDict(use_enum_values=True)

    tenant_id: uuid.UUID
    payment_date: date
    amount_paid: Decimal = Field(gt=0, max_digits=14, decimal_places=2)
    payment_method: PaymentMethod


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    tenant_id: uuid.UUID
    rent_due_date: date
    amount_due: Decimal
    amount_paid: Decimal
    payment_date: date | None
    payment_method: PaymentMethod | None
    created_at: datetime
    updated_at: datetime


class PaymentWithStatusResponse(PaymentResponse):
    status: PaymentStatus
    as_of: date
    outstanding: Decimal
    tenant: TenantWithPropertyResponse

    @computed_field
    @property
    def status_label(self) -> str:
        return status_label(self.status)
