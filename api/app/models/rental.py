import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Numeric, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.property import Property


class PaymentMethod(str, enum.Enum):
    BANK_TRANSFER = "bank_transfer"
    MOBILE_MONEY = "mobile_money"
    CASH = "cash"


class PaymentStatus(str, enum.Enum):
    """Derived from amounts and dates on read — never stored."""
    PAID_ON_TIME = "paid_on_time"
    LATE_PAID = "late_paid"
    OVERDUE = "overdue"
    PENDING = "pending"


class Tenant(Base):
    """Tenant directory — contact info plus the unit they lease."""
    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), index=True)
    phone: Mapped[str | None] = mapped_column(String(50))
    email: Mapped[str | None] = mapped_column(String(320))
    property_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("properties.id", ondelete="SET NULL"), index=True
    )
    lease_start_date: Mapped[date | None] = mapped_column(Date)
    lease_end_date: Mapped[date | None] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("now()"), onupdate=text("now()")
    )

    property: Mapped[Property | None] = relationship(lazy="raise")


class Payment(Base):
    """One rent period for a tenant: what was due and what came in."""
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint(
            "payment_method IS NULL OR payment_method IN ('bank_transfer', 'mobile_money', 'cash')",
            name="ck_payments_payment_method",
        ),
        CheckConstraint("amount_paid = 0 OR payment_date IS NOT NULL", name="ck_payments_paid_has_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("tenants.id", ondelete="CASCADE"), index=True
    )
    rent_due_date: Mapped[date] = mapped_column(Date, index=True)
    amount_due: Mapped[Decimal] = mapped_column(Numeric(14, 2))
    amount_paid: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal(0))
    payment_date: Mapped[date | None] = mapped_column(Date)
    payment_method: Mapped[str | None] = mapped_column(
        String(50)
    )  # bank_transfer | mobile_money | cash
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("now()"), onupdate=text("now()")
    )

    tenant: Mapped[Tenant] = relationship(lazy="raise")
