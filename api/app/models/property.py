import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Numeric, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class OccupancyStatus(str, enum.Enum):
    OCCUPIED = "occupied"
    VACANT = "vacant"
    NOTICE_GIVEN = "notice_given"


class Property(Base):
    """A rentable unit: one row per unit number."""
    __tablename__ = "properties"
    __table_args__ = (
        CheckConstraint(
            "occupancy_status IN ('occupied', 'vacant', 'notice_given')",
            name="ck_properties_occupancy_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    unit_number: Mapped[str] = mapped_column(String(50), index=True)
    street_address: Mapped[str] = mapped_column(Text)
    monthly_rent: Mapped[Decimal] = mapped_column(Numeric(14, 2))
    security_deposit: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal(0))
    occupancy_status: Mapped[str] = mapped_column(
        String(20), default=OccupancyStatus.VACANT.value
    )  # occupied | vacant | notice_given
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("now()"), onupdate=text("now()")
    )
