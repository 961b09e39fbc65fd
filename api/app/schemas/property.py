import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from app.models.property import OccupancyStatus
from app.services.payment_status import occupancy_label


def reject_explicit_nulls(model: BaseModel, fields: tuple[str, ...]) -> None:
    """PATCH bodies may omit a column but not null out a NOT NULL one."""
    for name in fields:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{name} cannot be null")


class PropertyCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    unit_number: str = Field(min_length=1, max_length=50)
    street_address: str = Field(min_length=1)
    monthly_rent: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    security_deposit: Decimal = Field(default=Decimal(0), ge=0, max_digits=14, decimal_places=2)
    occupancy_status: OccupancyStatus = Field(default=OccupancyStatus.VACANT, validate_default=True)


class PropertyUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    unit_number: str | None = Field(default=None, min_length=1, max_length=50)
    street_address: str | None = Field(default=None, min_length=1)
    monthly_rent: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    security_deposit: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    occupancy_status: OccupancyStatus | None = None

    @model_validator(mode="after")
    def _no_nulls(self):
        reject_explicit_nulls(
            self,
            ("unit_number", "street_address", "monthly_rent", "security_deposit", "occupancy_status"),
        )
        return self


class PropertyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    unit_number: str
    street_address: str
    monthly_rent: Decimal
    security_deposit: Decimal
    occupancy_status: OccupancyStatus
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def occupancy_label(self) -> str:
        return occupancy_label(self.occupancy_status)
