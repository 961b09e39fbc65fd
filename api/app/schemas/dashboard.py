from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from app.schemas.rental import PaymentWithStatusResponse


class DashboardStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    as_of: date
    occupied_units: int
    total_units: int
    vacancy_rate: float
    total_collected_this_month: Decimal
    expected_monthly_rent: Decimal
    collection_rate: float
    overdue_payments: list[PaymentWithStatusResponse]
    pending_payments: list[PaymentWithStatusResponse]
    total_overdue_amount: Decimal
