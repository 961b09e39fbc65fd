"""
Dashboard router.
Endpoints:
  GET /dashboard/stats  – occupancy, this month's collections, overdue and pending rent
"""
import logging
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import today
from app.core.database import get_db
from app.schemas.dashboard import DashboardStatsResponse
from app.services.dashboard import compute_dashboard_stats
from app.services.rent_roll import load_payments_with_status, load_properties

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsResponse)
async def dashboard_stats(
    as_of: date = Depends(today),
    db: AsyncSession = Depends(get_db),
):
    properties = await load_properties(db)
    payments = await load_payments_with_status(db, as_of)
    stats = compute_dashboard_stats(properties, payments, as_of)
    logger.debug(
        "Dashboard as of %s: %d/%d occupied, %d overdue",
        as_of, stats.occupied_units, stats.total_units, len(stats.overdue_payments),
    )
    return DashboardStatsResponse.model_validate(stats)
