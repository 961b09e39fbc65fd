from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import today
from app.core.config import settings
from app.core.database import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(as_of: date = Depends(today)):
    # business_date is the "today" payment statuses are computed against
    return {
        "status": "ok",
        "environment": settings.environment,
        "business_date": as_of.isoformat(),
    }


@router.get("/health/db")
async def health_db(db: AsyncSession = Depends(get_db)):
    # Store failures surface as 503 through the SQLAlchemyError handler
    await db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "connected"}
