import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.property import Property
from app.schemas.property import PropertyCreate, PropertyResponse, PropertyUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["properties"])


async def _get_property(property_id: uuid.UUID, db: AsyncSession) -> Property:
    result = await db.execute(select(Property).where(Property.id == property_id))
    prop = result.scalar_one_or_none()
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return prop


@router.get("/", response_model=list[PropertyResponse])
async def list_properties(
    q: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    query = select(Property).order_by(Property.unit_number)
    if q:
        pattern = f"%{q}%"
        query = query.where(
            or_(Property.unit_number.ilike(pattern), Property.street_address.ilike(pattern))
        )
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await _get_property(property_id, db)


@router.post("/", response_model=PropertyResponse, status_code=201)
async def create_property(
    payload: PropertyCreate,
    db: AsyncSession = Depends(get_db),
):
    prop = Property(**payload.model_dump())
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    await db.commit()
    logger.info("Created property %s (unit %s)", prop.id, prop.unit_number)
    return prop


@router.patch("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: uuid.UUID,
    payload: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
):
    prop = await _get_property(property_id, db)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(prop, field, value)
    await db.flush()
    await db.refresh(prop)
    await db.commit()
    return prop


@router.delete("/{property_id}", status_code=204)
async def delete_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    prop = await _get_property(property_id, db)
    await db.delete(prop)
    await db.commit()
    logger.info("Deleted property %s", property_id)
