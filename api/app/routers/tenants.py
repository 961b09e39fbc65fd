import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.property import Property
from app.models.rental import Tenant
from app.schemas.rental import (
    TenantCreate,
    TenantResponse,
    TenantUpdate,
    TenantWithPropertyResponse,
    check_lease_dates,
)
from app.services.rent_roll import load_tenants_with_property

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["tenants"])


async def _get_tenant(tenant_id: uuid.UUID, db: AsyncSession) -> Tenant:
    result = await db.execute(select(Tenant).where(Tenant.id == tenant_id))
    tenant = result.scalar_one_or_none()
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return tenant


async def _check_property(property_id: uuid.UUID | None, db: AsyncSession) -> None:
    if property_id is None:
        return
    result = await db.execute(select(Property.id).where(Property.id == property_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Property not found")


@router.get("/", response_model=list[TenantResponse])
async def list_tenants(
    q: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    query = select(Tenant).order_by(Tenant.name)
    if q:
        pattern = f"%{q}%"
        query = query.where(or_(Tenant.name.ilike(pattern), Tenant.email.ilike(pattern)))
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/with-property", response_model=list[TenantWithPropertyResponse])
async def list_tenants_with_property(db: AsyncSession = Depends(get_db)):
    return await load_tenants_with_property(db)


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await _get_tenant(tenant_id, db)


@router.post("/", response_model=TenantResponse, status_code=201)
async def create_tenant(
    payload: TenantCreate,
    db: AsyncSession = Depends(get_db),
):
    await _check_property(payload.property_id, db)
    tenant = Tenant(**payload.model_dump())
    db.add(tenant)
    await db.flush()
    await db.refresh(tenant)
    await db.commit()
    logger.info("Created tenant %s", tenant.id)
    return tenant


@router.patch("/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: uuid.UUID,
    payload: TenantUpdate,
    db: AsyncSession = Depends(get_db),
):
    tenant = await _get_tenant(tenant_id, db)
    changes = payload.model_dump(exclude_unset=True)
    if "property_id" in changes:
        await _check_property(changes["property_id"], db)
    try:
        check_lease_dates(
            changes.get("lease_start_date", tenant.lease_start_date),
            changes.get("lease_end_date", tenant.lease_end_date),
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    for field, value in changes.items():
        setattr(tenant, field, value)
    await db.flush()
    await db.refresh(tenant)
    await db.commit()
    return tenant


@router.delete("/{tenant_id}", status_code=204)
async def delete_tenant(
    tenant_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    tenant = await _get_tenant(tenant_id, db)
    await db.delete(tenant)
    await db.commit()
    logger.info("Deleted tenant %s and its payments", tenant_id)
