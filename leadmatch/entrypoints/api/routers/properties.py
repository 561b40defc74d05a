# leadmatch/entrypoints/api/routers/properties.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import current_context, get_session, http_error
from ..presenters import lead_out, match_out, property_out
from ....adapters.repos.properties import PropertyFilters
from ....domain.types import PropertyStatus, PropertyType
from ....schemas import LeadOut, MatchOut, PropertyCreate, PropertyOut, PropertyStatusUpdate
from ....service_layer.context import SessionContext
from ....service_layer.errors import ServiceError
from ....service_layer.interest import express_interest, preview_match
from ....service_layer.properties import (
    create_property,
    get_property,
    list_properties,
    update_property_status,
)

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=list[PropertyOut])
async def properties_list(
    min_price: float | None = Query(default=None, ge=0),
    max_price: float | None = Query(default=None, ge=0),
    location: str | None = Query(default=None),
    min_bedrooms: int | None = Query(default=None, ge=0),
    property_type: PropertyType | None = Query(default=None),
    min_area: float | None = Query(default=None, ge=0),
    marketer_id: int | None = Query(default=None),
    status: PropertyStatus | None = Query(default=None),
    limit: int = Query(50, ge=1, le=200),
    session: AsyncSession = Depends(get_session),
) -> list[PropertyOut]:
    filters = PropertyFilters(
        min_price=min_price,
        max_price=max_price,
        location=location,
        min_bedrooms=min_bedrooms,
        property_type=property_type,
        min_area=min_area,
        marketer_id=marketer_id,
        status=status,
        limit=limit,
    )
    rows = await list_properties(session, filters)
    return [property_out(p) for p in rows]


@router.get("/{property_id}", response_model=PropertyOut)
async def properties_get(
    property_id: int,
    session: AsyncSession = Depends(get_session),
) -> PropertyOut:
    try:
        prop = await get_property(session, property_id)
    except ServiceError as e:
        raise http_error(e) from e
    return property_out(prop)


@router.post("", response_model=PropertyOut, status_code=201)
async def properties_create(
    body: PropertyCreate,
    ctx: SessionContext = Depends(current_context),
    session: AsyncSession = Depends(get_session),
) -> PropertyOut:
    try:
        prop = await create_property(session, ctx, body)
    except ServiceError as e:
        raise http_error(e) from e
    await session.commit()
    return property_out(prop)


@router.patch("/{property_id}/status", response_model=PropertyOut)
async def properties_set_status(
    property_id: int,
    body: PropertyStatusUpdate,
    ctx: SessionContext = Depends(current_context),
    session: AsyncSession = Depends(get_session),
) -> PropertyOut:
    try:
        prop = await update_property_status(session, ctx, property_id, body.status)
    except ServiceError as e:
        raise http_error(e) from e
    await session.commit()
    return property_out(prop)


@router.get("/{property_id}/match", response_model=MatchOut)
async def properties_match_preview(
    property_id: int,
    ctx: SessionContext = Depends(current_context),
    session: AsyncSession = Depends(get_session),
) -> MatchOut:
    try:
        result = await preview_match(session, ctx, property_id)
    except ServiceError as e:
        raise http_error(e) from e
    return match_out(result)


@router.post("/{property_id}/interest", response_model=LeadOut, status_code=201)
async def properties_interest(
    property_id: int,
    ctx: SessionContext = Depends(current_context),
    session: AsyncSession = Depends(get_session),
) -> LeadOut:
    try:
        lead = await express_interest(session, ctx, property_id)
    except ServiceError as e:
        await session.rollback()
        raise http_error(e) from e
    await session.commit()
    return lead_out(lead)
