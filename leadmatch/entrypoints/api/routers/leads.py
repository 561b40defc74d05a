# leadmatch/entrypoints/api/routers/leads.py
from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import current_context, get_session, http_error
from ..presenters import lead_out
from ....models import LeadStatus
from ....schemas import LeadOut, LeadStatusUpdate
from ....service_layer.context import SessionContext
from ....service_layer.errors import ServiceError
from ....service_layer.leads import list_leads_for_buyer, list_leads_for_marketer, update_lead_status

router = APIRouter(prefix="/leads", tags=["leads"])


@router.get("", response_model=list[LeadOut])
async def leads_for_marketer(
    status: Literal["New", "Contacted", "Deal", "Lost"] | None = Query(default=None),
    ctx: SessionContext = Depends(current_context),
    session: AsyncSession = Depends(get_session),
) -> list[LeadOut]:
    try:
        rows = await list_leads_for_marketer(session, ctx, LeadStatus(status) if status else None)
    except ServiceError as e:
        raise http_error(e) from e
    return [lead_out(lead) for lead in rows]


@router.get("/mine", response_model=list[LeadOut])
async def leads_for_buyer(
    ctx: SessionContext = Depends(current_context),
    session: AsyncSession = Depends(get_session),
) -> list[LeadOut]:
    try:
        rows = await list_leads_for_buyer(session, ctx)
    except ServiceError as e:
        raise http_error(e) from e
    return [lead_out(lead) for lead in rows]


@router.patch("/{lead_id}/status", response_model=LeadOut)
async def leads_set_status(
    lead_id: int,
    body: LeadStatusUpdate,
    ctx: SessionContext = Depends(current_context),
    session: AsyncSession = Depends(get_session),
) -> LeadOut:
    try:
        lead = await update_lead_status(session, ctx, lead_id, LeadStatus(body.status), body.notes)
    except ServiceError as e:
        await session.rollback()
        raise http_error(e) from e
    await session.commit()
    return lead_out(lead)
