# leadmatch/service_layer/leads.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from ..adapters.repos.leads import LeadRepository
from ..integrations.services.outbox import LEAD_STATUS_CHANGED, enqueue_event
from ..models import Lead, LeadStatus
from .context import SessionContext
from .errors import NotFoundError, PermissionDeniedError


async def list_leads_for_marketer(
    session: AsyncSession,
    ctx: SessionContext,
    status: LeadStatus | None = None,
) -> list[Lead]:
    marketer_id = ctx.require_marketer("Only marketers can view leads")
    return await LeadRepository(session).list_for_marketer(marketer_id, status=status)


async def list_leads_for_buyer(session: AsyncSession, ctx: SessionContext) -> list[Lead]:
    buyer_id = ctx.require_buyer("Only buyers have interests")
    return await LeadRepository(session).list_for_buyer(buyer_id)


async def update_lead_status(
    session: AsyncSession,
    ctx: SessionContext,
    lead_id: int,
    status: LeadStatus,
    notes: str | None = None,
) -> Lead:
    """
    Marketer moves one of their leads through New -> Contacted -> Deal/Lost.
    Any transition is allowed; every change is published to integrations.
    """
    marketer_id = ctx.require_marketer("Only marketers can update leads")

    lead = await LeadRepository(session).get(lead_id)
    if lead is None:
        raise NotFoundError(f"Lead {lead_id} not found")
    if lead.marketer_id != marketer_id:
        raise PermissionDeniedError("You can only update your own leads")

    previous = lead.status
    lead.status = status
    lead.updated_at = datetime.utcnow()
    await session.flush()

    await enqueue_event(
        session,
        LEAD_STATUS_CHANGED,
        {
            "lead_id": lead.id,
            "property_id": lead.property_id,
            "marketer_id": lead.marketer_id,
            "previous_status": previous.value,
            "status": status.value,
            "occurred_at": lead.updated_at.isoformat(),
            "notes": notes,
        },
    )
    return lead
