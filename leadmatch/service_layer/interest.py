# leadmatch/service_layer/interest.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..adapters.repos.accounts import AccountRepository
from ..adapters.repos.leads import LeadRepository
from ..domain.matching import evaluate_match
from ..domain.types import MatchResult
from ..integrations.services.outbox import LEAD_CREATED, enqueue_event
from ..models import Buyer, Lead, Property
from .context import SessionContext
from .errors import ConflictError, NotFoundError, NoMatchError
from .profiles import buyer_profile, load_json_list, property_listing
from .properties import get_property

log = logging.getLogger(__name__)

BUYERS_ONLY = "Only buyers can express interest in properties"
ALREADY_INTERESTED = "You have already expressed interest in this property"


async def _load_pair(session: AsyncSession, ctx: SessionContext, property_id: int) -> tuple[Buyer, Property]:
    buyer_id = ctx.require_buyer(BUYERS_ONLY)
    buyer = await AccountRepository(session).get_buyer(buyer_id)
    if buyer is None:
        raise NotFoundError(f"Buyer {buyer_id} not found")
    prop = await get_property(session, property_id)
    return buyer, prop


async def preview_match(session: AsyncSession, ctx: SessionContext, property_id: int) -> MatchResult:
    """Same decision express_interest would make, without writing anything."""
    buyer, prop = await _load_pair(session, ctx, property_id)
    return evaluate_match(buyer_profile(buyer), property_listing(prop))


async def express_interest(session: AsyncSession, ctx: SessionContext, property_id: int) -> Lead:
    """
    Buyer clicks "I'm interested".

    A lead is created only when the pair passes the match; otherwise NoMatchError
    carries every unmet criterion and nothing is written. Caller commits.
    """
    buyer, prop = await _load_pair(session, ctx, property_id)

    leads = LeadRepository(session)
    if await leads.find(buyer_id=buyer.id, property_id=prop.id) is not None:
        raise ConflictError(ALREADY_INTERESTED)

    result = evaluate_match(buyer_profile(buyer), property_listing(prop))
    if not result.matches:
        log.info("interest rejected buyer=%s property=%s reasons=%s", buyer.id, prop.id, result.summary())
        raise NoMatchError(result.reasons)

    try:
        lead = await leads.create_from_snapshot(buyer=buyer, prop=prop)
    except IntegrityError as e:
        raise ConflictError(ALREADY_INTERESTED) from e

    await enqueue_event(
        session,
        LEAD_CREATED,
        {
            "lead_id": lead.id,
            "property_id": prop.id,
            "marketer_id": prop.marketer_id,
            "buyer_id": buyer.id,
            "buyer_name": lead.buyer_name,
            "buyer_phone": lead.buyer_phone,
            "buyer_email": lead.buyer_email,
            "buyer_budget": lead.buyer_budget,
            "buyer_score": lead.buyer_score,
            "buyer_score_tier": lead.buyer_score_tier.value,
            "buyer_locations": load_json_list(lead.buyer_locations_json),
            "buyer_property_types": load_json_list(lead.buyer_property_types_json),
            "status": lead.status.value,
            "created_at": lead.created_at.isoformat(),
        },
    )

    log.info(
        "lead %s created buyer=%s property=%s marketer=%s tier=%s",
        lead.id, buyer.id, prop.id, prop.marketer_id, lead.buyer_score_tier.value,
    )
    return lead
