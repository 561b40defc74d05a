# tests/test_interest_and_leads.py
import json

import pytest
from sqlalchemy import func, select

from leadmatch.adapters.repos.properties import PropertyFilters
from leadmatch.domain.types import PropertyStatus
from leadmatch.integrations.services.outbox import LEAD_CREATED, LEAD_STATUS_CHANGED
from leadmatch.models import Lead, LeadStatus, OutboxEvent, UserType
from leadmatch.service_layer.context import SessionContext
from leadmatch.service_layer.errors import (
    ConflictError,
    NoMatchError,
    NotFoundError,
    PermissionDeniedError,
)
from leadmatch.service_layer.interest import BUYERS_ONLY, express_interest, preview_match
from leadmatch.service_layer.leads import (
    list_leads_for_buyer,
    list_leads_for_marketer,
    update_lead_status,
)
from leadmatch.service_layer.properties import create_property, list_properties, update_property_status
from leadmatch.service_layer.registration import register_marketer
from tests.forms import marketer_form, property_form


async def _count(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


async def test_interest_creates_lead_with_buyer_snapshot(session, buyer, buyer_ctx, listing):
    lead = await express_interest(session, buyer_ctx, listing.id)
    await session.commit()

    assert lead.status == LeadStatus.new
    assert lead.marketer_id == listing.marketer_id
    assert lead.buyer_score == 100
    assert lead.buyer_name == "Test Buyer"
    assert lead.buyer_phone == "01234567890"
    assert json.loads(lead.buyer_locations_json) == ["New Cairo"]

    events = (await session.execute(select(OutboxEvent))).scalars().all()
    assert [e.event_type for e in events] == [LEAD_CREATED]
    payload = json.loads(events[0].payload_json)
    assert payload["lead_id"] == lead.id
    assert payload["buyer_score_tier"] == "Hot"
    assert payload["status"] == "New"


async def test_snapshot_does_not_follow_later_profile_edits(session, buyer, buyer_ctx, listing):
    lead = await express_interest(session, buyer_ctx, listing.id)
    buyer.full_name = "Renamed Buyer"
    await session.commit()

    stored = await session.get(Lead, lead.id)
    assert stored.buyer_name == "Test Buyer"


async def test_second_interest_is_a_conflict(session, buyer_ctx, listing):
    await express_interest(session, buyer_ctx, listing.id)
    await session.commit()

    with pytest.raises(ConflictError):
        await express_interest(session, buyer_ctx, listing.id)
    assert await _count(session, Lead) == 1


async def test_no_match_writes_nothing(session, buyer_ctx, marketer_ctx):
    pricey = await create_property(session, marketer_ctx, property_form(price=3_000_000))
    await session.commit()

    with pytest.raises(NoMatchError) as ei:
        await express_interest(session, buyer_ctx, pricey.id)

    assert ei.value.reasons == (
        "Price 3,000,000 SAR is outside your budget range (1,640,000 - 2,360,000 SAR)",
    )
    assert str(ei.value).startswith("This property doesn't match your preferences: Price 3,000,000 SAR")
    assert await _count(session, Lead) == 0
    assert await _count(session, OutboxEvent) == 0


async def test_sold_out_property_is_rejected(session, buyer_ctx, marketer_ctx, listing):
    await update_property_status(session, marketer_ctx, listing.id, PropertyStatus.sold_out)
    await session.commit()

    with pytest.raises(NoMatchError) as ei:
        await express_interest(session, buyer_ctx, listing.id)
    assert ei.value.reasons == ("Property is currently Sold Out",)


async def test_marketers_cannot_express_interest(session, marketer_ctx, listing):
    with pytest.raises(PermissionDeniedError, match=BUYERS_ONLY):
        await express_interest(session, marketer_ctx, listing.id)


async def test_unknown_property(session, buyer_ctx):
    with pytest.raises(NotFoundError):
        await express_interest(session, buyer_ctx, 9999)


async def test_preview_match_is_read_only(session, buyer_ctx, listing):
    res = await preview_match(session, buyer_ctx, listing.id)
    assert res.matches is True
    assert await _count(session, Lead) == 0


async def test_only_owner_can_change_property_status(session, marketer_ctx, listing):
    other = await register_marketer(session, marketer_form(email="other@agency.com", phone="01088888888"))
    other_ctx = SessionContext(user_type=UserType.marketer, user_id=other.id)

    with pytest.raises(PermissionDeniedError):
        await update_property_status(session, other_ctx, listing.id, PropertyStatus.reserved)

    prop = await update_property_status(session, marketer_ctx, listing.id, PropertyStatus.reserved)
    assert prop.status == PropertyStatus.reserved


async def test_property_filters(session, marketer_ctx, listing):
    await create_property(session, marketer_ctx, property_form(title="Villa", type="Villa", location="Zamalek", price=9_000_000))
    await session.commit()

    assert [p.id for p in await list_properties(session, PropertyFilters(location="Rehab"))] == [listing.id]
    assert len(await list_properties(session)) == 2
    cheap = await list_properties(session, PropertyFilters(max_price=2_000_000))
    assert [p.location for p in cheap] == ["Rehab"]


async def test_lead_lists_are_scoped(session, buyer_ctx, marketer_ctx, listing):
    lead = await express_interest(session, buyer_ctx, listing.id)
    await session.commit()

    assert [x.id for x in await list_leads_for_marketer(session, marketer_ctx)] == [lead.id]
    assert [x.id for x in await list_leads_for_buyer(session, buyer_ctx)] == [lead.id]
    assert await list_leads_for_marketer(session, marketer_ctx, status=LeadStatus.deal) == []

    with pytest.raises(PermissionDeniedError):
        await list_leads_for_marketer(session, buyer_ctx)
    with pytest.raises(PermissionDeniedError):
        await list_leads_for_buyer(session, marketer_ctx)


async def test_update_lead_status_publishes_change(session, buyer_ctx, marketer_ctx, listing):
    lead = await express_interest(session, buyer_ctx, listing.id)
    await session.commit()

    updated = await update_lead_status(session, marketer_ctx, lead.id, LeadStatus.contacted, notes="called")
    await session.commit()
    assert updated.status == LeadStatus.contacted

    ev = (
        await session.execute(select(OutboxEvent).where(OutboxEvent.event_type == LEAD_STATUS_CHANGED))
    ).scalars().one()
    payload = json.loads(ev.payload_json)
    assert payload["previous_status"] == "New"
    assert payload["status"] == "Contacted"
    assert payload["notes"] == "called"


async def test_update_lead_status_ownership(session, buyer_ctx, marketer_ctx, listing):
    lead = await express_interest(session, buyer_ctx, listing.id)
    other = await register_marketer(session, marketer_form(email="other@agency.com", phone="01088888888"))
    await session.commit()

    other_ctx = SessionContext(user_type=UserType.marketer, user_id=other.id)
    with pytest.raises(PermissionDeniedError):
        await update_lead_status(session, other_ctx, lead.id, LeadStatus.lost)
    with pytest.raises(NotFoundError):
        await update_lead_status(session, marketer_ctx, 9999, LeadStatus.lost)
