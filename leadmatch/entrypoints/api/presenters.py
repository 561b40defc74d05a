# leadmatch/entrypoints/api/presenters.py
from __future__ import annotations

from datetime import datetime

from ...domain.types import MatchResult, ScoreResult
from ...models import Buyer, Lead, Marketer, Property
from ...schemas import BuyerOut, LeadOut, MarketerOut, MatchOut, PropertyOut, ScoreOut, SessionOut
from ...service_layer.context import SessionContext
from ...service_layer.profiles import load_json_list


def buyer_out(b: Buyer) -> BuyerOut:
    return BuyerOut(
        id=b.id,
        full_name=b.full_name,
        email=b.email,
        phone=b.phone,
        budget=b.budget,
        locations=load_json_list(b.locations_json),
        property_types=load_json_list(b.property_types_json),
        buying_intent=b.buying_intent,
        score=b.score,
        score_tier=b.score_tier,
        created_at=b.created_at,
    )


def marketer_out(m: Marketer) -> MarketerOut:
    return MarketerOut(
        id=m.id,
        full_name=m.full_name,
        company_name=m.company_name,
        email=m.email,
        phone=m.phone,
        role=m.role.value,
        office_location=m.office_location,
        created_at=m.created_at,
    )


def session_out(token: str, ctx: SessionContext, expires_at: datetime) -> SessionOut:
    return SessionOut(token=token, user_type=ctx.user_type.value, user_id=ctx.user_id, expires_at=expires_at)


def score_out(r: ScoreResult) -> ScoreOut:
    return ScoreOut(score=r.score, tier=r.tier, explain=r.explain)


def match_out(r: MatchResult) -> MatchOut:
    return MatchOut(matches=r.matches, reasons=list(r.reasons))


def property_out(p: Property) -> PropertyOut:
    return PropertyOut(
        id=p.id,
        marketer_id=p.marketer_id,
        title=p.title,
        type=p.type,
        location=p.location,
        project_name=p.project_name,
        price=p.price,
        area=p.area,
        bedrooms=p.bedrooms,
        bathrooms=p.bathrooms,
        delivery_date=p.delivery_date,
        payment_plan=p.payment_plan,
        images=load_json_list(p.images_json),
        description=p.description,
        status=p.status,
        created_at=p.created_at,
        updated_at=p.updated_at,
    )


def lead_out(lead: Lead) -> LeadOut:
    return LeadOut(
        id=lead.id,
        buyer_id=lead.buyer_id,
        marketer_id=lead.marketer_id,
        property_id=lead.property_id,
        buyer_score=lead.buyer_score,
        buyer_score_tier=lead.buyer_score_tier,
        buyer_name=lead.buyer_name,
        buyer_phone=lead.buyer_phone,
        buyer_email=lead.buyer_email,
        buyer_budget=lead.buyer_budget,
        buyer_locations=load_json_list(lead.buyer_locations_json),
        buyer_property_types=load_json_list(lead.buyer_property_types_json),
        status=lead.status.value,
        created_at=lead.created_at,
        updated_at=lead.updated_at,
    )
