# leadmatch/adapters/repos/leads.py
from __future__ import annotations

import json
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...models import Buyer, Lead, LeadStatus, Property


class LeadRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, lead_id: int) -> Lead | None:
        return await self.session.get(Lead, lead_id)

    async def find(self, *, buyer_id: int, property_id: int) -> Lead | None:
        q = select(Lead).where(
            Lead.buyer_id == buyer_id,
            Lead.property_id == property_id,
        )
        return (await self.session.execute(q)).scalars().first()

    async def create_from_snapshot(self, *, buyer: Buyer, prop: Property) -> Lead:
        """
        Insert a lead carrying a copy of the buyer as they are *now*.
        Later profile edits do not rewrite existing leads.
        """
        now = datetime.utcnow()
        lead = Lead(
            buyer_id=buyer.id,
            marketer_id=prop.marketer_id,
            property_id=prop.id,
            buyer_score=buyer.score,
            buyer_score_tier=buyer.score_tier,
            buyer_name=buyer.full_name,
            buyer_phone=buyer.phone,
            buyer_email=buyer.email,
            buyer_budget=buyer.budget,
            buyer_locations_json=buyer.locations_json or json.dumps([]),
            buyer_property_types_json=buyer.property_types_json or json.dumps([]),
            status=LeadStatus.new,
            created_at=now,
            updated_at=now,
        )
        self.session.add(lead)
        await self.session.flush()
        return lead

    async def list_for_marketer(self, marketer_id: int, *, status: LeadStatus | None = None) -> list[Lead]:
        q = select(Lead).where(Lead.marketer_id == marketer_id)
        if status is not None:
            q = q.where(Lead.status == status)
        q = q.order_by(Lead.created_at.desc(), Lead.id.desc())
        return list((await self.session.execute(q)).scalars().all())

    async def list_for_buyer(self, buyer_id: int) -> list[Lead]:
        q = select(Lead).where(Lead.buyer_id == buyer_id).order_by(Lead.created_at.desc(), Lead.id.desc())
        return list((await self.session.execute(q)).scalars().all())
