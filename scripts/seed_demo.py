from __future__ import annotations

import argparse
import asyncio
import json
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leadmatch.adapters.repos.accounts import AccountRepository
from leadmatch.adapters.repos.properties import PropertyRepository
from leadmatch.db import async_session, engine
from leadmatch.domain.policies import KNOWN_LOCATIONS
from leadmatch.domain.types import PropertyType
from leadmatch.logs import quiet_logging
from leadmatch.models import Base, Integration, IntegrationType, Property
from leadmatch.schemas import MarketerRegistration
from leadmatch.service_layer.registration import register_marketer

log = logging.getLogger("leadmatch.seed_demo")

DEMO_MARKETER = MarketerRegistration(
    full_name="Demo Marketer",
    email="marketer@example.com",
    phone="01000000001",
    password="demo-password",
    company_name="Demo Developments",
    role="Developer",
    office_location="New Cairo",
)

_TYPES = list(PropertyType)


async def _ensure_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _ensure_marketer(session: AsyncSession) -> int:
    existing = await AccountRepository(session).find_marketer(email=DEMO_MARKETER.email)
    if existing:
        return existing.id
    m = await register_marketer(session, DEMO_MARKETER)
    return m.id


async def _ensure_properties(session: AsyncSession, marketer_id: int) -> int:
    created = 0
    repo = PropertyRepository(session)
    for i, location in enumerate(KNOWN_LOCATIONS):
        ptype = _TYPES[i % len(_TYPES)]
        title = f"Demo {ptype.value} in {location}"
        exists = (await session.execute(select(Property.id).where(Property.title == title))).first()
        if exists:
            continue
        await repo.create(
            marketer_id=marketer_id,
            payload={
                "title": title,
                "type": ptype,
                "location": location,
                "price": 1_500_000 + 250_000 * i,
                "area": 120 + 10 * i,
                "bedrooms": 2 + i % 3,
                "bathrooms": 1 + i % 2,
                "payment_plan": "10% down, 90% over 7 years",
                "description": "Seeded demo listing",
            },
        )
        created += 1
    return created


async def _upsert_integration(session: AsyncSession, name: str, url: str, enabled: bool) -> None:
    existing = (await session.execute(select(Integration).where(Integration.name == name))).scalars().first()
    cfg = json.dumps({"url": url, "secret": None})
    if existing:
        existing.enabled = enabled
        existing.config_json = cfg
    else:
        session.add(Integration(name=name, type=IntegrationType.webhook, enabled=enabled, config_json=cfg))
    await session.flush()


async def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--enable-webhook", action="store_true", help="Enable the demo lead webhook (off by default)")
    parser.add_argument("--url", default="https://example.com/leadmatch-hook", help="Demo webhook URL")
    args = parser.parse_args()

    quiet_logging()
    await _ensure_schema()

    async with async_session() as session:
        marketer_id = await _ensure_marketer(session)
        created = await _ensure_properties(session, marketer_id)
        await _upsert_integration(session, "demo_lead_webhook", args.url, args.enable_webhook)
        await session.commit()

    log.info("seeded marketer=%s new_properties=%d webhook_enabled=%s", marketer_id, created, args.enable_webhook)


if __name__ == "__main__":
    asyncio.run(main())
