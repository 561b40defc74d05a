from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ....models import Integration, IntegrationType
from ....schemas import IntegrationCreate, IntegrationOut
from ..deps import get_session, require_api_key

router = APIRouter(prefix="/integrations", tags=["integrations"], dependencies=[Depends(require_api_key)])


class IntegrationPatch(BaseModel):
    enabled: bool | None = None
    url: str | None = None
    secret: str | None = None


def _webhook_config(integ: Integration) -> dict[str, Any]:
    try:
        cfg = json.loads(integ.config_json or "{}")
    except ValueError:
        cfg = {}
    return cfg if isinstance(cfg, dict) else {}


def _present(integ: Integration) -> IntegrationOut:
    return IntegrationOut(
        id=integ.id,
        name=integ.name,
        type=integ.type.value,
        enabled=integ.enabled,
        created_at=integ.created_at,
    )


@router.get("", response_model=list[IntegrationOut])
async def list_integrations(session: AsyncSession = Depends(get_session)) -> list[IntegrationOut]:
    rows = (await session.execute(select(Integration).order_by(Integration.id))).scalars().all()
    return [_present(i) for i in rows]


@router.post("", response_model=IntegrationOut, status_code=201)
async def create_integration(
    body: IntegrationCreate,
    session: AsyncSession = Depends(get_session),
) -> IntegrationOut:
    """New lead sinks start disabled unless the body says otherwise."""
    integ = Integration(
        name=body.name,
        type=IntegrationType(body.type),
        enabled=body.enabled,
        config_json=json.dumps({"url": body.url, "secret": body.secret}),
    )
    session.add(integ)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise HTTPException(status_code=409, detail=f"Integration {body.name!r} already exists; PATCH it instead") from e
    return _present(integ)


@router.patch("/{integration_id}", response_model=IntegrationOut)
async def update_integration(
    integration_id: int,
    body: IntegrationPatch,
    session: AsyncSession = Depends(get_session),
) -> IntegrationOut:
    integ = await session.get(Integration, integration_id)
    if integ is None:
        raise HTTPException(status_code=404, detail=f"Integration {integration_id} not found")

    changes = body.model_dump(exclude_none=True)
    if "enabled" in changes:
        integ.enabled = changes.pop("enabled")
    if changes:
        integ.config_json = json.dumps({**_webhook_config(integ), **changes})

    await session.commit()
    return _present(integ)
