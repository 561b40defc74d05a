# leadmatch/service_layer/properties.py
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from ..adapters.repos.properties import PropertyFilters, PropertyRepository
from ..domain.types import PropertyStatus
from ..models import Property
from ..schemas import PropertyCreate
from .context import SessionContext
from .errors import NotFoundError, PermissionDeniedError

log = logging.getLogger(__name__)


async def get_property(session: AsyncSession, property_id: int) -> Property:
    prop = await PropertyRepository(session).get(property_id)
    if prop is None:
        raise NotFoundError(f"Property {property_id} not found")
    return prop


async def create_property(session: AsyncSession, ctx: SessionContext, data: PropertyCreate) -> Property:
    marketer_id = ctx.require_marketer("Only marketers can list properties")
    prop = await PropertyRepository(session).create(marketer_id=marketer_id, payload=data.model_dump())
    log.info("property %s listed by marketer %s (%s, %s)", prop.id, marketer_id, prop.location, prop.type.value)
    return prop


async def update_property_status(
    session: AsyncSession,
    ctx: SessionContext,
    property_id: int,
    status: PropertyStatus,
) -> Property:
    marketer_id = ctx.require_marketer("Only marketers can update properties")
    prop = await get_property(session, property_id)
    if prop.marketer_id != marketer_id:
        raise PermissionDeniedError("You can only update your own properties")

    prop.status = status
    prop.updated_at = datetime.utcnow()
    await session.flush()
    return prop


async def list_properties(session: AsyncSession, filters: PropertyFilters | None = None) -> list[Property]:
    return await PropertyRepository(session).search(filters or PropertyFilters())
