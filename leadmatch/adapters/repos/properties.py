# leadmatch/adapters/repos/properties.py
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.types import PropertyStatus, PropertyType
from ...models import Property


@dataclass(frozen=True)
class PropertyFilters:
    min_price: float | None = None
    max_price: float | None = None
    location: str | None = None
    min_bedrooms: int | None = None
    property_type: PropertyType | None = None
    min_area: float | None = None
    marketer_id: int | None = None
    status: PropertyStatus | None = None
    limit: int = 50


class PropertyRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, property_id: int) -> Property | None:
        return await self.session.get(Property, property_id)

    async def create(self, *, marketer_id: int, payload: dict[str, Any]) -> Property:
        now = datetime.utcnow()
        prop = Property(
            marketer_id=marketer_id,
            title=payload["title"].strip(),
            type=PropertyType(payload["type"]),
            location=payload["location"].strip(),
            project_name=payload.get("project_name"),
            price=float(payload["price"]),
            area=float(payload["area"]),
            bedrooms=int(payload.get("bedrooms") or 0),
            bathrooms=int(payload.get("bathrooms") or 0),
            delivery_date=payload.get("delivery_date"),
            payment_plan=payload.get("payment_plan") or "",
            images_json=json.dumps(list(payload.get("images") or []), ensure_ascii=False),
            description=payload.get("description") or "",
            status=PropertyStatus(payload.get("status") or PropertyStatus.available),
            created_at=now,
            updated_at=now,
        )
        self.session.add(prop)
        await self.session.flush()
        return prop

    async def search(self, filters: PropertyFilters) -> list[Property]:
        q = select(Property)

        if filters.min_price is not None:
            q = q.where(Property.price >= filters.min_price)
        if filters.max_price is not None:
            q = q.where(Property.price <= filters.max_price)
        if filters.location:
            q = q.where(Property.location == filters.location)
        if filters.min_bedrooms is not None:
            q = q.where(Property.bedrooms >= filters.min_bedrooms)
        if filters.property_type is not None:
            q = q.where(Property.type == filters.property_type)
        if filters.min_area is not None:
            q = q.where(Property.area >= filters.min_area)
        if filters.marketer_id is not None:
            q = q.where(Property.marketer_id == filters.marketer_id)
        if filters.status is not None:
            q = q.where(Property.status == filters.status)

        q = q.order_by(Property.created_at.desc(), Property.id.desc()).limit(filters.limit)
        return list((await self.session.execute(q)).scalars().all())
