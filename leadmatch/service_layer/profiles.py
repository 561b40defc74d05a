# leadmatch/service_layer/profiles.py
from __future__ import annotations

import json
from typing import Any

from ..domain.types import BuyerProfile, PropertyListing
from ..models import Buyer, Property


def load_json_list(raw: str | None) -> list[str]:
    """Decode a *_json list column; anything unreadable is an empty list."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return []
    if not isinstance(data, list):
        return []
    return [str(x) for x in data if x is not None]


def dump_json_list(values: Any) -> str:
    return json.dumps([getattr(v, "value", v) for v in (values or [])], ensure_ascii=False)


def buyer_profile(buyer: Buyer) -> BuyerProfile:
    """Stored buyer -> matcher input. password stays None."""
    return BuyerProfile.build(
        full_name=buyer.full_name,
        email=buyer.email,
        phone=buyer.phone,
        budget=buyer.budget,
        locations=load_json_list(buyer.locations_json),
        property_types=load_json_list(buyer.property_types_json),
        buying_intent=buyer.buying_intent,
    )


def property_listing(prop: Property) -> PropertyListing:
    return PropertyListing(
        price=prop.price,
        location=prop.location,
        type=prop.type,
        status=prop.status,
    )
