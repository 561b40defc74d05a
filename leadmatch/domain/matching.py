# leadmatch/domain/matching.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Iterable, Mapping

from .types import BuyerProfile, MatchResult, PropertyListing, PropertyStatus
from .policies import (
    ADJACENT_LOCATIONS,
    BUDGET_TOLERANCE_LOWER,
    BUDGET_TOLERANCE_UPPER,
    CURRENCY,
    adjacent_locations,
)


def _dec(x: float) -> Decimal | None:
    try:
        d = Decimal(str(x))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return d if d.is_finite() else None


def _money(x: Decimal) -> str:
    s = f"{x:,.2f}"
    return s[:-3] if s.endswith(".00") else s


def budget_band(budget: float | None) -> tuple[Decimal, Decimal] | None:
    """(low, high) around a buyer's budget, or None when there is no usable budget."""
    if budget is None or budget <= 0:
        return None
    b = _dec(budget)
    if b is None:
        return None
    return b * BUDGET_TOLERANCE_LOWER, b * BUDGET_TOLERANCE_UPPER


def budget_matches(budget: float | None, price: float) -> bool:
    band = budget_band(budget)
    p = _dec(price)
    if band is None or p is None:
        return False
    low, high = band
    return low <= p <= high


def location_matches(
    buyer_locations: Iterable[str],
    location: str,
    table: Mapping[str, frozenset[str]] = ADJACENT_LOCATIONS,
) -> bool:
    # exact hit, or the listing sits next to one of the buyer's areas
    for loc in buyer_locations:
        if loc == location or location in adjacent_locations(loc, table):
            return True
    return False


def _value(x: object) -> object:
    return getattr(x, "value", x)


def evaluate_match(
    buyer: BuyerProfile,
    prop: PropertyListing,
    *,
    table: Mapping[str, frozenset[str]] = ADJACENT_LOCATIONS,
) -> MatchResult:
    """
    Decide whether a buyer/property pair is worth a lead.

    All four checks always run so the buyer sees every unmet criterion, in a fixed
    order: budget, location, type, availability.
    """
    reasons: list[str] = []

    budget_ok = budget_matches(buyer.budget, prop.price)
    if not budget_ok:
        price = _dec(prop.price)
        shown_price = _money(price) if price is not None else str(prop.price)
        band = budget_band(buyer.budget)
        if band is None:
            reasons.append(
                f"Price {shown_price} {CURRENCY} is outside your budget range (no budget specified)"
            )
        else:
            low, high = band
            reasons.append(
                f"Price {shown_price} {CURRENCY} is outside your budget range "
                f"({_money(low)} - {_money(high)} {CURRENCY})"
            )

    location_ok = location_matches(buyer.locations, prop.location, table)
    if not location_ok:
        reasons.append(f'Location "{prop.location}" doesn\'t match your preferred locations')

    type_ok = _value(prop.type) in buyer.property_types
    if not type_ok:
        reasons.append(f'Property type "{_value(prop.type)}" doesn\'t match your preferences')

    available = prop.status == PropertyStatus.available
    if not available:
        reasons.append(f"Property is currently {_value(prop.status)}")

    return MatchResult(
        matches=budget_ok and location_ok and type_ok and available,
        reasons=tuple(reasons),
    )


def should_create_lead(buyer: BuyerProfile, prop: PropertyListing) -> bool:
    return evaluate_match(buyer, prop).matches
