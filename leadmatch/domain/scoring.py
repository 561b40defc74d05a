# leadmatch/domain/scoring.py
from __future__ import annotations

from .types import BuyerProfile, ScoreResult
from .policies import (
    POINTS_BUDGET,
    POINTS_BUYING_INTENT,
    POINTS_COMPLETE,
    POINTS_CONTACT,
    POINTS_LOCATIONS,
    POINTS_PROPERTY_TYPES,
    is_valid_email,
    is_valid_phone,
    tier_for_score,
)


def is_profile_complete(buyer: BuyerProfile) -> bool:
    return bool(
        buyer.full_name
        and buyer.email
        and buyer.phone
        and buyer.password
        and buyer.has_budget
        and buyer.locations
        and buyer.property_types
        and buyer.buying_intent is not None
    )


def calculate_score(buyer: BuyerProfile) -> ScoreResult:
    """
    Lead score for a (possibly partial) buyer profile.

    Each criterion adds its points at most once; nothing here raises, a missing
    field just doesn't contribute. Max is 100 by construction and is NOT clamped.
    """
    drivers: list[tuple[str, int]] = []

    if buyer.has_budget:
        drivers.append(("budget", POINTS_BUDGET))
    if buyer.locations:
        drivers.append(("locations", POINTS_LOCATIONS))
    if buyer.property_types:
        drivers.append(("property_types", POINTS_PROPERTY_TYPES))
    if buyer.buying_intent is not None:
        drivers.append(("buying_intent", POINTS_BUYING_INTENT))
    if is_valid_phone(buyer.phone) and is_valid_email(buyer.email):
        drivers.append(("contact", POINTS_CONTACT))
    if is_profile_complete(buyer):
        drivers.append(("complete", POINTS_COMPLETE))

    score = sum(points for _, points in drivers)
    return ScoreResult(
        score=score,
        tier=tier_for_score(score),
        explain=" | ".join(f"{name}={points}" for name, points in drivers),
    )
