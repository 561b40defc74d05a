# leadmatch/domain/policies.py
from __future__ import annotations

import re
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from .types import ScoreTier


# --- Budget band (inclusive on both ends) ---
BUDGET_TOLERANCE_LOWER = Decimal("0.82")
BUDGET_TOLERANCE_UPPER = Decimal("1.18")
BUDGET_TOLERANCE = (BUDGET_TOLERANCE_LOWER, BUDGET_TOLERANCE_UPPER)

# --- Tier cut-offs (score >= threshold) ---
TIER_THRESHOLDS: Mapping[ScoreTier, int] = MappingProxyType(
    {
        ScoreTier.hot: 90,
        ScoreTier.warm: 70,
    }
)

# --- Points per scoring criterion ---
POINTS_BUDGET = 30
POINTS_LOCATIONS = 20
POINTS_PROPERTY_TYPES = 20
POINTS_BUYING_INTENT = 10
POINTS_CONTACT = 10
POINTS_COMPLETE = 10

# --- Local mobile format: 01 + 9 digits ---
PHONE_PREFIX = "01"
PHONE_TOTAL_DIGITS = 11
PHONE_PATTERN = re.compile(rf"{PHONE_PREFIX}[0-9]{{{PHONE_TOTAL_DIGITS - len(PHONE_PREFIX)}}}")

CURRENCY = "SAR"


def _clusters(*groups: tuple[str, ...]) -> dict[str, frozenset[str]]:
    out: dict[str, frozenset[str]] = {}
    for group in groups:
        for name in group:
            out[name] = frozenset(n for n in group if n != name)
    return out


ADJACENT_LOCATIONS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        **_clusters(
            ("New Cairo", "Rehab", "Madinaty"),
            ("6th October", "Sheikh Zayed", "Beverly Hills"),
            ("North Coast", "Sidi Abdel Rahman", "Hacienda"),
        ),
        # known, but nothing is close enough
        "NAC": frozenset(),
        "Downtown": frozenset(),
        "Zamalek": frozenset(),
        "Heliopolis": frozenset(),
    }
)

KNOWN_LOCATIONS: tuple[str, ...] = tuple(ADJACENT_LOCATIONS.keys())


def adjacent_locations(
    location: str,
    table: Mapping[str, frozenset[str]] = ADJACENT_LOCATIONS,
) -> frozenset[str]:
    return frozenset(table.get(location) or ())


def is_valid_phone(phone: str | None) -> bool:
    if not phone:
        return False
    return PHONE_PATTERN.fullmatch(phone) is not None


def is_valid_email(email: str | None) -> bool:
    # "@" and "." present; registration schemas do the strict check
    if not email:
        return False
    return "@" in email and "." in email


def tier_for_score(score: int) -> ScoreTier:
    if score >= TIER_THRESHOLDS[ScoreTier.hot]:
        return ScoreTier.hot
    if score >= TIER_THRESHOLDS[ScoreTier.warm]:
        return ScoreTier.warm
    return ScoreTier.cold
