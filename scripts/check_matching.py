"""
Print the reference matching scenarios for a sample buyer.

    python scripts/check_matching.py
"""
from __future__ import annotations

from dataclasses import replace

from leadmatch.domain.matching import budget_band, evaluate_match
from leadmatch.domain.scoring import calculate_score
from leadmatch.domain.types import BuyerProfile, BuyingIntent, PropertyListing, PropertyStatus, PropertyType

BUYER = BuyerProfile.build(
    full_name="Test Buyer",
    email="buyer@test.com",
    phone="01234567890",
    password="password",
    budget=2_000_000,
    locations=["New Cairo"],
    property_types=[PropertyType.apartment],
    buying_intent=BuyingIntent.cash,
)

BASE = PropertyListing(
    price=1_800_000,
    location="New Cairo",
    type=PropertyType.apartment,
    status=PropertyStatus.available,
)

SCENARIOS: list[tuple[str, PropertyListing, bool]] = [
    ("budget match (2M buyer, 1.8M property)", BASE, True),
    ("budget mismatch (2M buyer, 3M property)", replace(BASE, price=3_000_000), False),
    ("adjacent location (New Cairo buyer, Rehab property)", replace(BASE, location="Rehab"), True),
    ("wrong location (New Cairo buyer, North Coast property)", replace(BASE, location="North Coast"), False),
    ("type mismatch (Apartment buyer, Villa property)", replace(BASE, type=PropertyType.villa), False),
    ("unavailable (Sold Out)", replace(BASE, status=PropertyStatus.sold_out), False),
]


def main() -> int:
    score = calculate_score(BUYER)
    low, high = budget_band(BUYER.budget)
    print(f"buyer score={score.score} tier={score.tier.value} ({score.explain})")
    print(f"budget band: {low:,.0f} - {high:,.0f}\n")

    failures = 0
    for name, prop, expected in SCENARIOS:
        result = evaluate_match(BUYER, prop)
        ok = result.matches is expected
        failures += 0 if ok else 1
        print(f"[{'ok' if ok else 'UNEXPECTED'}] {name}: {'MATCH' if result.matches else 'NO MATCH'}")
        for r in result.reasons:
            print(f"    - {r}")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
