# tests/test_domain_scoring.py
import itertools

from leadmatch.domain.policies import tier_for_score
from leadmatch.domain.scoring import calculate_score, is_profile_complete
from leadmatch.domain.types import BuyerProfile, BuyingIntent, PropertyType, ScoreTier

FULL = dict(
    full_name="Test Buyer",
    email="buyer@test.com",
    phone="01234567890",
    password="password",
    budget=2_000_000,
    locations=["New Cairo"],
    property_types=[PropertyType.apartment],
    buying_intent=BuyingIntent.cash,
)


def _buyer(**overrides) -> BuyerProfile:
    data = {**FULL, **overrides}
    return BuyerProfile.build(**data)


def test_complete_buyer_scores_100_hot():
    res = calculate_score(_buyer())
    assert res.score == 100
    assert res.tier == ScoreTier.hot
    assert res.explain == (
        "budget=30 | locations=20 | property_types=20 | buying_intent=10 | contact=10 | complete=10"
    )


def test_budget_only_scores_30_cold():
    res = calculate_score(BuyerProfile(budget=500_000))
    assert res.score == 30
    assert res.tier == ScoreTier.cold
    assert res.explain == "budget=30"


def test_empty_profile_scores_zero():
    res = calculate_score(BuyerProfile())
    assert res.score == 0
    assert res.tier == ScoreTier.cold
    assert res.explain == ""


def test_non_positive_budget_earns_nothing():
    assert calculate_score(BuyerProfile(budget=0)).score == 0
    assert calculate_score(BuyerProfile(budget=-100)).score == 0


def test_short_phone_loses_contact_points_but_stays_complete():
    # ten digits is not a valid local mobile
    res = calculate_score(_buyer(phone="0123456789"))
    assert res.score == 90
    assert res.tier == ScoreTier.hot
    assert "contact" not in res.explain
    assert "complete=10" in res.explain


def test_phone_with_trailing_newline_is_invalid():
    assert calculate_score(_buyer(phone="01234567890\n")).score == 90


def test_email_without_dot_loses_contact_points():
    assert calculate_score(_buyer(email="buyer@localhost")).score == 90


def test_missing_intent_is_warm():
    res = calculate_score(_buyer(buying_intent=None))
    # no intent points and no completeness bonus
    assert res.score == 80
    assert res.tier == ScoreTier.warm


def test_missing_password_only_drops_completeness_bonus():
    res = calculate_score(_buyer(password=None))
    assert res.score == 90
    assert not is_profile_complete(_buyer(password=None))


def test_score_is_bounded_for_every_field_combination():
    keys = list(FULL)
    for mask in itertools.product([True, False], repeat=len(keys)):
        kwargs = {k: (FULL[k] if keep else None) for k, keep in zip(keys, mask)}
        kwargs["locations"] = kwargs["locations"] or ()
        kwargs["property_types"] = kwargs["property_types"] or ()
        res = calculate_score(BuyerProfile.build(**kwargs))
        assert 0 <= res.score <= 100
        assert res.tier == tier_for_score(res.score)


def test_tier_thresholds_partition_the_range():
    for score in range(0, 101):
        tier = tier_for_score(score)
        if score >= 90:
            assert tier == ScoreTier.hot
        elif score >= 70:
            assert tier == ScoreTier.warm
        else:
            assert tier == ScoreTier.cold


def test_scoring_is_deterministic():
    b = _buyer()
    assert calculate_score(b) == calculate_score(b)


def test_from_payload_accepts_camel_case_form():
    b = BuyerProfile.from_payload(
        {
            "fullName": "Test Buyer",
            "email": "buyer@test.com",
            "phone": "01234567890",
            "password": "password",
            "budget": "2000000",
            "locations": ["New Cairo"],
            "propertyTypes": ["Apartment"],
            "buyingIntent": "Cash",
        }
    )
    assert b.buying_intent == BuyingIntent.cash
    assert b.property_types == frozenset({"Apartment"})
    assert calculate_score(b).score == 100


def test_from_payload_drops_malformed_values():
    b = BuyerProfile.from_payload({"budget": "lots", "buyingIntent": "Barter", "locations": 5})
    assert b.budget is None
    assert b.buying_intent is None
    assert b.locations == frozenset()
    assert calculate_score(b).score == 0
