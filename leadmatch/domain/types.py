# leadmatch/domain/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from .parsing import get_first, to_float, to_str_set


class BuyingIntent(str, Enum):
    cash = "Cash"
    installment = "Installment"
    mortgage = "Mortgage"


class PropertyType(str, Enum):
    apartment = "Apartment"
    villa = "Villa"
    townhouse = "Townhouse"
    duplex = "Duplex"
    commercial = "Commercial"


class PropertyStatus(str, Enum):
    available = "Available"
    reserved = "Reserved"
    sold_out = "Sold Out"


class ScoreTier(str, Enum):
    hot = "Hot"
    warm = "Warm"
    cold = "Cold"


def _intent(x: Any) -> BuyingIntent | None:
    if x is None or x == "":
        return None
    if isinstance(x, BuyingIntent):
        return x
    try:
        return BuyingIntent(str(x))
    except ValueError:
        return None


@dataclass(frozen=True)
class BuyerProfile:
    """
    What the qualification core knows about a buyer.

    Every field is optional: registration forms call the scorer with half-filled
    drafts, and the matcher simply fails criteria whose inputs are missing.
    """

    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    password: str | None = None
    budget: float | None = None
    locations: frozenset[str] = field(default_factory=frozenset)
    property_types: frozenset[str] = field(default_factory=frozenset)
    buying_intent: BuyingIntent | None = None

    @property
    def has_budget(self) -> bool:
        return self.budget is not None and self.budget > 0

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "BuyerProfile":
        """
        Build a profile from a loose form/ORM payload.

        Accepts both camelCase and snake_case keys; unknown or malformed values are
        dropped rather than raising.
        """
        return cls(
            full_name=get_first(payload, "full_name", "fullName"),
            email=get_first(payload, "email"),
            phone=get_first(payload, "phone"),
            password=get_first(payload, "password"),
            budget=to_float(get_first(payload, "budget")),
            locations=to_str_set(get_first(payload, "locations")),
            property_types=to_str_set(get_first(payload, "property_types", "propertyTypes")),
            buying_intent=_intent(get_first(payload, "buying_intent", "buyingIntent")),
        )

    @classmethod
    def build(
        cls,
        *,
        locations: Iterable[str] = (),
        property_types: Iterable[Any] = (),
        **kwargs: Any,
    ) -> "BuyerProfile":
        return cls(
            locations=to_str_set(list(locations)),
            property_types=to_str_set(list(property_types)),
            **kwargs,
        )


@dataclass(frozen=True)
class PropertyListing:
    price: float
    location: str
    type: PropertyType
    status: PropertyStatus = PropertyStatus.available


@dataclass(frozen=True)
class ScoreResult:
    score: int
    tier: ScoreTier
    explain: str = ""


@dataclass(frozen=True)
class MatchResult:
    matches: bool
    reasons: tuple[str, ...] = ()

    def summary(self) -> str:
        return ", ".join(self.reasons)
