from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, Field

from .domain.types import BuyingIntent, PropertyStatus, PropertyType, ScoreTier
from .security import BCRYPT_MAX_BYTES

PHONE_REGEX = r"^01[0-9]{9}$"
EMAIL_REGEX = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _fits_bcrypt(v: str) -> str:
    if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
    return v


Password = Annotated[str, Field(min_length=8), AfterValidator(_fits_bcrypt)]


# ----- Registration / auth -----

class BuyerRegistration(BaseModel):
    full_name: str = Field(..., min_length=2)
    email: str = Field(..., pattern=EMAIL_REGEX)
    phone: str = Field(..., pattern=PHONE_REGEX, description="01XXXXXXXXX")
    password: Password
    budget: float = Field(..., gt=0)
    locations: list[str] = Field(..., min_length=1)
    property_types: list[PropertyType] = Field(..., min_length=1)
    buying_intent: BuyingIntent | None = None


class BuyerDraft(BaseModel):
    """Half-filled registration form; nothing is required."""
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    password: str | None = None
    budget: float | None = None
    locations: list[str] = Field(default_factory=list)
    property_types: list[str] = Field(default_factory=list)
    buying_intent: BuyingIntent | None = None


class MarketerRegistration(BaseModel):
    full_name: str = Field(..., min_length=2)
    email: str = Field(..., pattern=EMAIL_REGEX)
    phone: str = Field(..., pattern=PHONE_REGEX)
    password: Password
    company_name: str | None = None
    role: Literal["Marketer", "Developer"]
    office_location: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email_or_phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ScoreOut(BaseModel):
    score: int
    tier: ScoreTier
    explain: str = ""


class BuyerOut(BaseModel):
    id: int
    full_name: str
    email: str
    phone: str
    budget: float
    locations: list[str]
    property_types: list[str]
    buying_intent: BuyingIntent | None = None
    score: int
    score_tier: ScoreTier
    created_at: datetime


class MarketerOut(BaseModel):
    id: int
    full_name: str
    company_name: str | None = None
    email: str
    phone: str
    role: str
    office_location: str
    created_at: datetime


class SessionOut(BaseModel):
    token: str
    user_type: Literal["buyer", "marketer"]
    user_id: int
    expires_at: datetime


class BuyerRegistered(BaseModel):
    buyer: BuyerOut
    score: ScoreOut
    session: SessionOut


class MarketerRegistered(BaseModel):
    marketer: MarketerOut
    session: SessionOut


class MeOut(BaseModel):
    user_type: Literal["buyer", "marketer"]
    user_id: int


# ----- Properties -----

class PropertyCreate(BaseModel):
    title: str = Field(..., min_length=1)
    type: PropertyType
    location: str = Field(..., min_length=1)
    project_name: str | None = None
    price: float = Field(..., gt=0)
    area: float = Field(..., gt=0)
    bedrooms: int = Field(0, ge=0)
    bathrooms: int = Field(0, ge=0)
    delivery_date: date | None = None
    payment_plan: str = ""
    images: list[str] = Field(default_factory=list)
    description: str = ""
    status: PropertyStatus = PropertyStatus.available


class PropertyStatusUpdate(BaseModel):
    status: PropertyStatus


class PropertyOut(BaseModel):
    id: int
    marketer_id: int
    title: str
    type: PropertyType
    location: str
    project_name: str | None = None
    price: float
    area: float
    bedrooms: int
    bathrooms: int
    delivery_date: date | None = None
    payment_plan: str
    images: list[str]
    description: str
    status: PropertyStatus
    created_at: datetime
    updated_at: datetime


class MatchOut(BaseModel):
    matches: bool
    reasons: list[str]


# ----- Leads -----

class LeadOut(BaseModel):
    id: int
    buyer_id: int
    marketer_id: int
    property_id: int

    buyer_score: int
    buyer_score_tier: ScoreTier
    buyer_name: str
    buyer_phone: str
    buyer_email: str
    buyer_budget: float
    buyer_locations: list[str]
    buyer_property_types: list[str]

    status: Literal["New", "Contacted", "Deal", "Lost"]
    created_at: datetime
    updated_at: datetime


class LeadStatusUpdate(BaseModel):
    status: Literal["New", "Contacted", "Deal", "Lost"]
    notes: str | None = None


# ----- Integrations / jobs -----

class IntegrationCreate(BaseModel):
    name: str
    type: Literal["webhook"] = "webhook"
    enabled: bool = False
    url: str
    secret: str | None = None


class IntegrationOut(BaseModel):
    id: int
    name: str
    type: str
    enabled: bool
    created_at: datetime


class DispatchResult(BaseModel):
    delivered: int
    failed: int
    sinks: int | None = None
    events: int | None = None
    skipped_no_sinks: int | None = None
