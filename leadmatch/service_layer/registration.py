# leadmatch/service_layer/registration.py
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..adapters.repos.accounts import AccountRepository
from ..domain.scoring import calculate_score
from ..domain.types import BuyerProfile, ScoreResult
from ..models import Buyer, Marketer, MarketerRole
from ..schemas import BuyerDraft, BuyerRegistration, MarketerRegistration
from ..security import hash_password
from .errors import ConflictError
from .profiles import dump_json_list

log = logging.getLogger(__name__)

DUPLICATE_ACCOUNT = "Email or phone already registered"


def preview_score(draft: BuyerDraft | BuyerRegistration) -> ScoreResult:
    """Score a (possibly incomplete) registration form without touching storage."""
    return calculate_score(BuyerProfile.from_payload(draft.model_dump()))


async def register_buyer(session: AsyncSession, data: BuyerRegistration) -> tuple[Buyer, ScoreResult]:
    """
    Score the submitted form, refuse duplicates (email OR phone), store the buyer
    with score + tier. Caller commits.
    """
    result = preview_score(data)

    repo = AccountRepository(session)
    if await repo.find_buyer(email=data.email, phone=data.phone) is not None:
        raise ConflictError(DUPLICATE_ACCOUNT)

    buyer = Buyer(
        full_name=data.full_name.strip(),
        email=data.email.strip(),
        phone=data.phone,
        password_hash=hash_password(data.password),
        budget=float(data.budget),
        locations_json=dump_json_list(data.locations),
        property_types_json=dump_json_list(data.property_types),
        buying_intent=data.buying_intent,
        score=result.score,
        score_tier=result.tier,
        created_at=datetime.utcnow(),
    )
    try:
        await repo.add(buyer)
    except IntegrityError as e:
        # lost a race with a concurrent registration
        raise ConflictError(DUPLICATE_ACCOUNT) from e

    log.info("buyer %s registered score=%d tier=%s", buyer.id, result.score, result.tier.value)
    return buyer, result


async def register_marketer(session: AsyncSession, data: MarketerRegistration) -> Marketer:
    repo = AccountRepository(session)
    if await repo.find_marketer(email=data.email, phone=data.phone) is not None:
        raise ConflictError(DUPLICATE_ACCOUNT)

    marketer = Marketer(
        full_name=data.full_name.strip(),
        company_name=(data.company_name or "").strip() or None,
        email=data.email.strip(),
        phone=data.phone,
        password_hash=hash_password(data.password),
        role=MarketerRole(data.role),
        office_location=data.office_location.strip(),
        created_at=datetime.utcnow(),
    )
    try:
        await repo.add(marketer)
    except IntegrityError as e:
        raise ConflictError(DUPLICATE_ACCOUNT) from e

    log.info("marketer %s registered role=%s", marketer.id, marketer.role.value)
    return marketer
