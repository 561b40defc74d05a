# leadmatch/entrypoints/api/routers/accounts.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_session, http_error
from ..presenters import buyer_out, marketer_out, score_out, session_out
from ....models import UserType
from ....schemas import (
    BuyerDraft,
    BuyerRegistered,
    BuyerRegistration,
    MarketerRegistered,
    MarketerRegistration,
    ScoreOut,
)
from ....service_layer.auth import issue_session
from ....service_layer.errors import ServiceError
from ....service_layer.registration import preview_score, register_buyer, register_marketer

router = APIRouter(tags=["accounts"])


@router.post("/buyers/score", response_model=ScoreOut)
async def buyer_score_preview(body: BuyerDraft) -> ScoreOut:
    return score_out(preview_score(body))


@router.post("/buyers/register", response_model=BuyerRegistered, status_code=201)
async def buyers_register(
    body: BuyerRegistration,
    session: AsyncSession = Depends(get_session),
) -> BuyerRegistered:
    try:
        buyer, result = await register_buyer(session, body)
    except ServiceError as e:
        await session.rollback()
        raise http_error(e) from e

    token, ctx, expires_at = await issue_session(session, UserType.buyer, buyer.id)
    await session.commit()
    return BuyerRegistered(
        buyer=buyer_out(buyer),
        score=score_out(result),
        session=session_out(token, ctx, expires_at),
    )


@router.post("/marketers/register", response_model=MarketerRegistered, status_code=201)
async def marketers_register(
    body: MarketerRegistration,
    session: AsyncSession = Depends(get_session),
) -> MarketerRegistered:
    try:
        marketer = await register_marketer(session, body)
    except ServiceError as e:
        await session.rollback()
        raise http_error(e) from e

    token, ctx, expires_at = await issue_session(session, UserType.marketer, marketer.id)
    await session.commit()
    return MarketerRegistered(marketer=marketer_out(marketer), session=session_out(token, ctx, expires_at))
