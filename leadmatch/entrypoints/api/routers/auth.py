# leadmatch/entrypoints/api/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import bearer_token, current_context, get_session, http_error
from ..presenters import session_out
from ....schemas import LoginRequest, MeOut, SessionOut
from ....service_layer.auth import login, logout
from ....service_layer.context import SessionContext
from ....service_layer.errors import AuthError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=SessionOut)
async def auth_login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> SessionOut:
    try:
        token, ctx, expires_at = await login(session, body.email_or_phone, body.password)
    except AuthError as e:
        raise http_error(e) from e
    await session.commit()
    return session_out(token, ctx, expires_at)


@router.post("/logout", status_code=204, dependencies=[Depends(current_context)])
async def auth_logout(
    token: str | None = Depends(bearer_token),
    session: AsyncSession = Depends(get_session),
) -> None:
    if token:
        await logout(session, token)
        await session.commit()


@router.get("/me", response_model=MeOut)
async def auth_me(ctx: SessionContext = Depends(current_context)) -> MeOut:
    return MeOut(user_type=ctx.user_type.value, user_id=ctx.user_id)
