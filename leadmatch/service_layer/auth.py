# leadmatch/service_layer/auth.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ..adapters.repos.accounts import AccountRepository
from ..config import settings
from ..models import UserType
from ..security import new_session_token, token_digest, verify_password
from .context import SessionContext
from .errors import AuthError

log = logging.getLogger(__name__)


async def issue_session(
    session: AsyncSession,
    user_type: UserType,
    user_id: int,
) -> tuple[str, SessionContext, datetime]:
    """
    Returns (token, ctx, expires_at). The raw token is only ever returned here.
    """
    token = new_session_token()
    expires_at = datetime.utcnow() + timedelta(minutes=settings.SESSION_TTL_MINUTES)
    await AccountRepository(session).add_session(
        token_hash=token_digest(token),
        user_type=user_type,
        user_id=user_id,
        expires_at=expires_at,
    )
    return token, SessionContext(user_type=user_type, user_id=user_id), expires_at


async def login(
    session: AsyncSession,
    email_or_phone: str,
    password: str,
) -> tuple[str, SessionContext, datetime]:
    """
    Buyers are looked up first, then marketers; email and phone are both accepted.
    Same error for unknown account and wrong password.
    """
    ident = email_or_phone.strip()
    repo = AccountRepository(session)

    buyer = await repo.find_buyer(email=ident, phone=ident)
    if buyer is not None and verify_password(password, buyer.password_hash):
        return await issue_session(session, UserType.buyer, buyer.id)

    marketer = await repo.find_marketer(email=ident, phone=ident)
    if marketer is not None and verify_password(password, marketer.password_hash):
        return await issue_session(session, UserType.marketer, marketer.id)

    log.info("login rejected")
    raise AuthError("Invalid credentials")


async def resolve_session(session: AsyncSession, token: str | None) -> SessionContext:
    if not token:
        raise AuthError("Not authenticated")

    row = await AccountRepository(session).get_session_by_hash(token_digest(token))
    if row is None:
        raise AuthError("Invalid session")
    if row.expires_at <= datetime.utcnow():
        raise AuthError("Session expired")

    return SessionContext(user_type=row.user_type, user_id=row.user_id)


async def logout(session: AsyncSession, token: str) -> bool:
    removed = await AccountRepository(session).delete_session(token_digest(token))
    return removed > 0
