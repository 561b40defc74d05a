# leadmatch/entrypoints/api/deps.py
from __future__ import annotations

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...db import get_session
from ...service_layer.auth import resolve_session
from ...service_layer.context import SessionContext
from ...service_layer.errors import (
    AuthError,
    ConflictError,
    NoMatchError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
)

__all__ = ["get_session", "require_api_key", "bearer_token", "current_context", "http_error"]


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    if settings.API_KEY:
        if not x_api_key or x_api_key != settings.API_KEY:
            raise HTTPException(status_code=401, detail="Invalid API key")


def bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def current_context(
    token: str | None = Depends(bearer_token),
    session: AsyncSession = Depends(get_session),
) -> SessionContext:
    try:
        return await resolve_session(session, token)
    except AuthError as e:
        raise http_error(e) from e


def http_error(e: ServiceError) -> HTTPException:
    if isinstance(e, NoMatchError):
        return HTTPException(status_code=422, detail={"message": str(e), "reasons": list(e.reasons)})
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ConflictError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, PermissionDeniedError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, AuthError):
        return HTTPException(status_code=401, detail=str(e), headers={"WWW-Authenticate": "Bearer"})
    return HTTPException(status_code=400, detail=str(e))
