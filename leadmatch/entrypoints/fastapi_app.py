# leadmatch/entrypoints/fastapi_app.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from ..db import engine
from ..models import Base
from .api.routers import accounts, auth, health, integrations, jobs, leads, properties


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Single place where DB tables are created in dev.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="LeadMatch - Lead Qualification Engine", lifespan=_lifespan)

    # Routers
    app.include_router(health.router)
    app.include_router(accounts.router)
    app.include_router(auth.router)
    app.include_router(properties.router)
    app.include_router(leads.router)
    app.include_router(integrations.router)
    app.include_router(jobs.router)

    return app


app = create_app()
