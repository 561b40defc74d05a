# tests/conftest.py
import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from leadmatch.config import settings
from leadmatch.db import get_session
from leadmatch.entrypoints.fastapi_app import create_app
from leadmatch.models import Base, UserType
from leadmatch.service_layer.context import SessionContext
from leadmatch.service_layer.properties import create_property
from leadmatch.service_layer.registration import register_buyer, register_marketer
from tests.forms import buyer_form, marketer_form, property_form


@pytest.fixture(autouse=True)
def _fast_settings(monkeypatch):
    # cheapest bcrypt cost; the default makes every registration ~0.25s
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)
    monkeypatch.setattr(settings, "API_KEY", None)
    monkeypatch.setattr(settings, "OUTBOX_WEBHOOK_RPS", 0.0)


@pytest.fixture
async def engine():
    """
    Fresh in-memory DB per test. StaticPool makes all connections share the same
    in-memory database for the lifetime of this engine fixture.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def async_session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=True)


@pytest.fixture
async def session(async_session_maker):
    async with async_session_maker() as s:
        yield s


@pytest.fixture
async def client(async_session_maker):
    app = create_app()

    async def _session_override():
        async with async_session_maker() as s:
            yield s

    app.dependency_overrides[get_session] = _session_override
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def buyer(session):
    b, _ = await register_buyer(session, buyer_form())
    await session.commit()
    return b


@pytest.fixture
async def marketer(session):
    m = await register_marketer(session, marketer_form())
    await session.commit()
    return m


@pytest.fixture
def buyer_ctx(buyer):
    return SessionContext(user_type=UserType.buyer, user_id=buyer.id)


@pytest.fixture
def marketer_ctx(marketer):
    return SessionContext(user_type=UserType.marketer, user_id=marketer.id)


@pytest.fixture
async def listing(session, marketer_ctx):
    prop = await create_property(session, marketer_ctx, property_form())
    await session.commit()
    return prop
