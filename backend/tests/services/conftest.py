"""Service test fixtures — async DB + FastAPI test client + seeded profiles.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager initialized for background tasks that bypass get_db
    - get_ai_client overridden to None unless a test installs a scripted client
    - The process-wide rate limiter starts empty for every test

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - db_manager patched: background tasks use db_manager.session() directly
    - Reads after a request go through a fresh session (fetch fixture) so the
      test session's identity map never serves stale rows
"""

from datetime import date, time, timedelta

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from urbanestate.api.dependencies import get_ai_client
from urbanestate.core.rate_limit import rate_limiter
from urbanestate.db.base import Base
from urbanestate.infrastructure.database import get_db, DatabaseSessionManager
from urbanestate.models.availability_slot import AvailabilitySlot
from urbanestate.models.household_item import HouseholdItem
from urbanestate.models.profile import Profile
from urbanestate.models.property import Property
import urbanestate.infrastructure.database as db_module
from urbanestate.main import app


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fetch(test_session_factory):
    """Load a row through a fresh session: fetch(Model, id)."""
    async def _fetch(model, pk):
        async with test_session_factory() as session:
            return await session.get(model, pk)
    return _fetch


@pytest.fixture
def ai_client_override():
    """Holder for the AI client handed to routes; tests set ["client"]."""
    return {"client": None}


@pytest.fixture
async def client(test_engine, test_session_factory, ai_client_override):
    """FastAPI test client with DB and AI dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_client] = lambda: ai_client_override["client"]

    # Patch db_manager for background tasks that use it directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Seed data ──────────────────────────────────────────────────

async def _profile(db, role: str, name: str) -> Profile:
    profile = Profile(name=name, role=role)
    db.add(profile)
    await db.commit()
    return profile


@pytest.fixture
async def agent(test_db):
    return await _profile(test_db, "agent", "Aisha Agent")


@pytest.fixture
async def other_agent(test_db):
    return await _profile(test_db, "agent", "Omar Agent")


@pytest.fixture
async def admin(test_db):
    return await _profile(test_db, "admin", "Ada Admin")


@pytest.fixture
async def customer(test_db):
    return await _profile(test_db, "customer", "Carl Customer")


@pytest.fixture
async def published_property(test_db, agent):
    prop = Property(
        agent_id=agent.id,
        title="Bright two-bed in Marina",
        type="apartment",
        rent=8000,
        currency="AED",
        city="Dubai",
        area="Marina",
        beds=2,
        baths=2,
        amenities=["Pool", "Gym"],
        description="Spacious apartment with sea views, close to the tram and the beach walk.",
        status="published",
    )
    test_db.add(prop)
    await test_db.commit()
    return prop


@pytest.fixture
async def draft_property(test_db, agent):
    prop = Property(
        agent_id=agent.id, title="Unfinished listing", type="house",
        rent=12000, city="Dubai", beds=3, baths=2, status="draft",
    )
    test_db.add(prop)
    await test_db.commit()
    return prop


@pytest.fixture
async def open_slot(test_db, published_property):
    slot = AvailabilitySlot(
        property_id=published_property.id,
        slot_date=date.today() + timedelta(days=1),
        start_time=time(10, 0),
        end_time=time(10, 30),
        capacity=1,
        is_available=True,
    )
    test_db.add(slot)
    await test_db.commit()
    return slot


@pytest.fixture
async def sofa(test_db, agent):
    item = HouseholdItem(
        seller_id=agent.id, agent_id=agent.id, title="Three-seat sofa",
        category="furniture", price=900, currency="AED", condition="good",
        city="Dubai", status="available",
    )
    test_db.add(item)
    await test_db.commit()
    return item
