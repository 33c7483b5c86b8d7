# tests/conftest.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from models import Base
from models.profile import ACTIVITY_TYPES, Profile

BOULDER = (40.0150, -105.2705)
EPOCH = datetime(2025, 12, 1, tzinfo=timezone.utc)


def climber_fields(**overrides) -> dict:
    """A fully-populated, broadly compatible climber near Boulder."""
    fields = dict(
        name="Climber",
        age=30,
        gender="woman",
        bio="Let's climb",
        skill_level="Intermediate",
        location="Boulder, CO",
        latitude=BOULDER[0] + 0.05,
        longitude=BOULDER[1],
        profile_image_name="person.circle.fill",
        availability="Weekends",
        favorite_crag=None,
        gender_preference="all genders",
        min_age_preference=20,
        max_age_preference=45,
        max_distance_km=100.0,
        onboarded=True,
    )
    for t in ACTIVITY_TYPES:
        fields[f"does_{t}"] = t in ("sport", "bouldering")
        fields[f"wants_{t}"] = t in ("sport", "bouldering")
    fields.update(overrides)
    return fields


@pytest.fixture
def make_profile():
    """Build unsaved Profile rows with explicit ids, for pure matcher tests."""
    ids = count(100)

    def _make(**overrides) -> Profile:
        pid = overrides.pop("id", None) or next(ids)
        fields = climber_fields(**overrides)
        fields.setdefault("device_id", f"device-{pid}")
        fields.setdefault("created_at", EPOCH + timedelta(minutes=pid))
        return Profile(id=pid, **fields)

    return _make


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def add_profile(db):
    """Insert a climber and return it; device ids default to a running counter."""
    ids = count(1)

    async def _add(**overrides) -> Profile:
        n = next(ids)
        overrides.setdefault("device_id", f"device-{n}")
        overrides.setdefault("name", f"Climber {n}")
        fields = climber_fields(**overrides)
        profile = Profile(**fields)
        db.add(profile)
        await db.flush()
        return profile

    return _add
