# api/app/dependencies.py
from __future__ import annotations

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_db
from services.identity import DeviceTokenIdentity, IdentityProvider

_identity = DeviceTokenIdentity()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db():
        yield session


def get_identity_provider() -> IdentityProvider:
    """Swap this dependency (app.dependency_overrides) to plug in real auth."""
    return _identity
