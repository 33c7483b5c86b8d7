# services/identity.py
"""
Identity resolution.

The app has no credentials: the client generates a device id and sends it
with each call. That trust model lives behind IdentityProvider so a real
authenticator can replace DeviceTokenIdentity without touching the
matcher, ledger, or messaging services.
"""
from __future__ import annotations

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from models.profile import Profile
from services import profile_store


class IdentityProvider(Protocol):
    async def resolve(self, db: AsyncSession, credential: str, *, create: bool = False) -> Profile | None:
        """Map a client credential to its profile, or None when unknown."""
        ...


class DeviceTokenIdentity:
    """Trusts the client-supplied device id as-is."""

    async def resolve(self, db: AsyncSession, credential: str, *, create: bool = False) -> Profile | None:
        credential = (credential or "").strip()
        if not credential:
            return None
        if create:
            return await profile_store.get_or_create(db, credential)
        return await profile_store.get_by_device(db, credential)
