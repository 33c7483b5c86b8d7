# api/app/routes/profile.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.app.dependencies import get_identity_provider, get_session
from api.app.schemas.common import ERROR_RESPONSES
from api.app.schemas.profile import DeviceIdResponse, ProfileResponse, ProfileUpdate
from services import profile_store
from services.errors import InvalidProfileTokenError, ProfileNotFoundError
from services.identity import IdentityProvider

router = APIRouter(tags=["profile"], responses=ERROR_RESPONSES)


@router.get("/user/profile/{device_id}", response_model=ProfileResponse)
async def get_user_profile(
    device_id: str,
    db: AsyncSession = Depends(get_session),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    """Fetch the device's profile, creating a placeholder on first access."""
    profile = await identity.resolve(db, device_id, create=True)
    return ProfileResponse.from_profile(profile)


@router.put("/user/profile/{device_id}", response_model=ProfileResponse)
async def update_user_profile(
    device_id: str,
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_session),
):
    profile = await profile_store.update(db, device_id, body.to_patch())
    return ProfileResponse.from_profile(profile)


@router.get("/profile/{profile_id}/deviceId", response_model=DeviceIdResponse)
async def get_device_id(
    profile_id: str,
    db: AsyncSession = Depends(get_session),
):
    try:
        device_id = await profile_store.device_id_for_token(db, profile_id)
    except InvalidProfileTokenError:
        raise ProfileNotFoundError(profile_id)
    return DeviceIdResponse(device_id=device_id)
