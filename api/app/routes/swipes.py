# api/app/routes/swipes.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.app.dependencies import get_identity_provider, get_session
from api.app.schemas.common import ERROR_RESPONSES
from api.app.schemas.swipe import SwipeRequest, SwipeResponse
from services import ledger, profile_store
from services.errors import ProfileNotFoundError
from services.identity import IdentityProvider

router = APIRouter(tags=["swipes"], responses=ERROR_RESPONSES)


@router.post("/swipes", response_model=SwipeResponse)
async def record_swipe(
    body: SwipeRequest,
    db: AsyncSession = Depends(get_session),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    swiper = await identity.resolve(db, body.swiper_device_id)
    if swiper is None:
        raise ProfileNotFoundError(body.swiper_device_id)
    swiped = await profile_store.resolve_reference(db, body.swiped_profile_id)

    outcome = await ledger.record_decision(db, swiper.id, swiped.id, body.action)

    return SwipeResponse(
        id=outcome.swipe.id,
        swiper_device_id=swiper.device_id,
        swiped_profile_id=profile_store.public_id(swiped),
        action=outcome.swipe.action,
        created_at=outcome.swipe.created_at,
        updated_at=outcome.swipe.updated_at,
        matched=outcome.match is not None,
        match_id=outcome.match.id if outcome.match else None,
    )
