# api/app/routes/matches.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.app.dependencies import get_identity_provider, get_session
from api.app.schemas.common import ERROR_RESPONSES
from api.app.schemas.match import MatchEntry, MatchesResponse
from services import ledger, profile_store
from services.errors import ProfileNotFoundError
from services.identity import IdentityProvider

router = APIRouter(tags=["matches"], responses=ERROR_RESPONSES)


@router.get("/matches/{device_id}", response_model=MatchesResponse)
async def list_matches(
    device_id: str,
    db: AsyncSession = Depends(get_session),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    """Mutual likes for a device, newest first."""
    profile = await identity.resolve(db, device_id)
    if profile is None:
        raise ProfileNotFoundError(device_id)

    rows = await ledger.list_matches(db, profile.id)
    entries = [
        MatchEntry(
            match_id=match.id,
            matched_at=match.created_at,
            profile=profile_store.to_candidate_view(other),
        )
        for match, other in rows
    ]
    return MatchesResponse(matches=entries, count=len(entries))
