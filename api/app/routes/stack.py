# api/app/routes/stack.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.app.dependencies import get_identity_provider, get_session
from api.app.schemas.stack import StackResponse
from services.identity import IdentityProvider
from services.matcher import compute_stack

router = APIRouter(tags=["stack"])


@router.get("/getStack", response_model=StackResponse)
async def get_stack(
    device_id: str | None = Query(None, alias="deviceId"),
    db: AsyncSession = Depends(get_session),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    """
    Ranked candidates for the requesting device.

    Unknown or missing devices get the default criteria rather than an error.
    """
    requester = await identity.resolve(db, device_id) if device_id else None
    stack = await compute_stack(db, requester)
    return StackResponse(stack=stack, count=len(stack))
