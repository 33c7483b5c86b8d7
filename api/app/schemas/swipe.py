# api/app/schemas/swipe.py
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from api.app.schemas.common import CamelModel


class SwipeRequest(CamelModel):
    swiper_device_id: str = Field(..., min_length=1)
    swiped_profile_id: str = Field(..., min_length=1)
    action: Literal["like", "pass"]


class SwipeResponse(BaseModel):
    id: int
    swiper_device_id: str
    swiped_profile_id: str
    action: str
    created_at: datetime
    updated_at: datetime
    matched: bool = False
    match_id: int | None = None
