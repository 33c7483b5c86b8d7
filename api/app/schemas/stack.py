# api/app/schemas/stack.py
from __future__ import annotations

from api.app.schemas.common import CamelModel


class CandidateView(CamelModel):
    id: str
    name: str
    age: int
    bio: str
    skill_level: str
    preferred_types: list[str]
    location: str
    profile_image_name: str
    availability: str
    favorite_crag: str | None = None


class StackResponse(CamelModel):
    stack: list[CandidateView]
    count: int
