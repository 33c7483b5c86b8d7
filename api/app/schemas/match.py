# api/app/schemas/match.py
from __future__ import annotations

from datetime import datetime

from api.app.schemas.common import CamelModel
from api.app.schemas.stack import CandidateView


class MatchEntry(CamelModel):
    match_id: int
    matched_at: datetime
    profile: CandidateView


class MatchesResponse(CamelModel):
    matches: list[MatchEntry]
    count: int
