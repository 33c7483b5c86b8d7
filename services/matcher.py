# services/matcher.py
"""
Candidate matcher behind GET /getStack.

Given a requester, returns the profiles that are mutually compatible with
them, nearest first, capped at the configured stack size.

A candidate must pass every stage:

1. not the requester
2. not previously passed by the requester (likes do not exclude)
3. candidate age inside the requester's age window
4. requester age inside the candidate's age window
5. candidate gender accepted by the requester's gender preference
6. requester gender accepted by the candidate's gender preference
7. both sides have coordinates
8. haversine distance within the requester's max distance
9. distance within the candidate's max distance (null = unbounded)
10. when the requester wants any activity type: the candidate does one of
    them, and the candidate wants one of them too

The reciprocal half of stage 10 compares the candidate's wants with the
requester's wants, not with what the requester does.

The SQL query only narrows the pool (stages 1-4 and 7); the Python
pipeline re-checks every stage.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.app.config import get_settings
from models.profile import Profile
from services import ledger, profile_store
from services.geo import haversine_km

logger = logging.getLogger(__name__)

STACK_LIMIT = 50

ALL_GENDERS = "all genders"

# Requester gender -> the gender preference a candidate needs to accept them.
GENDER_TO_PREFERENCE = {
    "man": "men",
    "woman": "women",
}

# Requester gender preference -> the candidate gender it requires.
PREFERENCE_TO_GENDER = {
    "men": "man",
    "women": "woman",
}

DEFAULT_SEEKER = {
    "age": 28,
    "gender": "man",
    "max_distance_km": 50.0,
    "min_age_preference": 24,
    "max_age_preference": 40,
    "gender_preference": ALL_GENDERS,
    "wants": frozenset({"sport", "bouldering", "outdoor"}),
}


@dataclass(frozen=True)
class Seeker:
    """The requester's side of a match: who they are and what they accept."""

    latitude: float
    longitude: float
    age: int = DEFAULT_SEEKER["age"]
    gender: str = DEFAULT_SEEKER["gender"]
    max_distance_km: float | None = DEFAULT_SEEKER["max_distance_km"]
    min_age_preference: int = DEFAULT_SEEKER["min_age_preference"]
    max_age_preference: int = DEFAULT_SEEKER["max_age_preference"]
    gender_preference: str = DEFAULT_SEEKER["gender_preference"]
    wants: frozenset[str] = field(default_factory=lambda: DEFAULT_SEEKER["wants"])
    profile_id: int | None = None

    @classmethod
    def defaults(cls, latitude: float | None = None, longitude: float | None = None) -> Seeker:
        settings = get_settings()
        return cls(
            latitude=settings.default_latitude if latitude is None else latitude,
            longitude=settings.default_longitude if longitude is None else longitude,
        )

    @classmethod
    def from_profile(cls, profile: Profile) -> Seeker:
        """Build criteria from a stored profile, defaulting any field it lacks."""
        settings = get_settings()
        has_coordinates = profile.has_coordinates

        def pick(value, default):
            return default if value is None else value

        return cls(
            profile_id=profile.id,
            latitude=profile.latitude if has_coordinates else settings.default_latitude,
            longitude=profile.longitude if has_coordinates else settings.default_longitude,
            age=pick(profile.age, DEFAULT_SEEKER["age"]),
            gender=pick(profile.gender, DEFAULT_SEEKER["gender"]),
            max_distance_km=pick(profile.max_distance_km, DEFAULT_SEEKER["max_distance_km"]),
            min_age_preference=pick(profile.min_age_preference, DEFAULT_SEEKER["min_age_preference"]),
            max_age_preference=pick(profile.max_age_preference, DEFAULT_SEEKER["max_age_preference"]),
            gender_preference=pick(profile.gender_preference, ALL_GENDERS),
            wants=profile.wants,
        )

    @property
    def accepted_by_preference(self) -> str:
        return GENDER_TO_PREFERENCE.get(self.gender, ALL_GENDERS)


@dataclass(frozen=True)
class RankedCandidate:
    profile: Profile
    distance_km: float


def _within(value: int, low: int | None, high: int | None) -> bool:
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def distance_to(seeker: Seeker, candidate: Profile) -> float | None:
    if not candidate.has_coordinates:
        return None
    return haversine_km(seeker.latitude, seeker.longitude, candidate.latitude, candidate.longitude)


def ages_compatible(seeker: Seeker, candidate: Profile) -> bool:
    return _within(candidate.age, seeker.min_age_preference, seeker.max_age_preference) and _within(
        seeker.age, candidate.min_age_preference, candidate.max_age_preference
    )


def genders_compatible(seeker: Seeker, candidate: Profile) -> bool:
    required = PREFERENCE_TO_GENDER.get(seeker.gender_preference)
    if required is not None and candidate.gender != required:
        return False
    candidate_pref = candidate.gender_preference or ALL_GENDERS
    return candidate_pref == ALL_GENDERS or candidate_pref == seeker.accepted_by_preference


def distance_compatible(seeker: Seeker, candidate: Profile, distance_km: float) -> bool:
    if seeker.max_distance_km is not None and distance_km > seeker.max_distance_km:
        return False
    if candidate.max_distance_km is not None and distance_km > candidate.max_distance_km:
        return False
    return True


def activities_compatible(seeker: Seeker, candidate: Profile) -> bool:
    if not seeker.wants:
        return True
    return bool(candidate.does & seeker.wants) and bool(candidate.wants & seeker.wants)


def passes_filters(seeker: Seeker, candidate: Profile, excluded_ids: Iterable[int] = ()) -> float | None:
    """Distance to the candidate when every stage passes, otherwise None."""
    if seeker.profile_id is not None and candidate.id == seeker.profile_id:
        return None
    if candidate.id in excluded_ids:
        return None
    if not ages_compatible(seeker, candidate):
        return None
    if not genders_compatible(seeker, candidate):
        return None
    distance = distance_to(seeker, candidate)
    if distance is None or not distance_compatible(seeker, candidate, distance):
        return None
    if not activities_compatible(seeker, candidate):
        return None
    return distance


def _created_sort_value(profile: Profile) -> float:
    return profile.created_at.timestamp() if profile.created_at is not None else 0.0


def rank_candidates(
    seeker: Seeker,
    candidates: Iterable[Profile],
    excluded_ids: Iterable[int] = (),
    limit: int = STACK_LIMIT,
) -> list[RankedCandidate]:
    """Filter, order by distance (newest first on ties), and cap."""
    excluded = set(excluded_ids)
    ranked = []
    for candidate in candidates:
        distance = passes_filters(seeker, candidate, excluded)
        if distance is not None:
            ranked.append(RankedCandidate(profile=candidate, distance_km=distance))
    ranked.sort(key=lambda r: (r.distance_km, -_created_sort_value(r.profile)))
    return ranked[: max(limit, 0)]


def _candidate_query(seeker: Seeker, excluded_ids: set[int]):
    stmt = select(Profile).where(
        Profile.latitude.is_not(None),
        Profile.longitude.is_not(None),
        Profile.age >= seeker.min_age_preference,
        Profile.age <= seeker.max_age_preference,
        Profile.min_age_preference <= seeker.age,
        Profile.max_age_preference >= seeker.age,
    )
    if seeker.profile_id is not None:
        stmt = stmt.where(Profile.id != seeker.profile_id)
    if excluded_ids:
        stmt = stmt.where(Profile.id.not_in(sorted(excluded_ids)))
    required_gender = PREFERENCE_TO_GENDER.get(seeker.gender_preference)
    if required_gender is not None:
        stmt = stmt.where(Profile.gender == required_gender)
    return stmt


async def rank_for(db: AsyncSession, requester: Profile | None, limit: int | None = None) -> list[RankedCandidate]:
    """Run the full pipeline against the store for a requester (or defaults)."""
    if limit is None:
        limit = get_settings().stack_limit

    if requester is None:
        seeker = Seeker.defaults()
        excluded: set[int] = set()
    else:
        seeker = Seeker.from_profile(requester)
        excluded = await ledger.passed_ids(db, requester.id)

    result = await db.execute(_candidate_query(seeker, excluded))
    candidates = result.scalars().all()
    ranked = rank_candidates(seeker, candidates, excluded, limit)

    logger.info(
        "Stack for profile=%s: %d in pool, %d ranked, %d passed earlier",
        seeker.profile_id,
        len(candidates),
        len(ranked),
        len(excluded),
    )
    return ranked


async def compute_stack(db: AsyncSession, requester: Profile | None, limit: int | None = None) -> list[dict]:
    """Ranked candidate cards for the requester."""
    ranked = await rank_for(db, requester, limit)
    return [profile_store.to_candidate_view(r.profile) for r in ranked]
