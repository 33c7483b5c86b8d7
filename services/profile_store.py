# services/profile_store.py
"""
Profile store: device-keyed get-or-create, field-level updates, and
resolution of public profile ids back to rows.
"""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.upsert import insert_for
from models.profile import ACTIVITY_LABELS, ACTIVITY_TYPES, PLACEHOLDER_PROFILE, Profile
from services.errors import InvalidInputError, ProfileNotFoundError
from services.id_codec import id_to_token, is_token, token_to_id
from services.observability import log_event

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_IMAGE = "person.circle.fill"

# Everything a client may overwrite. id, device_id and timestamps are not here.
MUTABLE_FIELDS = (
    "name",
    "age",
    "gender",
    "bio",
    "skill_level",
    "location",
    "latitude",
    "longitude",
    "profile_image_name",
    "availability",
    "favorite_crag",
    "gender_preference",
    "min_age_preference",
    "max_age_preference",
    "max_distance_km",
    *(f"does_{t}" for t in ACTIVITY_TYPES),
    *(f"wants_{t}" for t in ACTIVITY_TYPES),
)


async def get_by_device(db: AsyncSession, device_id: str) -> Profile | None:
    stmt = select(Profile).where(Profile.device_id == device_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_by_id(db: AsyncSession, profile_id: int) -> Profile | None:
    return await db.get(Profile, profile_id)


async def require_by_device(db: AsyncSession, device_id: str) -> Profile:
    profile = await get_by_device(db, device_id)
    if profile is None:
        raise ProfileNotFoundError(device_id)
    return profile


async def get_or_create(db: AsyncSession, device_id: str) -> Profile:
    """Return the profile for a device, creating a placeholder on first contact."""
    device_id = (device_id or "").strip()
    if not device_id:
        raise InvalidInputError("deviceId is required")

    profile = await get_by_device(db, device_id)
    if profile is not None:
        return profile

    # A concurrent first request may already have inserted this device.
    stmt = (
        insert_for(db)(Profile)
        .values(device_id=device_id, onboarded=False, **PLACEHOLDER_PROFILE)
        .on_conflict_do_nothing(index_elements=["device_id"])
    )
    created = (await db.execute(stmt)).rowcount == 1
    profile = await require_by_device(db, device_id)

    if created:
        await log_event(db, "profile_created", "info", metadata={
            "profile_id": profile.id,
            "device_id": device_id,
        })
    return profile


async def update(db: AsyncSession, device_id: str, patch: dict) -> Profile:
    """
    Overwrite the mutable fields present in the patch.

    Keys outside MUTABLE_FIELDS are ignored and fields absent from the patch
    keep their stored value. An explicit None clears a nullable field
    and resets a non-nullable one to its default. Validation of ranges and
    enums belongs to the request schema.
    """
    profile = await get_or_create(db, device_id)

    for field in MUTABLE_FIELDS:
        if field not in patch:
            continue
        value = patch[field]
        if value is None and field in _NON_NULLABLE:
            value = _NON_NULLABLE[field]
        setattr(profile, field, value)

    if profile.min_age_preference > profile.max_age_preference:
        raise InvalidInputError("minAgePreference must not exceed maxAgePreference")

    profile.onboarded = True
    await db.flush()

    await log_event(db, "profile_updated", "info", metadata={
        "profile_id": profile.id,
        "fields": sorted(k for k in patch if k in MUTABLE_FIELDS),
    })
    return profile


async def token_lookup(db: AsyncSession, token: str) -> int:
    """Resolve a public profile id to the internal key of an existing profile."""
    profile_id = token_to_id(token)
    if await get_by_id(db, profile_id) is None:
        raise ProfileNotFoundError(token)
    return profile_id


async def resolve_reference(db: AsyncSession, reference: str) -> Profile:
    """
    Resolve a profile reference sent by a client: a public profile id or,
    failing that, a device id.
    """
    reference = (reference or "").strip()
    if is_token(reference):
        profile = await get_by_id(db, token_to_id(reference))
    else:
        profile = await get_by_device(db, reference)
    if profile is None:
        raise ProfileNotFoundError(reference)
    return profile


async def device_id_for_token(db: AsyncSession, token: str) -> str:
    profile = await get_by_id(db, await token_lookup(db, token))
    return profile.device_id


def public_id(profile: Profile) -> str:
    return id_to_token(profile.id)


def preferred_types(profile: Profile) -> list[str]:
    return [ACTIVITY_LABELS[t] for t in ACTIVITY_TYPES if getattr(profile, f"does_{t}")]


def to_candidate_view(profile: Profile) -> dict:
    """Public card shape used by the stack and match lists."""
    return {
        "id": public_id(profile),
        "name": profile.name,
        "age": profile.age,
        "bio": profile.bio or "",
        "skillLevel": profile.skill_level or "Intermediate",
        "preferredTypes": preferred_types(profile),
        "location": profile.location or "Unknown",
        "profileImageName": profile.profile_image_name or DEFAULT_PROFILE_IMAGE,
        "availability": profile.availability or "Flexible",
        "favoriteCrag": profile.favorite_crag or None,
    }


# Columns that cannot hold NULL fall back to these when a patch omits them.
_NON_NULLABLE = {
    "name": PLACEHOLDER_PROFILE["name"],
    "age": PLACEHOLDER_PROFILE["age"],
    "gender": "prefer not to say",
    "gender_preference": "all genders",
    "min_age_preference": 18,
    "max_age_preference": 99,
    **{f"does_{t}": False for t in ACTIVITY_TYPES},
    **{f"wants_{t}": False for t in ACTIVITY_TYPES},
}
