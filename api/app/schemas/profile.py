# api/app/schemas/profile.py
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, model_validator

from api.app.schemas.common import CamelModel
from models.profile import ACTIVITY_LABELS, ACTIVITY_TYPES, GENDER_PREFERENCES, GENDERS, SKILL_LEVELS, Profile
from services.profile_store import preferred_types, public_id

Gender = Literal[GENDERS]
GenderPreference = Literal[GENDER_PREFERENCES]
SkillLevel = Literal[SKILL_LEVELS]

_LABEL_TO_TYPE = {label: t for t, label in ACTIVITY_LABELS.items()}


class ProfileResponse(CamelModel):
    id: str
    device_id: str
    name: str
    age: int
    gender: str
    bio: str
    skill_level: str
    preferred_types: list[str]
    location: str
    latitude: float | None = None
    longitude: float | None = None
    profile_image_name: str
    availability: str
    favorite_crag: str | None = None
    gender_preference: str
    min_age_preference: int
    max_age_preference: int
    max_distance_km: float | None = None
    does_trad: bool
    does_sport: bool
    does_bouldering: bool
    does_indoor: bool
    does_outdoor: bool
    wants_trad: bool
    wants_sport: bool
    wants_bouldering: bool
    wants_indoor: bool
    wants_outdoor: bool
    onboarded: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_profile(cls, profile: Profile) -> ProfileResponse:
        return cls(
            id=public_id(profile),
            device_id=profile.device_id,
            name=profile.name,
            age=profile.age,
            gender=profile.gender,
            bio=profile.bio or "",
            skill_level=profile.skill_level or "Intermediate",
            preferred_types=preferred_types(profile),
            location=profile.location or "Unknown",
            latitude=profile.latitude,
            longitude=profile.longitude,
            profile_image_name=profile.profile_image_name or "person.circle.fill",
            availability=profile.availability or "Flexible",
            favorite_crag=profile.favorite_crag,
            gender_preference=profile.gender_preference,
            min_age_preference=profile.min_age_preference,
            max_age_preference=profile.max_age_preference,
            max_distance_km=profile.max_distance_km,
            onboarded=profile.onboarded,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
            **{f"does_{t}": getattr(profile, f"does_{t}") for t in ACTIVITY_TYPES},
            **{f"wants_{t}": getattr(profile, f"wants_{t}") for t in ACTIVITY_TYPES},
        )


class ProfileUpdate(CamelModel):
    """
    Profile edit. Only fields present in the body are written; the mobile
    edit screen sends just the card fields (name, age, bio, skillLevel,
    preferredTypes, location, profileImageName, availability, favoriteCrag).
    """

    name: str = Field(..., min_length=1, max_length=255)
    age: int = Field(..., ge=0, le=130)
    gender: Gender = "prefer not to say"
    bio: str | None = Field(None, max_length=2000)
    skill_level: SkillLevel | None = None
    location: str | None = Field(None, max_length=255)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    profile_image_name: str | None = None
    availability: str | None = None
    favorite_crag: str | None = None

    gender_preference: GenderPreference = "all genders"
    min_age_preference: int = Field(18, ge=0)
    max_age_preference: int = Field(99, ge=0)
    max_distance_km: float | None = Field(None, ge=0)

    # Labels ("Sport Climbing", ...) as shown on cards; overrides does_* when sent.
    preferred_types: list[str] | None = None

    does_trad: bool = False
    does_sport: bool = False
    does_bouldering: bool = False
    does_indoor: bool = False
    does_outdoor: bool = False
    wants_trad: bool = False
    wants_sport: bool = False
    wants_bouldering: bool = False
    wants_indoor: bool = False
    wants_outdoor: bool = False

    @model_validator(mode="after")
    def _check(self) -> ProfileUpdate:
        both_sent = {"min_age_preference", "max_age_preference"} <= self.model_fields_set
        if both_sent and self.min_age_preference > self.max_age_preference:
            raise ValueError("minAgePreference must not exceed maxAgePreference")
        if self.preferred_types is not None:
            unknown = [label for label in self.preferred_types if label not in _LABEL_TO_TYPE]
            if unknown:
                raise ValueError(f"Unknown climbing types: {', '.join(unknown)}")
        return self

    def to_patch(self) -> dict:
        patch = self.model_dump(exclude_unset=True, exclude={"preferred_types"})
        if self.preferred_types is not None:
            chosen = {_LABEL_TO_TYPE[label] for label in self.preferred_types}
            for t in ACTIVITY_TYPES:
                patch[f"does_{t}"] = t in chosen
        return patch


class DeviceIdResponse(CamelModel):
    device_id: str
