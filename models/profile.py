# models/profile.py
from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, IntegerPrimaryKey, TimestampMixin

GENDERS = ("man", "woman", "non-binary", "prefer not to say")
GENDER_PREFERENCES = ("men", "women", "all genders")
SKILL_LEVELS = ("Beginner", "Intermediate", "Advanced", "Expert")

# Order matters: it is the order labels are emitted in.
ACTIVITY_TYPES = ("trad", "sport", "bouldering", "indoor", "outdoor")
ACTIVITY_LABELS = {
    "trad": "Traditional",
    "sport": "Sport Climbing",
    "bouldering": "Bouldering",
    "indoor": "Indoor",
    "outdoor": "Outdoor",
}

PLACEHOLDER_PROFILE = {
    "name": "New Climber",
    "age": 25,
    "gender": "non-binary",
    "bio": "Just getting started...",
    "does_trad": False,
    "does_sport": True,
    "does_bouldering": True,
    "does_indoor": True,
    "does_outdoor": False,
    "min_age_preference": 20,
    "max_age_preference": 40,
    "gender_preference": "all genders",
    "max_distance_km": 50,
}


class Profile(Base, IntegerPrimaryKey, TimestampMixin):
    __tablename__ = "profiles"

    device_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    gender: Mapped[str] = mapped_column(String(32), default="prefer not to say")  # man | woman | non-binary | prefer not to say
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    skill_level: Mapped[str | None] = mapped_column(String(32), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    profile_image_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    availability: Mapped[str | None] = mapped_column(String(255), nullable=True)
    favorite_crag: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Partner preferences
    gender_preference: Mapped[str] = mapped_column(String(32), default="all genders")  # men | women | all genders
    min_age_preference: Mapped[int] = mapped_column(Integer, default=18)
    max_age_preference: Mapped[int] = mapped_column(Integer, default=99)
    max_distance_km: Mapped[float | None] = mapped_column(Float, nullable=True)

    # What the climber does
    does_trad: Mapped[bool] = mapped_column(Boolean, default=False)
    does_sport: Mapped[bool] = mapped_column(Boolean, default=False)
    does_bouldering: Mapped[bool] = mapped_column(Boolean, default=False)
    does_indoor: Mapped[bool] = mapped_column(Boolean, default=False)
    does_outdoor: Mapped[bool] = mapped_column(Boolean, default=False)

    # What the climber is looking for in a partner
    wants_trad: Mapped[bool] = mapped_column(Boolean, default=False)
    wants_sport: Mapped[bool] = mapped_column(Boolean, default=False)
    wants_bouldering: Mapped[bool] = mapped_column(Boolean, default=False)
    wants_indoor: Mapped[bool] = mapped_column(Boolean, default=False)
    wants_outdoor: Mapped[bool] = mapped_column(Boolean, default=False)

    onboarded: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        CheckConstraint("age >= 0", name="ck_profiles_age_non_negative"),
        CheckConstraint("min_age_preference <= max_age_preference", name="ck_profiles_age_window"),
        CheckConstraint("max_distance_km IS NULL OR max_distance_km >= 0", name="ck_profiles_distance"),
    )

    @property
    def does(self) -> frozenset[str]:
        return frozenset(t for t in ACTIVITY_TYPES if getattr(self, f"does_{t}"))

    @property
    def wants(self) -> frozenset[str]:
        return frozenset(t for t in ACTIVITY_TYPES if getattr(self, f"wants_{t}"))

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
