# scripts/seed_profiles.py
"""
Seed demo climbers around Boulder, CO.
Run: python scripts/seed_profiles.py
"""
from __future__ import annotations

import asyncio
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from db.session import session_scope
from models.profile import Profile
from services import profile_store
from services.id_codec import id_to_token

SEED_CLIMBERS = [
    {
        "device_id": "seed-device-alex",
        "name": "Alex", "age": 28, "gender": "man", "gender_preference": "all genders",
        "bio": "Love crimpy boulder problems and long sport routes!",
        "skill_level": "Advanced", "location": "Boulder, CO",
        "latitude": 40.0150, "longitude": -105.2705,
        "availability": "Weekends", "favorite_crag": "Flatirons",
        "does_sport": True, "does_bouldering": True, "does_outdoor": True,
        "wants_sport": True, "wants_outdoor": True,
        "min_age_preference": 22, "max_age_preference": 40, "max_distance_km": 60,
    },
    {
        "device_id": "seed-device-jamie",
        "name": "Jamie", "age": 31, "gender": "woman", "gender_preference": "all genders",
        "bio": "Trad leader looking for a reliable belayer.",
        "skill_level": "Expert", "location": "Eldorado Springs, CO",
        "latitude": 39.9317, "longitude": -105.2783,
        "availability": "Weekday mornings", "favorite_crag": "Eldorado Canyon",
        "does_trad": True, "does_outdoor": True,
        "wants_trad": True, "wants_outdoor": True,
        "min_age_preference": 25, "max_age_preference": 45, "max_distance_km": 40,
    },
    {
        "device_id": "seed-device-sam",
        "name": "Sam", "age": 24, "gender": "non-binary", "gender_preference": "all genders",
        "bio": "Gym rat, learning to lead outside.",
        "skill_level": "Intermediate", "location": "Longmont, CO",
        "latitude": 40.1672, "longitude": -105.1019,
        "availability": "Evenings",
        "does_indoor": True, "does_bouldering": True, "does_sport": True,
        "wants_bouldering": True, "wants_sport": True, "wants_indoor": True,
        "min_age_preference": 20, "max_age_preference": 35, "max_distance_km": None,
    },
    {
        "device_id": "seed-device-riley",
        "name": "Riley", "age": 36, "gender": "woman", "gender_preference": "men",
        "bio": "Sport climbing trips most weekends.",
        "skill_level": "Advanced", "location": "Golden, CO",
        "latitude": 39.7555, "longitude": -105.2211,
        "availability": "Flexible", "favorite_crag": "Clear Creek Canyon",
        "does_sport": True, "does_outdoor": True,
        "wants_sport": True, "wants_outdoor": True,
        "min_age_preference": 28, "max_age_preference": 45, "max_distance_km": 50,
    },
    {
        "device_id": "seed-device-casey",
        "name": "Casey", "age": 27, "gender": "man", "gender_preference": "women",
        "bio": "New to trad, happy to second.",
        "skill_level": "Beginner", "location": "Lyons, CO",
        "latitude": 40.2247, "longitude": -105.2714,
        "does_trad": True, "does_sport": True, "does_outdoor": True,
        "wants_trad": True, "wants_outdoor": True,
        "min_age_preference": 21, "max_age_preference": 38, "max_distance_km": 30,
    },
]


async def seed():
    async with session_scope() as db:
        for climber in SEED_CLIMBERS:
            device_id = climber["device_id"]
            existing = await profile_store.get_by_device(db, device_id)
            if existing:
                print(f"Seed climber already exists: {existing.name} ({id_to_token(existing.id)})")
                continue
            profile = Profile(onboarded=True, **climber)
            db.add(profile)
            await db.flush()
            print(f"Created climber: {profile.name} ({id_to_token(profile.id)}, device {device_id})")

    print("✅ Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
