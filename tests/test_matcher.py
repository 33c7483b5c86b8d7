# tests/test_matcher.py
"""
Tests for the candidate filter and ranking pipeline.

These run the pure functions on unsaved Profile rows; the database-backed
path is covered in test_stack_service.py.
"""
from __future__ import annotations

import random
from datetime import timedelta

import pytest

from conftest import BOULDER, EPOCH
from services.geo import haversine_km
from services.matcher import (
    STACK_LIMIT,
    Seeker,
    activities_compatible,
    genders_compatible,
    passes_filters,
    rank_candidates,
)


@pytest.fixture
def seeker() -> Seeker:
    return Seeker(
        profile_id=1,
        latitude=BOULDER[0],
        longitude=BOULDER[1],
        age=28,
        gender="man",
        max_distance_km=50,
        min_age_preference=24,
        max_age_preference=40,
        gender_preference="all genders",
        wants=frozenset({"sport", "bouldering", "outdoor"}),
    )


def test_compatible_candidate_passes(seeker, make_profile):
    candidate = make_profile()
    assert passes_filters(seeker, candidate) is not None


def test_self_excluded(seeker, make_profile):
    me = make_profile(id=1)
    assert passes_filters(seeker, me) is None


def test_excluded_ids(seeker, make_profile):
    candidate = make_profile(id=7)
    assert passes_filters(seeker, candidate, {7}) is None


@pytest.mark.parametrize("age,ok", [(23, False), (24, True), (40, True), (41, False)])
def test_candidate_age_window_inclusive(seeker, make_profile, age, ok):
    assert (passes_filters(seeker, make_profile(age=age)) is not None) is ok


@pytest.mark.parametrize("low,high,ok", [(29, 40, False), (18, 27, False), (28, 28, True), (20, 28, True)])
def test_reciprocal_age_window(seeker, make_profile, low, high, ok):
    candidate = make_profile(min_age_preference=low, max_age_preference=high)
    assert (passes_filters(seeker, candidate) is not None) is ok


@pytest.mark.parametrize(
    "preference,gender,ok",
    [
        ("men", "man", True),
        ("men", "woman", False),
        ("women", "woman", True),
        ("women", "non-binary", False),
        ("all genders", "non-binary", True),
        ("all genders", "prefer not to say", True),
    ],
)
def test_requester_gender_preference(seeker, make_profile, preference, gender, ok):
    s = Seeker(**{**seeker.__dict__, "gender_preference": preference})
    assert genders_compatible(s, make_profile(gender=gender)) is ok


@pytest.mark.parametrize(
    "requester_gender,candidate_pref,ok",
    [
        ("man", "men", True),
        ("man", "women", False),
        ("woman", "women", True),
        ("woman", "men", False),
        ("non-binary", "all genders", True),
        ("non-binary", "men", False),
        ("prefer not to say", "women", False),
        ("man", "all genders", True),
    ],
)
def test_candidate_gender_preference(seeker, make_profile, requester_gender, candidate_pref, ok):
    s = Seeker(**{**seeker.__dict__, "gender": requester_gender})
    assert genders_compatible(s, make_profile(gender_preference=candidate_pref)) is ok


def test_missing_candidate_coordinates_dropped(seeker, make_profile):
    assert passes_filters(seeker, make_profile(latitude=None)) is None
    assert passes_filters(seeker, make_profile(longitude=None)) is None


def test_requester_distance_limit(seeker, make_profile):
    near = make_profile(latitude=BOULDER[0] + 0.4)  # ~44 km
    far = make_profile(latitude=BOULDER[0] + 0.5)  # ~56 km
    assert passes_filters(seeker, near) is not None
    assert passes_filters(seeker, far) is None


def test_candidate_distance_limit(seeker, make_profile):
    candidate = make_profile(latitude=BOULDER[0] + 0.3, max_distance_km=20)  # ~33 km
    assert passes_filters(seeker, candidate) is None


def test_candidate_without_distance_limit_is_unbounded(seeker, make_profile):
    candidate = make_profile(latitude=BOULDER[0] + 0.4, max_distance_km=None)
    assert passes_filters(seeker, candidate) is not None


def test_candidate_zero_distance_limit_is_a_real_limit(seeker, make_profile):
    candidate = make_profile(latitude=BOULDER[0] + 0.01, max_distance_km=0)
    assert passes_filters(seeker, candidate) is None


def test_requester_without_distance_limit(seeker, make_profile):
    s = Seeker(**{**seeker.__dict__, "max_distance_km": None})
    candidate = make_profile(latitude=BOULDER[0] + 3, max_distance_km=None)
    assert passes_filters(s, candidate) is not None


def test_activity_candidate_must_do_a_wanted_type(seeker, make_profile):
    candidate = make_profile(does_sport=False, does_bouldering=False, does_trad=True, wants_sport=True)
    assert not activities_compatible(seeker, candidate)


def test_activity_candidate_must_want_a_type_the_requester_wants(seeker, make_profile):
    # Does sport, but only wants trad partners: no overlap with requester wants.
    candidate = make_profile(
        does_sport=True,
        wants_sport=False,
        wants_bouldering=False,
        wants_trad=True,
    )
    assert not activities_compatible(seeker, candidate)


def test_activity_reciprocity_compares_wants_with_wants(seeker, make_profile):
    # Candidate wants outdoor; requester wants outdoor. What the requester does is irrelevant.
    candidate = make_profile(
        does_sport=True,
        does_bouldering=False,
        wants_sport=False,
        wants_bouldering=False,
        wants_outdoor=True,
    )
    assert activities_compatible(seeker, candidate)


def test_no_wants_skips_activity_filter(seeker, make_profile):
    s = Seeker(**{**seeker.__dict__, "wants": frozenset()})
    candidate = make_profile(
        does_sport=False, does_bouldering=False, wants_sport=False, wants_bouldering=False
    )
    assert activities_compatible(s, candidate)
    assert passes_filters(s, candidate) is not None


def test_ranked_by_distance(seeker, make_profile):
    far = make_profile(latitude=BOULDER[0] + 0.3)
    near = make_profile(latitude=BOULDER[0] + 0.1)
    mid = make_profile(latitude=BOULDER[0] + 0.2)
    ranked = rank_candidates(seeker, [far, near, mid])
    assert [r.profile for r in ranked] == [near, mid, far]


def test_equal_distance_newest_first(seeker, make_profile):
    older = make_profile(created_at=EPOCH)
    newer = make_profile(created_at=EPOCH + timedelta(days=1))
    ranked = rank_candidates(seeker, [older, newer])
    assert [r.profile for r in ranked] == [newer, older]


def test_result_capped(seeker, make_profile):
    pool = [make_profile() for _ in range(STACK_LIMIT + 20)]
    assert len(rank_candidates(seeker, pool)) == STACK_LIMIT
    assert len(rank_candidates(seeker, pool, limit=5)) == 5


def test_boulder_scenario(make_profile):
    # Candidate A is ~54 km north of downtown Boulder.
    a = make_profile(
        latitude=40.5,
        longitude=-105.3,
        age=30,
        does_sport=True,
        wants_outdoor=True,
        wants_sport=False,
        wants_bouldering=False,
    )
    farther = make_profile(latitude=40.6, longitude=-105.3)
    distance = haversine_km(40.0150, -105.2705, 40.5, -105.3)
    assert 53 < distance < 55

    def seeker_with(max_km):
        return Seeker(
            profile_id=1,
            latitude=40.0150,
            longitude=-105.2705,
            age=28,
            max_distance_km=max_km,
            wants=frozenset({"sport", "bouldering", "outdoor"}),
        )

    ranked = rank_candidates(seeker_with(80), [farther, a])
    assert [r.profile for r in ranked] == [a, farther]
    assert ranked[0].distance_km == pytest.approx(distance)

    # At a 50 km limit A is out of range.
    assert rank_candidates(seeker_with(50), [a]) == []


def test_invariants_over_random_pool(seeker, make_profile):
    rng = random.Random(7)
    pool = []
    for _ in range(400):
        low = rng.randint(18, 40)
        pool.append(
            make_profile(
                age=rng.randint(18, 60),
                gender=rng.choice(["man", "woman", "non-binary", "prefer not to say"]),
                gender_preference=rng.choice(["men", "women", "all genders"]),
                min_age_preference=low,
                max_age_preference=rng.randint(low, 65),
                latitude=BOULDER[0] + rng.uniform(-0.6, 0.6),
                longitude=BOULDER[1] + rng.uniform(-0.6, 0.6),
                max_distance_km=rng.choice([None, 10, 25, 50, 100]),
                created_at=EPOCH + timedelta(hours=rng.randint(0, 5)),
                does_sport=rng.random() < 0.5,
                does_outdoor=rng.random() < 0.5,
                wants_bouldering=rng.random() < 0.5,
                wants_trad=rng.random() < 0.5,
            )
        )

    ranked = rank_candidates(seeker, pool)
    assert len(ranked) <= STACK_LIMIT
    assert ranked, "random pool should produce some matches"

    for r in ranked:
        c = r.profile
        assert c.id != seeker.profile_id
        assert r.distance_km <= seeker.max_distance_km
        assert c.max_distance_km is None or r.distance_km <= c.max_distance_km
        assert seeker.min_age_preference <= c.age <= seeker.max_age_preference
        assert c.min_age_preference <= seeker.age <= c.max_age_preference

    for prev, cur in zip(ranked, ranked[1:]):
        assert prev.distance_km <= cur.distance_km
        if prev.distance_km == cur.distance_km:
            assert prev.profile.created_at >= cur.profile.created_at


def test_seeker_from_profile_defaults_missing_fields(make_profile):
    profile = make_profile(id=5, latitude=None, longitude=None, max_distance_km=None)
    s = Seeker.from_profile(profile)
    assert s.profile_id == 5
    assert (s.latitude, s.longitude) == (40.014986, -105.270546)
    assert s.max_distance_km == 50
    assert s.wants == frozenset({"sport", "bouldering"})


def test_requester_without_stored_distance_uses_default_cap(make_profile):
    me = make_profile(id=5, latitude=BOULDER[0], longitude=BOULDER[1], max_distance_km=None)
    near = make_profile(latitude=BOULDER[0] + 0.1, max_distance_km=None)
    far = make_profile(latitude=34.05, longitude=-118.24, max_distance_km=None)  # Los Angeles

    ranked = rank_candidates(Seeker.from_profile(me), [far, near])
    assert [r.profile for r in ranked] == [near]


def test_seeker_defaults():
    s = Seeker.defaults()
    assert s.profile_id is None
    assert s.age == 28
    assert s.gender == "man"
    assert s.max_distance_km == 50
    assert (s.min_age_preference, s.max_age_preference) == (24, 40)
    assert s.gender_preference == "all genders"
    assert s.wants == frozenset({"sport", "bouldering", "outdoor"})
