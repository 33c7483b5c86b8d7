# services/ledger.py
"""
Swipe ledger: one current like/pass per (swiper, swiped) pair, plus the
mutual-match state derived from it.

A match between two profiles exists exactly while each has a "like"
recorded against the other. It is created by the like that completes the
pair and removed when either side overwrites its like with a pass.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.upsert import insert_for
from models.base import utcnow
from models.match import Match
from models.profile import Profile
from models.swipe import SWIPE_ACTIONS, Swipe
from services.errors import InvalidInputError, ProfileNotFoundError
from services.observability import log_event

logger = logging.getLogger(__name__)


@dataclass
class SwipeOutcome:
    swipe: Swipe
    match: Match | None = None
    match_created: bool = False


def _ordered(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


async def record_decision(db: AsyncSession, swiper_id: int, swiped_id: int, action: str) -> SwipeOutcome:
    """Upsert the swiper's decision on a candidate and update match state."""
    action = (action or "").strip().lower()
    if action not in SWIPE_ACTIONS:
        raise InvalidInputError(f"action must be one of: {', '.join(SWIPE_ACTIONS)}")
    if swiper_id == swiped_id:
        raise InvalidInputError("A profile cannot swipe on itself")

    for profile_id in (swiper_id, swiped_id):
        if await db.get(Profile, profile_id) is None:
            raise ProfileNotFoundError(profile_id)

    now = utcnow()
    insert = insert_for(db)
    stmt = insert(Swipe).values(
        swiper_id=swiper_id,
        swiped_id=swiped_id,
        action=action,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["swiper_id", "swiped_id"],
        set_={"action": stmt.excluded.action, "updated_at": stmt.excluded.updated_at},
    )
    await db.execute(stmt)

    result = await db.execute(
        select(Swipe)
        .where(Swipe.swiper_id == swiper_id, Swipe.swiped_id == swiped_id)
        .execution_options(populate_existing=True)
    )
    swipe = result.scalar_one()

    await log_event(db, "swipe_recorded", "info", metadata={
        "swiper_id": swiper_id,
        "swiped_id": swiped_id,
        "action": action,
    })

    if action == "like":
        return await _complete_match(db, swipe)
    await _dissolve_match(db, swiper_id, swiped_id)
    return SwipeOutcome(swipe=swipe)


async def _complete_match(db: AsyncSession, swipe: Swipe) -> SwipeOutcome:
    reverse = await db.execute(
        select(Swipe.id).where(
            Swipe.swiper_id == swipe.swiped_id,
            Swipe.swiped_id == swipe.swiper_id,
            Swipe.action == "like",
        )
    )
    if reverse.scalar_one_or_none() is None:
        return SwipeOutcome(swipe=swipe)

    a, b = _ordered(swipe.swiper_id, swipe.swiped_id)
    now = utcnow()
    insert = insert_for(db)
    stmt = (
        insert(Match)
        .values(profile_a_id=a, profile_b_id=b, created_at=now, updated_at=now)
        .on_conflict_do_nothing(index_elements=["profile_a_id", "profile_b_id"])
    )
    created = (await db.execute(stmt)).rowcount == 1

    result = await db.execute(
        select(Match).where(Match.profile_a_id == a, Match.profile_b_id == b)
    )
    match = result.scalar_one()

    if created:
        await log_event(db, "match_created", "info", metadata={
            "match_id": match.id,
            "profile_ids": [a, b],
        })
    return SwipeOutcome(swipe=swipe, match=match, match_created=created)


async def _dissolve_match(db: AsyncSession, swiper_id: int, swiped_id: int) -> None:
    a, b = _ordered(swiper_id, swiped_id)
    result = await db.execute(
        delete(Match).where(Match.profile_a_id == a, Match.profile_b_id == b)
    )
    if result.rowcount:
        await log_event(db, "match_dissolved", "info", metadata={"profile_ids": [a, b]})


async def _ids_with_action(db: AsyncSession, swiper_id: int, action: str) -> set[int]:
    result = await db.execute(
        select(Swipe.swiped_id).where(Swipe.swiper_id == swiper_id, Swipe.action == action)
    )
    return set(result.scalars().all())


async def passed_ids(db: AsyncSession, swiper_id: int) -> set[int]:
    return await _ids_with_action(db, swiper_id, "pass")


async def liked_ids(db: AsyncSession, swiper_id: int) -> set[int]:
    return await _ids_with_action(db, swiper_id, "like")


async def list_matches(db: AsyncSession, profile_id: int) -> list[tuple[Match, Profile]]:
    """Matches involving a profile with the counterpart profile, newest first."""
    stmt = (
        select(Match, Profile)
        .join(
            Profile,
            or_(
                and_(Match.profile_a_id == profile_id, Profile.id == Match.profile_b_id),
                and_(Match.profile_b_id == profile_id, Profile.id == Match.profile_a_id),
            ),
        )
        .order_by(Match.created_at.desc(), Match.id.desc())
    )
    result = await db.execute(stmt)
    return [(match, profile) for match, profile in result.all()]
