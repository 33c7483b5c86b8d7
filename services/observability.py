# services/observability.py
"""
Structured event logging to the events table.

Domain changes worth auditing go through log_event so they land both in the
database and in the process log. Event types in use:

    profile_created, profile_updated, swipe_recorded,
    match_created, match_dissolved, message_sent
"""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.event import Event

logger = logging.getLogger(__name__)


async def log_event(
    db: AsyncSession,
    event_type: str,
    level: str = "info",
    source: str | None = "api",
    message: str | None = None,
    metadata: dict | None = None,
) -> Event:
    """Persist a structured event log entry."""
    event = Event(
        event_type=event_type,
        level=level,
        source=source,
        message=message,
        metadata_=metadata,
    )
    db.add(event)
    await db.flush()
    logger.log(
        getattr(logging, level.upper(), logging.INFO),
        "[%s] %s %s",
        event_type,
        message or "",
        metadata or {},
    )
    return event


async def events_of_type(db: AsyncSession, event_type: str, limit: int = 100) -> list[Event]:
    """Most recent events of one type, newest first."""
    stmt = (
        select(Event)
        .where(Event.event_type == event_type)
        .order_by(Event.created_at.desc(), Event.id.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
