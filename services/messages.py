# services/messages.py
"""
Direct messages between profiles, addressed by device id.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.message import Message
from models.profile import Profile
from services import profile_store
from services.errors import InvalidInputError
from services.observability import log_event

logger = logging.getLogger(__name__)


@dataclass
class Conversation:
    current: Profile
    other: Profile
    messages: list[Message]


@dataclass
class ConversationSummary:
    other: Profile
    last_message: Message
    unread_count: int


def _between(a: int, b: int):
    return or_(
        and_(Message.sender_id == a, Message.recipient_id == b),
        and_(Message.sender_id == b, Message.recipient_id == a),
    )


async def send_message(db: AsyncSession, sender_device_id: str, recipient_device_id: str, content: str) -> Message:
    text = (content or "").strip()
    if not sender_device_id or not recipient_device_id or not text:
        raise InvalidInputError("senderDeviceId, recipientDeviceId, and content are required")

    sender = await profile_store.require_by_device(db, sender_device_id)
    recipient = await profile_store.require_by_device(db, recipient_device_id)

    message = Message(sender_id=sender.id, recipient_id=recipient.id, content=text, is_read=False)
    db.add(message)
    await db.flush()

    await log_event(db, "message_sent", "info", metadata={
        "message_id": message.id,
        "sender_id": sender.id,
        "recipient_id": recipient.id,
    })
    return message


async def get_conversation(db: AsyncSession, device_id: str, other_device_id: str) -> Conversation:
    """All messages between two profiles, oldest first."""
    current = await profile_store.require_by_device(db, device_id)
    other = await profile_store.require_by_device(db, other_device_id)

    stmt = (
        select(Message)
        .where(_between(current.id, other.id))
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    result = await db.execute(stmt)
    return Conversation(current=current, other=other, messages=list(result.scalars().all()))


async def list_conversations(db: AsyncSession, device_id: str) -> list[ConversationSummary]:
    """One summary per counterpart, most recent conversation first."""
    me = await profile_store.require_by_device(db, device_id)

    stmt = (
        select(Message)
        .where(or_(Message.sender_id == me.id, Message.recipient_id == me.id))
        .order_by(Message.created_at.desc(), Message.id.desc())
    )
    result = await db.execute(stmt)

    latest: dict[int, Message] = {}
    unread: dict[int, int] = {}
    for message in result.scalars():
        other_id = message.recipient_id if message.sender_id == me.id else message.sender_id
        # Rows arrive newest first, so the first one seen per counterpart is the latest.
        latest.setdefault(other_id, message)
        if message.recipient_id == me.id and not message.is_read:
            unread[other_id] = unread.get(other_id, 0) + 1

    if not latest:
        return []

    profiles = await db.execute(select(Profile).where(Profile.id.in_(list(latest))))
    by_id = {p.id: p for p in profiles.scalars()}

    summaries = [
        ConversationSummary(other=by_id[other_id], last_message=message, unread_count=unread.get(other_id, 0))
        for other_id, message in latest.items()
        if other_id in by_id
    ]
    summaries.sort(key=lambda s: (s.last_message.created_at, s.last_message.id), reverse=True)
    return summaries


async def mark_read(db: AsyncSession, device_id: str, other_device_id: str) -> int:
    """Mark messages from the other profile to the caller as read; returns how many changed."""
    me = await profile_store.require_by_device(db, device_id)
    other = await profile_store.require_by_device(db, other_device_id)

    stmt = select(Message).where(
        Message.sender_id == other.id,
        Message.recipient_id == me.id,
        Message.is_read.is_(False),
    )
    result = await db.execute(stmt)
    unread = list(result.scalars().all())
    for message in unread:
        message.is_read = True
    await db.flush()
    count = len(unread)

    logger.info("Marked %d messages read for profile %s from %s", count, me.id, other.id)
    return count
