# tests/test_messages.py
"""
Tests for direct messages: sending, threads, inbox summaries, read state.
"""
from __future__ import annotations

import pytest
from sqlalchemy import func, select

from models.message import Message
from services import messages
from services.errors import InvalidInputError, ProfileNotFoundError


@pytest.mark.asyncio
async def test_send_trims_content(db, add_profile):
    await add_profile(device_id="a")
    await add_profile(device_id="b")

    message = await messages.send_message(db, "a", "b", "  see you at the crag  ")
    assert message.content == "see you at the crag"
    assert not message.is_read


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   ", None])
async def test_blank_message_rejected(db, add_profile, content):
    await add_profile(device_id="a")
    await add_profile(device_id="b")

    with pytest.raises(InvalidInputError):
        await messages.send_message(db, "a", "b", content)
    count = (await db.execute(select(func.count()).select_from(Message))).scalar_one()
    assert count == 0


@pytest.mark.asyncio
async def test_unknown_recipient(db, add_profile):
    await add_profile(device_id="a")
    with pytest.raises(ProfileNotFoundError):
        await messages.send_message(db, "a", "nobody", "hi")


@pytest.mark.asyncio
async def test_conversation_oldest_first(db, add_profile):
    await add_profile(device_id="a")
    await add_profile(device_id="b")
    await add_profile(device_id="c")

    await messages.send_message(db, "a", "b", "one")
    await messages.send_message(db, "b", "a", "two")
    await messages.send_message(db, "a", "c", "elsewhere")
    await messages.send_message(db, "a", "b", "three")

    conversation = await messages.get_conversation(db, "b", "a")
    assert [m.content for m in conversation.messages] == ["one", "two", "three"]
    assert conversation.current.device_id == "b"
    assert conversation.other.device_id == "a"


@pytest.mark.asyncio
async def test_conversation_summaries(db, add_profile):
    await add_profile(device_id="me")
    await add_profile(device_id="b")
    await add_profile(device_id="c")

    await messages.send_message(db, "b", "me", "hey")
    await messages.send_message(db, "b", "me", "you there?")
    await messages.send_message(db, "me", "c", "climbing saturday?")
    await messages.send_message(db, "c", "me", "yes")

    summaries = await messages.list_conversations(db, "me")
    assert [s.other.device_id for s in summaries] == ["c", "b"]
    assert summaries[0].last_message.content == "yes"
    assert summaries[0].unread_count == 1
    assert summaries[1].last_message.content == "you there?"
    assert summaries[1].unread_count == 2


@pytest.mark.asyncio
async def test_no_conversations(db, add_profile):
    await add_profile(device_id="me")
    assert await messages.list_conversations(db, "me") == []


@pytest.mark.asyncio
async def test_mark_read_is_directional(db, add_profile):
    await add_profile(device_id="a")
    await add_profile(device_id="b")

    await messages.send_message(db, "a", "b", "one")
    await messages.send_message(db, "a", "b", "two")
    await messages.send_message(db, "b", "a", "reply")

    assert await messages.mark_read(db, "b", "a") == 2
    assert await messages.mark_read(db, "b", "a") == 0

    thread = await messages.get_conversation(db, "a", "b")
    read = {m.content: m.is_read for m in thread.messages}
    assert read == {"one": True, "two": True, "reply": False}

    summaries = await messages.list_conversations(db, "a")
    assert summaries[0].unread_count == 1
