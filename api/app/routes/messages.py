# api/app/routes/messages.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.app.dependencies import get_session
from api.app.schemas.common import ERROR_RESPONSES
from api.app.schemas.message import (
    ConversationResponse,
    ConversationsResponse,
    ConversationSummaryResponse,
    MarkReadRequest,
    MarkReadResponse,
    MessageResponse,
    SendMessageRequest,
)
from services import messages
from services.profile_store import DEFAULT_PROFILE_IMAGE

router = APIRouter(prefix="/messages", tags=["messages"], responses=ERROR_RESPONSES)


@router.post("", response_model=MessageResponse)
async def send_message(
    body: SendMessageRequest,
    db: AsyncSession = Depends(get_session),
):
    message = await messages.send_message(db, body.sender_device_id, body.recipient_device_id, body.content)
    return MessageResponse.model_validate(message)


@router.get("/conversation", response_model=ConversationResponse)
async def get_conversation(
    device_id_1: str = Query(..., alias="deviceId1", min_length=1),
    device_id_2: str = Query(..., alias="deviceId2", min_length=1),
    db: AsyncSession = Depends(get_session),
):
    """Messages between two devices; deviceId1 is treated as the current user."""
    conversation = await messages.get_conversation(db, device_id_1, device_id_2)
    return ConversationResponse(
        messages=[MessageResponse.model_validate(m) for m in conversation.messages],
        currentUserId=conversation.current.id,
        otherUserId=conversation.other.id,
    )


@router.get("/conversations/{device_id}", response_model=ConversationsResponse)
async def list_conversations(
    device_id: str,
    db: AsyncSession = Depends(get_session),
):
    summaries = await messages.list_conversations(db, device_id)
    return ConversationsResponse(
        conversations=[
            ConversationSummaryResponse(
                other_user_id=s.other.id,
                other_user_device_id=s.other.device_id,
                other_user_name=s.other.name or "Unknown",
                other_user_image=s.other.profile_image_name or DEFAULT_PROFILE_IMAGE,
                last_message=MessageResponse.model_validate(s.last_message),
                unread_count=s.unread_count,
                last_message_at=s.last_message.created_at,
            )
            for s in summaries
        ]
    )


@router.post("/read", response_model=MarkReadResponse)
async def mark_read(
    body: MarkReadRequest,
    db: AsyncSession = Depends(get_session),
):
    count = await messages.mark_read(db, body.device_id, body.other_device_id)
    return MarkReadResponse(count=count)
