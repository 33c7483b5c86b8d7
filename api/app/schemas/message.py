# api/app/schemas/message.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from api.app.schemas.common import CamelModel


class SendMessageRequest(CamelModel):
    sender_device_id: str = Field(..., min_length=1)
    recipient_device_id: str = Field(..., min_length=1)
    content: str = Field(..., max_length=4000)

    @field_validator("content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("content must not be empty")
        return value


class MessageResponse(BaseModel):
    id: int
    sender_id: int
    recipient_id: int
    content: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ConversationResponse(BaseModel):
    messages: list[MessageResponse]
    currentUserId: int
    otherUserId: int


class ConversationSummaryResponse(BaseModel):
    other_user_id: int
    other_user_device_id: str | None = None
    other_user_name: str
    other_user_image: str
    last_message: MessageResponse
    unread_count: int
    last_message_at: datetime


class ConversationsResponse(BaseModel):
    conversations: list[ConversationSummaryResponse]


class MarkReadRequest(CamelModel):
    device_id: str = Field(..., min_length=1)
    other_device_id: str = Field(..., min_length=1)


class MarkReadResponse(BaseModel):
    count: int
