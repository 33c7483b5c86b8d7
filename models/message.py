# models/message.py
from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, IntegerPrimaryKey, TimestampMixin


class Message(Base, IntegerPrimaryKey, TimestampMixin):
    __tablename__ = "messages"

    sender_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    recipient_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_messages_pair", "sender_id", "recipient_id"),
        Index("ix_messages_recipient_unread", "recipient_id", "is_read"),
    )
