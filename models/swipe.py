# models/swipe.py
from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, IntegerPrimaryKey, TimestampMixin

SWIPE_ACTIONS = ("like", "pass")


class Swipe(Base, IntegerPrimaryKey, TimestampMixin):
    __tablename__ = "swipes"

    swiper_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    swiped_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    action: Mapped[str] = mapped_column(String(8), nullable=False)  # like | pass

    __table_args__ = (
        UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_pair"),
        CheckConstraint("swiper_id != swiped_id", name="ck_swipes_no_self"),
        CheckConstraint("action IN ('like', 'pass')", name="ck_swipes_action"),
        Index("ix_swipes_swiper_action", "swiper_id", "action"),
    )
