# models/match.py
from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, IntegerPrimaryKey, TimestampMixin


class Match(Base, IntegerPrimaryKey, TimestampMixin):
    __tablename__ = "matches"

    # Stored as an ordered pair so (A, B) and (B, A) share one row.
    profile_a_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    profile_b_id: Mapped[int] = mapped_column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        UniqueConstraint("profile_a_id", "profile_b_id", name="uq_matches_pair"),
        CheckConstraint("profile_a_id < profile_b_id", name="ck_matches_order"),
    )
