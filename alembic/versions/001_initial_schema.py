"""initial schema

Revision ID: 001
Revises:
Create Date: 2025-12-08 00:00:00.000000
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _activity_flags(prefix: str) -> list[sa.Column]:
    return [
        sa.Column(f"{prefix}_{t}", sa.Boolean, server_default=sa.false(), nullable=False)
        for t in ("trad", "sport", "bouldering", "indoor", "outdoor")
    ]


def upgrade() -> None:
    # ── profiles ──
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("device_id", sa.String(255), unique=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("age", sa.Integer, nullable=False),
        sa.Column("gender", sa.String(32), server_default="prefer not to say", nullable=False),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column("skill_level", sa.String(32), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("profile_image_name", sa.String(255), nullable=True),
        sa.Column("availability", sa.String(255), nullable=True),
        sa.Column("favorite_crag", sa.String(255), nullable=True),
        sa.Column("gender_preference", sa.String(32), server_default="all genders", nullable=False),
        sa.Column("min_age_preference", sa.Integer, server_default="18", nullable=False),
        sa.Column("max_age_preference", sa.Integer, server_default="99", nullable=False),
        sa.Column("max_distance_km", sa.Float, nullable=True),
        *_activity_flags("does"),
        *_activity_flags("wants"),
        sa.Column("onboarded", sa.Boolean, server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("age >= 0", name="ck_profiles_age_non_negative"),
        sa.CheckConstraint("min_age_preference <= max_age_preference", name="ck_profiles_age_window"),
        sa.CheckConstraint("max_distance_km IS NULL OR max_distance_km >= 0", name="ck_profiles_distance"),
    )
    op.create_index("ix_profiles_age", "profiles", ["age"])

    # ── swipes ──
    op.create_table(
        "swipes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("swiper_id", sa.Integer, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("swiped_id", sa.Integer, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("action", sa.String(8), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_pair"),
        sa.CheckConstraint("swiper_id != swiped_id", name="ck_swipes_no_self"),
        sa.CheckConstraint("action IN ('like', 'pass')", name="ck_swipes_action"),
    )
    op.create_index("ix_swipes_swiper_action", "swipes", ["swiper_id", "action"])

    # ── matches ──
    op.create_table(
        "matches",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("profile_a_id", sa.Integer, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("profile_b_id", sa.Integer, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("profile_a_id", "profile_b_id", name="uq_matches_pair"),
        sa.CheckConstraint("profile_a_id < profile_b_id", name="ck_matches_order"),
    )

    # ── messages ──
    op.create_table(
        "messages",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("sender_id", sa.Integer, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("recipient_id", sa.Integer, sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("is_read", sa.Boolean, server_default=sa.false(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_messages_pair", "messages", ["sender_id", "recipient_id"])
    op.create_index("ix_messages_recipient_unread", "messages", ["recipient_id", "is_read"])

    # ── events ──
    op.create_table(
        "events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_type", sa.String(128), nullable=False),
        sa.Column("level", sa.String(16), server_default="info"),
        sa.Column("source", sa.String(128), nullable=True),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("metadata", sa.JSON().with_variant(postgresql.JSONB(), "postgresql"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_events_type", "events", ["event_type"])


def downgrade() -> None:
    for table in ["events", "messages", "matches", "swipes", "profiles"]:
        op.drop_table(table)
