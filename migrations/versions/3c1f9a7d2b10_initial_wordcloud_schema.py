"""initial word cloud schema

Revision ID: 3c1f9a7d2b10
Revises:
Create Date: 2026-10-18 09:12:40.512377

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create sessions, entries, aggregate, quota and ordering tables."""
    op.create_table(
        "wordcloud_session",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("background_image_url", sa.Text(), nullable=True),
        sa.Column("theme", sa.String(length=64), nullable=False),
        sa.Column("max_entries_per_user", sa.Integer(), nullable=False),
        sa.Column("cooldown_minutes", sa.Integer(), nullable=False),
        sa.Column("time_limit_sec", sa.Integer(), nullable=True),
        sa.Column("grouping_enabled", sa.Boolean(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("created_by", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "wordcloud_entry",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("session_id", sa.String(length=36), nullable=False),
        sa.Column("user_hash", sa.String(length=64), nullable=False),
        sa.Column("word_raw", sa.Text(), nullable=False),
        sa.Column("word_norm", sa.Text(), nullable=False),
        sa.Column("cluster_key", sa.Text(), nullable=False),
        sa.Column("is_blocked", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["session_id"], ["wordcloud_session.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_wordcloud_entry_session_user", "wordcloud_entry", ["session_id", "user_hash"]
    )
    op.create_index(
        "ix_wordcloud_entry_session_cluster", "wordcloud_entry", ["session_id", "cluster_key"]
    )
    op.create_table(
        "wordcloud_summary",
        sa.Column("session_id", sa.String(length=36), nullable=False),
        sa.Column("cluster_key", sa.Text(), nullable=False),
        sa.Column("display_word", sa.Text(), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.Column("color", sa.String(length=16), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["session_id"], ["wordcloud_session.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("session_id", "cluster_key"),
    )
    op.create_table(
        "word_quota",
        sa.Column("session_id", sa.String(length=36), nullable=False),
        sa.Column("user_hash", sa.String(length=64), nullable=False),
        sa.Column("attempts_left", sa.Integer(), nullable=False),
        sa.Column("cooldown_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["session_id"], ["wordcloud_session.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("session_id", "user_hash"),
    )
    op.create_table(
        "session_order",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("session_id", sa.String(length=36), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["session_id"], ["wordcloud_session.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Drop every word cloud table."""
    op.drop_table("session_order")
    op.drop_table("word_quota")
    op.drop_table("wordcloud_summary")
    op.drop_index("ix_wordcloud_entry_session_cluster", table_name="wordcloud_entry")
    op.drop_index("ix_wordcloud_entry_session_user", table_name="wordcloud_entry")
    op.drop_table("wordcloud_entry")
    op.drop_table("wordcloud_session")
