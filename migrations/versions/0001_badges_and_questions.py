"""badges, user_badges and questions

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

The default badge catalog is inserted by the application on startup
(app/services/catalog.py: seed_default_badges), not here.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    badge_rarity_enum = sa.Enum(
        "common", "uncommon", "rare", "epic", "legendary",
        name="badge_rarity_enum",
    )
    badge_rarity_enum.create(op.get_bind(), checkfirst=True)

    # --- badges ---
    op.create_table(
        "badges",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_url", sa.String(256), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("rarity", sa.Enum(
            "common", "uncommon", "rare", "epic", "legendary",
            name="badge_rarity_enum", create_type=False,
        ), nullable=False),
        sa.Column("unlock_criteria", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_badges_name"),
    )
    op.create_index("ix_badges_id", "badges", ["id"])
    op.create_index("ix_badges_category", "badges", ["category"])

    # --- user_badges ---
    op.create_table(
        "user_badges",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("badge_id", sa.Integer(), nullable=False),
        sa.Column("earned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("favorite", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(["badge_id"], ["badges.id"], name="fk_user_badges_badge_id"),
        sa.PrimaryKeyConstraint("user_id", "badge_id", name="pk_user_badges"),
    )
    op.create_index("ix_user_badges_user_id", "user_badges", ["user_id"])

    # --- questions ---
    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("image_url", sa.String(512), nullable=True),
        sa.Column("audio_url", sa.String(512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_questions_id", "questions", ["id"])
    op.create_index("ix_questions_user_id", "questions", ["user_id"])
    op.create_index("ix_questions_created_at", "questions", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_questions_created_at", table_name="questions")
    op.drop_index("ix_questions_user_id", table_name="questions")
    op.drop_index("ix_questions_id", table_name="questions")
    op.drop_table("questions")

    op.drop_index("ix_user_badges_user_id", table_name="user_badges")
    op.drop_table("user_badges")

    op.drop_index("ix_badges_category", table_name="badges")
    op.drop_index("ix_badges_id", table_name="badges")
    op.drop_table("badges")

    sa.Enum(name="badge_rarity_enum").drop(op.get_bind(), checkfirst=True)
