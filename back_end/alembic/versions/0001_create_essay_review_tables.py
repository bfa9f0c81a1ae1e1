"""create essay review tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "essays",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author_id", sa.String(length=64), nullable=False),
        sa.Column("author_name", sa.Text(), nullable=False),
        sa.Column("word_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_analyzed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("review_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_essays_author_id", "essays", ["author_id"])
    op.create_index("ix_essays_is_public", "essays", ["is_public"])

    op.create_table(
        "peer_reviews",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("essay_id", sa.String(length=36), sa.ForeignKey("essays.id", ondelete="CASCADE"), nullable=False),
        sa.Column("reviewer_id", sa.String(length=64), nullable=False),
        sa.Column("grammar_score", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("style_score", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("clarity_score", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("structure_score", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("content_score", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("research_score", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("overall_score", sa.Integer(), nullable=False, server_default="600"),
        sa.Column("corrections", sa.JSON(), nullable=False),
        sa.Column("review_comment", sa.Text(), nullable=True),
        sa.Column("is_submitted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_peer_reviews_essay_id", "peer_reviews", ["essay_id"])
    op.create_index("ix_peer_reviews_reviewer_id", "peer_reviews", ["reviewer_id"])

    op.create_table(
        "essay_likes",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("essay_id", sa.String(length=36), sa.ForeignKey("essays.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_essay_likes_essay_id", "essay_likes", ["essay_id"])
    op.create_index("ix_essay_likes_user_id", "essay_likes", ["user_id"])

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False, unique=True),
        sa.Column("display_name", sa.Text(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("user_profiles")
    op.drop_index("ix_essay_likes_user_id", table_name="essay_likes")
    op.drop_index("ix_essay_likes_essay_id", table_name="essay_likes")
    op.drop_table("essay_likes")
    op.drop_index("ix_peer_reviews_reviewer_id", table_name="peer_reviews")
    op.drop_index("ix_peer_reviews_essay_id", table_name="peer_reviews")
    op.drop_table("peer_reviews")
    op.drop_index("ix_essays_is_public", table_name="essays")
    op.drop_index("ix_essays_author_id", table_name="essays")
    op.drop_table("essays")
