"""create user corrections

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user_corrections",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("essay_id", sa.String(length=36), sa.ForeignKey("essays.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("original_text", sa.Text(), nullable=False),
        sa.Column("suggested_text", sa.Text(), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
        sa.Column("text_start_index", sa.Integer(), nullable=False),
        sa.Column("text_end_index", sa.Integer(), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_corrections_essay_id", "user_corrections", ["essay_id"])
    op.create_index("ix_user_corrections_user_id", "user_corrections", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_user_corrections_user_id", table_name="user_corrections")
    op.drop_index("ix_user_corrections_essay_id", table_name="user_corrections")
    op.drop_table("user_corrections")
