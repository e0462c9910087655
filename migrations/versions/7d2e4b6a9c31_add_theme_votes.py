"""add theme votes

Revision ID: 7d2e4b6a9c31
Revises: 3f9a1c7e2b10
Create Date: 2026-09-20 21:45:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "7d2e4b6a9c31"
down_revision = "3f9a1c7e2b10"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "theme_votes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("theme_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["theme_id"], ["themes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("theme_id", "user_id", name="uq_theme_votes_theme_user"),
    )


def downgrade():
    op.drop_table("theme_votes")
