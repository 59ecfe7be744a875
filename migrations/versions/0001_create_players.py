"""create players table

Revision ID: 0001_create_players
Revises:
Create Date: 2026-10-17 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_create_players"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("password", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("display_name", sa.String(length=100), nullable=True),
        sa.Column("theme", sa.String(length=32), server_default="system", nullable=False),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("coins", sa.Integer(), server_default="0", nullable=False),
        sa.Column("networking_completed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("programming_completed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("systemunit_completed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("networking_hard_perfect", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("programming_game_unlocked", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("progress", sa.Text(), nullable=True),
        sa.Column("unlocked_levels", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )


def downgrade():
    op.drop_table("players")
