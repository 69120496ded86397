"""Add match table with knockout advancement links

Revision ID: 002_match_table
Revises: 001_initial
Create Date: 2026-10-18 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "002_match_table"
down_revision = "001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "match",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tournament_id", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("age_group", sa.String(), nullable=True),
        sa.Column("round_number", sa.Integer(), nullable=False),
        sa.Column("round_name", sa.String(), nullable=False),
        sa.Column("match_number", sa.Integer(), nullable=False),
        sa.Column("bracket_position", sa.Integer(), nullable=False),
        sa.Column("player1_id", sa.String(), nullable=True),
        sa.Column("player1_name", sa.String(), nullable=False),
        sa.Column("player2_id", sa.String(), nullable=True),
        sa.Column("player2_name", sa.String(), nullable=False),
        sa.Column("player3_id", sa.String(), nullable=True),
        sa.Column("player3_name", sa.String(), nullable=True),
        sa.Column("player4_id", sa.String(), nullable=True),
        sa.Column("player4_name", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("winner_id", sa.String(), nullable=True),
        sa.Column("winner_name", sa.String(), nullable=True),
        sa.Column("is_walkover", sa.Boolean(), nullable=False),
        sa.Column("walkover_reason", sa.String(), nullable=True),
        sa.Column("player1_score", sa.JSON(), nullable=False),
        sa.Column("player2_score", sa.JSON(), nullable=False),
        sa.Column("next_match_id", sa.Integer(), nullable=True),
        sa.Column("next_slot", sa.Integer(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(), nullable=True),
        sa.Column("court", sa.String(), nullable=True),
        sa.Column("started_at", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["tournament_id"],
            ["tournament.id"],
        ),
        sa.ForeignKeyConstraint(
            ["next_match_id"],
            ["match.id"],
        ),
    )
    op.create_index("ix_match_tournament_id", "match", ["tournament_id"])


def downgrade() -> None:
    op.drop_index("ix_match_tournament_id", table_name="match")
    op.drop_table("match")
