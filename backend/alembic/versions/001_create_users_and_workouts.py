"""Create users, workouts and workout_entries tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the initial schema: users, workouts, and the ordered
       workout_entries that belong to a workout.
How:   BIGINT identity keys, TIMESTAMP WITH TIME ZONE audit columns,
       CHECK and UNIQUE constraints mirroring the entry validation rules.

Rollback: downgrade() drops all three tables (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create the three tables and their constraints."""
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        # bcrypt modular-crypt string stored as bytes; never the plaintext
        sa.Column("password_hash", sa.LargeBinary(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=False, server_default=sa.text("''")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "workouts",
        sa.Column("id", sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("calories_burned", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("duration_minutes > 0", name="ck_workouts_duration_positive"),
        sa.CheckConstraint("calories_burned >= 0", name="ck_workouts_calories_non_negative"),
    )

    op.create_table(
        "workout_entries",
        sa.Column("id", sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column("workout_id", sa.BigInteger(), nullable=False),
        sa.Column("exercise_name", sa.String(255), nullable=False),
        sa.Column("sets", sa.Integer(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        # Entries have no life outside their workout
        sa.ForeignKeyConstraint(
            ["workout_id"],
            ["workouts.id"],
            name="fk_workout_entries_workout_id",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint("sets > 0", name="ck_workout_entries_sets_positive"),
        # Exactly one measurement family per row
        sa.CheckConstraint(
            "((reps IS NOT NULL OR weight IS NOT NULL) AND duration_seconds IS NULL)"
            " OR (reps IS NULL AND weight IS NULL AND duration_seconds IS NOT NULL)",
            name="ck_workout_entries_measurement",
        ),
        # One entry per position; the index also serves "entries of workout X in display order"
        sa.UniqueConstraint("workout_id", "order_index", name="uq_workout_entries_workout_order"),
    )


def downgrade() -> None:
    """Drop all tables, children first."""
    op.drop_table("workout_entries")
    op.drop_table("workouts")
    op.drop_table("users")
