"""create coaches, workouts and feedback tables

Revision ID: 3f9c2d1a7b45
Revises:
Create Date: 2026-10-19 09:12:40.118203

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9c2d1a7b45"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

SLOT_INDEX = "ux_workout_coach_slot_active"
ACTIVE_SLOT = "coach_status <> 'CANCELLED' AND client_status <> 'CANCELLED'"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    status_enum = sa.Enum(
        "SCHEDULED",
        "FINISHED",
        "CANCELLED",
        "WAITING_FOR_FEEDBACK",
        name="workout_status_enum",
    )

    op.create_table(
        "coaches",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("first_name", sa.String(length=60), nullable=False),
        sa.Column("last_name", sa.String(length=60), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True, unique=True),
        sa.Column("title", sa.String(length=120), nullable=False),
        sa.Column("about", sa.Text(), nullable=False, server_default=""),
        sa.Column("type", sa.String(length=60), nullable=False),
        sa.Column("profile_pic", sa.String(length=500), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("specialization", sa.JSON(), nullable=False),
        sa.Column("certificates", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_coaches_type", "coaches", ["type"])

    op.create_table(
        "workouts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "coach_id",
            sa.Uuid(),
            sa.ForeignKey("coaches.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(length=60), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(length=5), nullable=False),
        sa.Column("coach_status", status_enum, nullable=False),
        sa.Column("client_status", status_enum, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_workout_coach_id", "workouts", ["coach_id"])
    op.create_index("ix_workout_client_id", "workouts", ["client_id"])
    op.create_index("ix_workout_date", "workouts", ["date"])
    # um único workout ativo por (coach, dia, hora); cancelados liberam o slot
    op.create_index(
        SLOT_INDEX,
        "workouts",
        ["coach_id", "date", "time"],
        unique=True,
        postgresql_where=sa.text(ACTIVE_SLOT),
        sqlite_where=sa.text(ACTIVE_SLOT),
    )

    op.create_table(
        "feedbacks",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column(
            "coach_id",
            sa.Uuid(),
            sa.ForeignKey("coaches.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "workout_id",
            sa.Uuid(),
            sa.ForeignKey("workouts.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("workout_id", "client_id", name="uq_feedback_workout_client"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_rating"),
    )
    op.create_index("ix_feedback_coach_id", "feedbacks", ["coach_id"])

    op.create_table(
        "coach_feedbacks",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column(
            "coach_id",
            sa.Uuid(),
            sa.ForeignKey("coaches.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "workout_id",
            sa.Uuid(),
            sa.ForeignKey("workouts.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("comment", sa.Text(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "workout_id", "coach_id", name="uq_coach_feedback_workout_coach"
        ),
    )


def downgrade() -> None:
    op.drop_table("coach_feedbacks")
    op.drop_index("ix_feedback_coach_id", table_name="feedbacks")
    op.drop_table("feedbacks")
    op.drop_index(SLOT_INDEX, table_name="workouts")
    op.drop_index("ix_workout_date", table_name="workouts")
    op.drop_index("ix_workout_client_id", table_name="workouts")
    op.drop_index("ix_workout_coach_id", table_name="workouts")
    op.drop_table("workouts")
    op.drop_index("ix_coaches_type", table_name="coaches")
    op.drop_table("coaches")
    sa.Enum(name="workout_status_enum").drop(op.get_bind(), checkfirst=True)
