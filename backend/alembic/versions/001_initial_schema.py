"""Initial schema — sessions and session_tasks with per-user ownership.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sessions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("session_date", sa.Date, nullable=False),
        sa.Column("session_type", sa.String(10), nullable=False),
        sa.Column("planned_minutes", sa.Integer, nullable=False),
        sa.Column("actual_minutes", sa.Integer, nullable=False),
        sa.Column("energy_after", sa.String(10), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("user_id", sa.String(64), nullable=False),
    )
    op.create_index(
        "ix_sessions_user_date", "sessions",
        ["user_id", "session_date", "created_at"],
    )

    op.create_table(
        "session_tasks",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "session_id", UUID(as_uuid=True),
            sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("task_name", sa.Text, nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=True),
        sa.Column("planned_minutes", sa.Integer, nullable=True),
        sa.Column("completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("user_id", sa.String(64), nullable=False),
    )
    op.create_index(
        "ix_session_tasks_session_id", "session_tasks", ["session_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_session_tasks_session_id", table_name="session_tasks")
    op.drop_table("session_tasks")
    op.drop_index("ix_sessions_user_date", table_name="sessions")
    op.drop_table("sessions")
