"""add timecards, timecard_lines and timecard_transitions tables

Revision ID: 3c1f7a9e52d4
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1f7a9e52d4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "timecards",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("opened_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_timecards_id", "timecards", ["id"], unique=False)
    op.create_index("ix_timecards_employee_id", "timecards", ["employee_id"], unique=False)
    op.create_index("ix_timecards_opened_at", "timecards", ["opened_at"], unique=False)

    op.create_table(
        "timecard_lines",
        sa.Column("unique_identifier", sa.String(), primary_key=True, nullable=False),
        sa.Column(
            "timecard_id",
            sa.String(),
            sa.ForeignKey("timecards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("line_number", sa.Integer(), nullable=False),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("recorded", sa.DateTime(timezone=True), nullable=False),
        sa.Column("hours", sa.Float(), nullable=False),
        sa.Column("project", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.CheckConstraint("hours > 0 AND hours <= 24", name="ck_timecard_lines_hours_range"),
    )
    op.create_index("ix_timecard_lines_unique_identifier", "timecard_lines", ["unique_identifier"], unique=False)
    op.create_index("ix_timecard_lines_timecard_id", "timecard_lines", ["timecard_id"], unique=False)

    op.create_table(
        "timecard_transitions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "timecard_id",
            sa.String(),
            sa.ForeignKey("timecards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("transitioned_to", sa.String(), nullable=False),
        sa.Column("action", sa.JSON(), nullable=False),
        sa.UniqueConstraint("timecard_id", "sequence", name="uq_timecard_transitions_sequence"),
        sa.CheckConstraint(
            "transitioned_to in ('DRAFT','SUBMITTED','APPROVED','REJECTED','CANCELLED')",
            name="ck_timecard_transitions_status_valid",
        ),
    )
    op.create_index("ix_timecard_transitions_timecard_id", "timecard_transitions", ["timecard_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_timecard_transitions_timecard_id", table_name="timecard_transitions")
    op.drop_table("timecard_transitions")
    op.drop_index("ix_timecard_lines_timecard_id", table_name="timecard_lines")
    op.drop_index("ix_timecard_lines_unique_identifier", table_name="timecard_lines")
    op.drop_table("timecard_lines")
    op.drop_index("ix_timecards_opened_at", table_name="timecards")
    op.drop_index("ix_timecards_employee_id", table_name="timecards")
    op.drop_index("ix_timecards_id", table_name="timecards")
    op.drop_table("timecards")
