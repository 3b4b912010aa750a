"""Initial schema — submissions and their unwound array answers.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "submissions",
        sa.Column("submission_id", sa.String(24), primary_key=True),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("age_group", sa.String(50), nullable=True),
        sa.Column("occupation", sa.String(100), nullable=True),
        sa.Column("noise_exposure_freq", sa.String(50), nullable=True),
        sa.Column("focus_disturbance", sa.String(50), nullable=True),
        sa.Column("sleep_effect", sa.Text, nullable=True),
        sa.Column("stress_effect", sa.Text, nullable=True),
        sa.Column("headphone_freq", sa.Integer, nullable=True),
        sa.Column("bother_level", sa.Integer, nullable=True),
        sa.Column("bother_label", sa.String(100), nullable=True),
        sa.Column("community_seriousness", sa.String(100), nullable=True),
        sa.Column("map_interest", sa.String(100), nullable=True),
        sa.Column("citizen_scientist", sa.String(100), nullable=True),
        sa.Column("is_duplicate", sa.Boolean, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_submissions_created_at", "submissions", ["created_at"])

    op.create_table(
        "submission_choices",
        sa.Column("submission_id", sa.String(24),
                  sa.ForeignKey("submissions.submission_id"), primary_key=True),
        sa.Column("field", sa.String(50), primary_key=True),
        sa.Column("position", sa.Integer, primary_key=True),
        sa.Column("value", sa.String(100), nullable=True),
    )
    op.create_index(
        "ix_submission_choices_field_value", "submission_choices", ["field", "value"],
    )


def downgrade() -> None:
    op.drop_index("ix_submission_choices_field_value", table_name="submission_choices")
    op.drop_table("submission_choices")
    op.drop_index("ix_submissions_created_at", table_name="submissions")
    op.drop_table("submissions")
