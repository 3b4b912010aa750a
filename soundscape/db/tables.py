"""SQLAlchemy ORM table models for SoundScape.

Two tables:
- submissions: one row per completed survey, scalar answers only.
- submission_choices: one row per element of a multi-select or ranking
  answer. This is the unwound form of the array answers, so grouping it by
  value is a fan-out count, and position 0 of featurePriorities is the
  respondent's first-ranked feature.

Both tables are append-only. Rows are never updated or deleted.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from soundscape.db.session import Base


class SubmissionRow(Base):
    __tablename__ = "submissions"

    submission_id: Mapped[str] = mapped_column(String(24), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    age_group: Mapped[str | None] = mapped_column(String(50), nullable=True)
    occupation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    noise_exposure_freq: Mapped[str | None] = mapped_column(String(50), nullable=True)
    focus_disturbance: Mapped[str | None] = mapped_column(String(50), nullable=True)
    sleep_effect: Mapped[str | None] = mapped_column(Text, nullable=True)
    stress_effect: Mapped[str | None] = mapped_column(Text, nullable=True)
    headphone_freq: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bother_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bother_label: Mapped[str | None] = mapped_column(String(100), nullable=True)
    community_seriousness: Mapped[str | None] = mapped_column(String(100), nullable=True)
    map_interest: Mapped[str | None] = mapped_column(String(100), nullable=True)
    citizen_scientist: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # NULL is read as "not a duplicate"
    is_duplicate: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    choices: Mapped[list["SubmissionChoiceRow"]] = relationship(
        back_populates="submission",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_submissions_created_at", "created_at"),
    )


class SubmissionChoiceRow(Base):
    """One selected (or ranked) item of an array answer."""

    __tablename__ = "submission_choices"

    submission_id: Mapped[str] = mapped_column(
        ForeignKey("submissions.submission_id"), primary_key=True,
    )
    field: Mapped[str] = mapped_column(String(50), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    value: Mapped[str | None] = mapped_column(String(100), nullable=True)

    submission: Mapped[SubmissionRow] = relationship(back_populates="choices")

    __table_args__ = (
        Index("ix_submission_choices_field_value", "field", "value"),
    )
