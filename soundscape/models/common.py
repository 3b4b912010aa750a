"""Shared types, helpers, and base models used across SoundScape domain models."""

from datetime import datetime, timezone
from typing import Annotated

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def new_submission_id() -> str:
    """Generate a new time-sortable 24-hex submission identifier."""
    return str(ObjectId())


def is_submission_id(value: object) -> bool:
    """True when *value* is a well-formed 24-hex submission identifier."""
    return isinstance(value, str) and len(value) == 24 and ObjectId.is_valid(value)


def to_iso(ts: datetime) -> str:
    """Canonical ISO-8601 form for timestamps leaving the service (UTC, ms, 'Z')."""
    if ts.tzinfo is None:
        # SQLite drops tzinfo; stored values are always UTC
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# --- Reusable annotated types ---

SubmissionId = Annotated[
    str, Field(pattern=r"^[0-9a-fA-F]{24}$", description="24-hex submission identifier.")
]


# --- Base model ---


class SoundScapeBase(BaseModel):
    """Base model with common configuration for all SoundScape Pydantic models.

    Fields are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )
