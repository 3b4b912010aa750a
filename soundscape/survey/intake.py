"""Submission intake — persists a validated survey submission."""

from dataclasses import dataclass

import structlog

from soundscape.models.common import new_submission_id
from soundscape.models.survey import ChoiceField, SubmissionCreate
from soundscape.repositories.submissions import SubmissionRepository
from soundscape.survey.persona import NoisePersona, persona_for

logger = structlog.get_logger(__name__)

_ARRAY_FIELDS: dict[ChoiceField, str] = {
    ChoiceField.NOISE_SOURCE_LOCATIONS: "noise_source_locations",
    ChoiceField.COMMON_NOISE_SOURCES: "common_noise_sources",
    ChoiceField.FEATURE_PRIORITIES: "feature_priorities",
}


@dataclass(frozen=True)
class SubmissionReceipt:
    submission_id: str
    persona: NoisePersona


class SubmissionIntake:
    """Write path for the survey wizard. Validation happens in SubmissionCreate."""

    def __init__(self, repo: SubmissionRepository) -> None:
        self._repo = repo

    async def submit(self, payload: SubmissionCreate) -> SubmissionReceipt:
        scalars = payload.model_dump(mode="json", exclude=set(_ARRAY_FIELDS.values()))
        choices = {
            field: [str(v) for v in getattr(payload, attr)]
            for field, attr in _ARRAY_FIELDS.items()
        }
        row = await self._repo.create(
            submission_id=new_submission_id(),
            answers=scalars,
            choices=choices,
        )
        logger.info(
            "submission_saved",
            submission_id=row.submission_id,
            is_duplicate=row.is_duplicate,
        )
        return SubmissionReceipt(
            submission_id=row.submission_id,
            persona=persona_for(payload.bother_level),
        )
