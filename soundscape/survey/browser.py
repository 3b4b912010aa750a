"""Submission browser — newest-first summary list and single-record detail."""

from collections import defaultdict

from sqlalchemy import ColumnElement

from soundscape.db.tables import SubmissionRow
from soundscape.errors import InvalidSubmissionIdError, SubmissionNotFoundError
from soundscape.models.common import is_submission_id, to_iso
from soundscape.models.survey import ChoiceField, Submission, SubmissionSummary
from soundscape.repositories.submissions import SubmissionRepository

DEFAULT_SUMMARY_LIMIT = 200


def row_to_submission(row: SubmissionRow) -> Submission:
    """Serialize a stored row; arrays are rebuilt in their stored order."""
    arrays: dict[str, list[tuple[int, str]]] = defaultdict(list)
    for choice in row.choices:
        if choice.value is not None:
            arrays[choice.field].append((choice.position, choice.value))

    def ordered(field: ChoiceField) -> list[str]:
        return [value for _, value in sorted(arrays[field.value])]

    return Submission(
        id=row.submission_id,
        name=row.name,
        age_group=row.age_group,
        occupation=row.occupation,
        noise_exposure_freq=row.noise_exposure_freq,
        noise_source_locations=ordered(ChoiceField.NOISE_SOURCE_LOCATIONS),
        common_noise_sources=ordered(ChoiceField.COMMON_NOISE_SOURCES),
        focus_disturbance=row.focus_disturbance,
        sleep_effect=row.sleep_effect,
        stress_effect=row.stress_effect,
        headphone_freq=row.headphone_freq,
        bother_level=row.bother_level,
        bother_label=row.bother_label,
        community_seriousness=row.community_seriousness,
        map_interest=row.map_interest,
        citizen_scientist=row.citizen_scientist,
        feature_priorities=ordered(ChoiceField.FEATURE_PRIORITIES),
        is_duplicate=bool(row.is_duplicate),
        created_at=to_iso(row.created_at),
    )


class SubmissionBrowser:
    def __init__(self, repo: SubmissionRepository, *,
                 limit: int = DEFAULT_SUMMARY_LIMIT) -> None:
        self._repo = repo
        self._limit = limit

    async def list_summaries(self, predicate: ColumnElement[bool] | None = None) -> list[SubmissionSummary]:
        """At most ``limit`` summaries, newest first. Stateless per call."""
        rows = await self._repo.list_recent(predicate, limit=self._limit)
        return [
            SubmissionSummary(
                id=r.submission_id,
                name=r.name,
                created_at=to_iso(r.created_at),
                is_duplicate=bool(r.is_duplicate),
            )
            for r in rows
        ]

    async def get_submission(self, submission_id: str) -> Submission:
        """Raises InvalidSubmissionIdError or SubmissionNotFoundError."""
        if not is_submission_id(submission_id):
            raise InvalidSubmissionIdError(submission_id)
        row = await self._repo.get(submission_id.lower())
        if row is None:
            raise SubmissionNotFoundError(submission_id)
        return row_to_submission(row)
