"""Submission repository: intake writes and browser reads."""

from sqlalchemy import ColumnElement, Row, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from soundscape.db.tables import SubmissionChoiceRow, SubmissionRow
from soundscape.models.common import utc_now
from soundscape.models.survey import ChoiceField


class SubmissionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, submission_id: str, answers: dict,
                     choices: dict[ChoiceField, list[str]]) -> SubmissionRow:
        """Insert one submission and its unwound array answers."""
        row = SubmissionRow(submission_id=submission_id, created_at=utc_now(), **answers)
        row.choices = [
            SubmissionChoiceRow(field=field.value, position=pos, value=value)
            for field, values in choices.items()
            for pos, value in enumerate(values)
        ]
        self._session.add(row)
        await self._session.flush()
        return row

    async def get(self, submission_id: str) -> SubmissionRow | None:
        return await self._session.get(SubmissionRow, submission_id)

    async def list_recent(self, where: ColumnElement[bool] | None = None,
                          *, limit: int) -> list[Row]:
        """Summary columns only, newest first, at most *limit* rows."""
        result = await self._session.execute(
            select(
                SubmissionRow.submission_id,
                SubmissionRow.name,
                SubmissionRow.created_at,
                SubmissionRow.is_duplicate,
            )
            .where(where if where is not None else true())
            .order_by(SubmissionRow.created_at.desc(), SubmissionRow.submission_id.desc())
            .limit(limit)
        )
        return list(result.all())

    async def exists_any(self) -> bool:
        result = await self._session.execute(select(SubmissionRow.submission_id).limit(1))
        return result.first() is not None
