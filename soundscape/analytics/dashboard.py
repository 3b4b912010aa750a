"""Dashboard response shaper.

Probes the store once, fans the aggregations out through AggregationEngine,
then folds the outcomes into a single DashboardPayload:

- failed breakdowns render as empty charts and are listed in
  failed_breakdowns so the UI can flag incomplete data
- a failed total count renders as 0 (never a list length)
- a failed or empty average renders as "N/A"
- top_occupation is the first occupation entry, or "N/A"

Only an unreachable store fails the whole request (ServiceUnavailableError).
"""

from decimal import ROUND_HALF_UP, Decimal

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from soundscape.analytics.engine import AVERAGE_KEY, AggregationEngine, AggregationResult
from soundscape.analytics.filters import build_filter
from soundscape.errors import BreakdownComputationError, ServiceUnavailableError, TotalCountError
from soundscape.models.dashboard import NOT_AVAILABLE, DashboardPayload

logger = structlog.get_logger(__name__)

ONE_DECIMAL = Decimal("0.1")


def format_average(value: float | None) -> str:
    """Mean headphone use, one decimal place, or "N/A" when there is no data.

    Halves round up on the exact binary value, so 6.25 renders "6.3".
    """
    if value is None:
        return NOT_AVAILABLE
    return str(Decimal(value).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


class DashboardService:
    """Assemble the stats page payload under one duplicate filter."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        timeout: float | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = AggregationEngine(session_factory, timeout=timeout)

    async def build_payload(self, include_duplicates: bool = True) -> DashboardPayload:
        await self._ensure_reachable()
        result = await self._engine.compute(build_filter(include_duplicates))
        payload = self.shape(result)
        logger.info(
            "dashboard_built",
            include_duplicates=include_duplicates,
            total=payload.total_submissions,
            failed=payload.failed_breakdowns,
        )
        return payload

    @staticmethod
    def shape(result: AggregationResult) -> DashboardPayload:
        failed: list[str] = []

        fields: dict[str, object] = {}
        for key, outcome in result.breakdowns.items():
            fields[key] = outcome.unwrap_or_empty()
            if not outcome.ok:
                failed.append(key)

        if isinstance(result.average, BreakdownComputationError):
            failed.append(AVERAGE_KEY)
            fields[AVERAGE_KEY] = NOT_AVAILABLE
        else:
            fields[AVERAGE_KEY] = format_average(result.average)

        if isinstance(result.total, TotalCountError):
            failed.append("totalSubmissions")
            fields["totalSubmissions"] = 0
        else:
            fields["totalSubmissions"] = result.total

        occupations = fields.get("occupationData") or []
        fields["topOccupation"] = str(occupations[0].name) if occupations else NOT_AVAILABLE
        fields["failedBreakdowns"] = failed
        return DashboardPayload.model_validate(fields)

    async def _ensure_reachable(self) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.error("store_unreachable", error=repr(exc))
            raise ServiceUnavailableError("Submission store is unreachable") from exc
