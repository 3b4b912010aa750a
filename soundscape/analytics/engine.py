"""Aggregation engine — runs every dashboard query concurrently.

Each breakdown, the total count and the headphone average run as separate
tasks, each on its own session, so a slow or failing query never blocks or
corrupts its siblings. A task never raises: it returns either its value or
the error it hit, and the caller decides the fallback.
"""

import asyncio
from dataclasses import dataclass, field

import structlog
from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from soundscape.analytics.breakdowns import (
    BREAKDOWNS,
    Breakdown,
    average_headphone_freq,
    total_count,
)
from soundscape.errors import BreakdownComputationError, TotalCountError
from soundscape.models.dashboard import BreakdownEntry

logger = structlog.get_logger(__name__)

AVERAGE_KEY = "averageHeadphoneFreq"


@dataclass
class BreakdownOutcome:
    """Result of one breakdown task: entries on success, error otherwise."""

    key: str
    entries: list[BreakdownEntry] | None = None
    error: BreakdownComputationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or_empty(self) -> list[BreakdownEntry]:
        return self.entries if self.entries is not None else []


@dataclass
class AggregationResult:
    total: int | TotalCountError
    average: float | None | BreakdownComputationError
    breakdowns: dict[str, BreakdownOutcome] = field(default_factory=dict)


class AggregationEngine:
    """Compute every dashboard aggregation under one shared predicate."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        breakdowns: tuple[Breakdown, ...] = BREAKDOWNS,
        timeout: float | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._breakdowns = breakdowns
        self._timeout = timeout

    async def compute(self, predicate: ColumnElement[bool]) -> AggregationResult:
        total, average, *outcomes = await asyncio.gather(
            self._total(predicate),
            self._average(predicate),
            *(self._breakdown(b, predicate) for b in self._breakdowns),
        )
        return AggregationResult(
            total=total,
            average=average,
            breakdowns={o.key: o for o in outcomes},
        )

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def _breakdown(self, breakdown: Breakdown,
                         predicate: ColumnElement[bool]) -> BreakdownOutcome:
        try:
            rows = await self._fetch_all(breakdown.statement(predicate))
            entries = breakdown.shape(rows)
        except Exception as exc:
            logger.warning(
                "breakdown_failed", breakdown=breakdown.key,
                error=repr(exc), exc_info=True,
            )
            return BreakdownOutcome(breakdown.key, error=BreakdownComputationError(breakdown.key, exc))
        logger.debug("breakdown_computed", breakdown=breakdown.key, groups=len(entries))
        return BreakdownOutcome(breakdown.key, entries=entries)

    async def _total(self, predicate: ColumnElement[bool]) -> int | TotalCountError:
        try:
            return int(await self._fetch_scalar(total_count(predicate)) or 0)
        except Exception as exc:
            # headline statistic: logged apart from chart failures
            logger.error("total_count_failed", error=repr(exc), exc_info=True)
            return TotalCountError(str(exc))

    async def _average(self, predicate: ColumnElement[bool]) -> float | None | BreakdownComputationError:
        try:
            value = await self._fetch_scalar(average_headphone_freq(predicate))
        except Exception as exc:
            logger.warning("breakdown_failed", breakdown=AVERAGE_KEY,
                           error=repr(exc), exc_info=True)
            return BreakdownComputationError(AVERAGE_KEY, exc)
        return None if value is None else float(value)

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------

    async def _fetch_all(self, stmt):
        async def run():
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.all()

        return await asyncio.wait_for(run(), timeout=self._timeout)

    async def _fetch_scalar(self, stmt):
        async def run():
            async with self._session_factory() as session:
                return (await session.execute(stmt)).scalar()

        return await asyncio.wait_for(run(), timeout=self._timeout)
