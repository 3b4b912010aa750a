"""Shared pytest fixtures for the SoundScape test suite.

Provides:
- db_engine: in-memory SQLite async engine with all tables
- db_session: SAVEPOINT-isolated async session (app commits don't leak)
- store: file-backed session maker; the dashboard opens one session per
  breakdown, so its tests need committed rows visible across connections
- add_submissions: insert committed SubmissionRows into ``store``
- client: AsyncClient with dependency overrides bound to ``store``
"""

import itertools
import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool, StaticPool  # noqa: E402

from soundscape.api.security import SlidingWindowRateLimiter, get_submit_rate_limiter  # noqa: E402
from soundscape.config.settings import Settings, get_settings  # noqa: E402
from soundscape.db.session import Base, get_async_session, get_session_factory  # noqa: E402
from soundscape.db.tables import SubmissionChoiceRow, SubmissionRow  # noqa: E402
from soundscape.models.common import new_submission_id  # noqa: E402
from soundscape.models.survey import ChoiceField  # noqa: E402

BASE_TIME = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)

DEFAULT_FEATURES = [
    "Noise Heatmaps",
    "Quieter Routes",
    "Noise Forecasts",
    "Report & Learn Tool",
]

VALID_SUBMISSION = {
    "name": "Asha",
    "ageGroup": "18-22",
    "occupation": "Student",
    "noiseExposureFreq": "Often",
    "noiseSourceLocations": ["Home", "Commute"],
    "commonNoiseSources": ["Traffic", "Construction"],
    "focusDisturbance": "Sometimes",
    "sleepEffect": "Wakes me up at night",
    "stressEffect": "A little",
    "headphoneFreq": 6,
    "botherLevel": 80,
    "botherLabel": "Honking (80dB)",
    "communitySeriousness": "Somewhat",
    "mapInterest": "Maybe",
    "citizenScientist": "Unlikely",
    "featurePriorities": [
        "Quieter Routes",
        "Noise Heatmaps",
        "Noise Forecasts",
        "Report & Learn Tool",
    ],
}


@pytest.fixture
def valid_submission() -> dict:
    """A complete, schema-valid submit payload (camelCase, as the wizard posts it)."""
    return {k: (list(v) if isinstance(v, list) else v) for k, v in VALID_SUBMISSION.items()}


# ---------------------------------------------------------------------------
# Databases
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with all tables."""
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Provide a SAVEPOINT-isolated session.

    The outer transaction is never committed — it rolls back at teardown.
    Application code calling session.commit() triggers a SAVEPOINT release,
    which is then restarted so subsequent operations stay in the same
    outer transaction. This ensures full test isolation.
    """
    async with db_engine.connect() as conn:
        trans = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)

        # Start a nested SAVEPOINT
        nested = await conn.begin_nested()

        @event.listens_for(session.sync_session, "after_transaction_end")
        def restart_savepoint(sync_session, transaction):  # noqa: ARG001
            nonlocal nested
            if transaction.nested and not transaction._parent.nested:
                nested = conn.sync_connection.begin_nested()

        yield session

        await session.close()
        await trans.rollback()


@pytest.fixture
async def store(tmp_path):
    """Session maker over a throwaway SQLite file, one connection per session."""
    eng = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'soundscape.db'}",
        poolclass=NullPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(bind=eng, class_=AsyncSession, expire_on_commit=False)
    await eng.dispose()


def submission_row(
    *,
    minute: int,
    locations: list[str] | None = None,
    sounds: list[str] | None = None,
    features: list[str] | None = None,
    **answers,
) -> SubmissionRow:
    """A stored submission with sensible answers; keyword args override them."""
    values = {
        "name": "Respondent",
        "age_group": "18-22",
        "occupation": "Student",
        "noise_exposure_freq": "Often",
        "focus_disturbance": "Sometimes",
        "headphone_freq": 5,
        "bother_level": 70,
        "bother_label": "Street traffic (70dB)",
        "community_seriousness": "Somewhat",
        "map_interest": "Maybe",
        "citizen_scientist": "Unlikely",
        "is_duplicate": False,
    }
    values.update(answers)
    row = SubmissionRow(
        submission_id=values.pop("submission_id", None) or new_submission_id(),
        created_at=BASE_TIME + timedelta(minutes=minute),
        **values,
    )
    arrays = {
        ChoiceField.NOISE_SOURCE_LOCATIONS: locations or [],
        ChoiceField.COMMON_NOISE_SOURCES: sounds or [],
        ChoiceField.FEATURE_PRIORITIES: DEFAULT_FEATURES if features is None else features,
    }
    row.choices = [
        SubmissionChoiceRow(field=field.value, position=pos, value=value)
        for field, items in arrays.items()
        for pos, value in enumerate(items)
    ]
    return row


@pytest.fixture
def add_submissions(store):
    """Commit submissions into ``store``; each dict is submission_row() kwargs.

    Rows are stamped one minute apart in call order. Returns their ids.
    """
    clock = itertools.count()

    async def _add(*specs: dict) -> list[str]:
        rows = [submission_row(minute=next(clock), **spec) for spec in specs]
        async with store() as session:
            session.add_all(rows)
            await session.commit()
        return [r.submission_id for r in rows]

    return _add


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    """Settings used by the app under test (auth off unless a test overrides)."""
    return Settings(BASIC_AUTH_USER="", BASIC_AUTH_PASS="", SUMMARY_LIMIT=200)


@pytest.fixture
def rate_limiter() -> SlidingWindowRateLimiter:
    """Disabled by default so tests can submit freely."""
    return SlidingWindowRateLimiter(max_hits=0, window=1.0)


@pytest.fixture
async def client(store, settings, rate_limiter):
    """AsyncClient with sessions, settings and the rate limiter overridden."""
    from soundscape.api.main import app

    async def _override_session():
        async with store() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = _override_session
    app.dependency_overrides[get_session_factory] = lambda: store
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_submit_rate_limiter] = lambda: rate_limiter

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
