"""FastAPI dependency injection factories for repositories and services.

Each factory takes its collaborators via Depends() and returns a ready
instance. API endpoints use these via Depends().
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from soundscape.analytics.dashboard import DashboardService
from soundscape.config.settings import Settings, get_settings
from soundscape.db.session import get_async_session, get_session_factory
from soundscape.repositories.submissions import SubmissionRepository
from soundscape.survey.browser import SubmissionBrowser
from soundscape.survey.intake import SubmissionIntake

# ---------------------------------------------------------------------------
# Submissions
# ---------------------------------------------------------------------------


async def get_submission_repo(
    session: AsyncSession = Depends(get_async_session),
) -> SubmissionRepository:
    return SubmissionRepository(session)


async def get_submission_intake(
    repo: SubmissionRepository = Depends(get_submission_repo),
) -> SubmissionIntake:
    return SubmissionIntake(repo)


async def get_submission_browser(
    repo: SubmissionRepository = Depends(get_submission_repo),
    settings: Settings = Depends(get_settings),
) -> SubmissionBrowser:
    return SubmissionBrowser(repo, limit=settings.SUMMARY_LIMIT)


# ---------------------------------------------------------------------------
# Stats dashboard
# ---------------------------------------------------------------------------


async def get_dashboard_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
) -> DashboardService:
    return DashboardService(session_factory, timeout=settings.BREAKDOWN_TIMEOUT_SECONDS)
