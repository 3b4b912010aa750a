"""FastAPI submission endpoints.

POST /api/submit                                 — survey intake (rate limited)
GET  /api/submissions/summary?includeDuplicates= — submission browser list
GET  /api/submissions/{submission_id}            — one full submission

The browser endpoints sit behind dashboard basic auth when configured.
"""

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from soundscape.api.dependencies import get_submission_browser, get_submission_intake
from soundscape.api.security import enforce_submit_rate_limit, require_dashboard_auth
from soundscape.api.stats import parse_include_duplicates
from soundscape.analytics.filters import build_filter
from soundscape.errors import InvalidSubmissionIdError, SubmissionNotFoundError
from soundscape.models.common import SoundScapeBase
from soundscape.models.survey import Submission, SubmissionCreate, SubmissionSummary
from soundscape.survey.browser import SubmissionBrowser
from soundscape.survey.intake import SubmissionIntake

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["submissions"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------


class PersonaOut(SoundScapeBase):
    name: str
    description: str


class SubmitData(SoundScapeBase):
    id: str
    persona: PersonaOut


class SubmitResponse(SoundScapeBase):
    success: bool = True
    message: str = "Submission received!"
    data: SubmitData


class SummaryListResponse(SoundScapeBase):
    success: bool = True
    data: list[SubmissionSummary]


class SubmissionResponse(SoundScapeBase):
    success: bool = True
    data: Submission


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/submit",
    status_code=201,
    response_model=SubmitResponse,
    dependencies=[Depends(enforce_submit_rate_limit)],
)
async def submit_survey(
    body: SubmissionCreate,
    intake: SubmissionIntake = Depends(get_submission_intake),
):
    """Store one completed survey."""
    try:
        receipt = await intake.submit(body)
    except SQLAlchemyError as exc:
        logger.error("submission_save_failed", error=repr(exc))
        return _failure(500, "Database error while saving submission.")
    return SubmitResponse(
        data=SubmitData(
            id=receipt.submission_id,
            persona=PersonaOut(**receipt.persona.to_dict()),
        ),
    )


@router.get(
    "/submissions/summary",
    response_model=SummaryListResponse,
    dependencies=[Depends(require_dashboard_auth)],
)
async def list_submission_summaries(
    include_duplicates: str | None = Query(default=None, alias="includeDuplicates"),
    browser: SubmissionBrowser = Depends(get_submission_browser),
):
    """Newest submissions first, capped at the configured summary limit."""
    predicate = build_filter(parse_include_duplicates(include_duplicates))
    try:
        summaries = await browser.list_summaries(predicate)
    except SQLAlchemyError as exc:
        logger.error("summary_fetch_failed", error=repr(exc))
        return _failure(500, "Failed to fetch summaries")
    return SummaryListResponse(data=summaries)


@router.get(
    "/submissions/{submission_id}",
    response_model=SubmissionResponse,
    dependencies=[Depends(require_dashboard_auth)],
)
async def get_submission(
    submission_id: str,
    browser: SubmissionBrowser = Depends(get_submission_browser),
):
    """Full details of one submission."""
    try:
        submission = await browser.get_submission(submission_id)
    except InvalidSubmissionIdError:
        return _failure(400, "Invalid submission ID format")
    except SubmissionNotFoundError:
        return _failure(404, "Submission not found")
    except SQLAlchemyError as exc:
        logger.error("submission_fetch_failed", submission_id=submission_id, error=repr(exc))
        return _failure(500, "Server error in submission detail route")
    return SubmissionResponse(data=submission)
