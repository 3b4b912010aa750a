"""FastAPI stats dashboard endpoint.

GET /api/stats/aggregate?includeDuplicates=  — every chart breakdown + totals

Read-only. Protected by dashboard basic auth when configured.
"""

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from soundscape.api.dependencies import get_dashboard_service
from soundscape.api.security import require_dashboard_auth
from soundscape.analytics.dashboard import DashboardService
from soundscape.errors import ServiceUnavailableError
from soundscape.models.common import SoundScapeBase
from soundscape.models.dashboard import DashboardPayload

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/api/stats",
    tags=["stats"],
    dependencies=[Depends(require_dashboard_auth)],
)


class DashboardResponse(SoundScapeBase):
    success: bool = True
    data: DashboardPayload


def parse_include_duplicates(raw: str | None) -> bool:
    """Anything but the literal "false" keeps duplicates in."""
    return raw != "false"


@router.get("/aggregate", response_model=DashboardResponse)
async def aggregate_stats(
    include_duplicates: str | None = Query(default=None, alias="includeDuplicates"),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Aggregated survey statistics for the stats page."""
    include = parse_include_duplicates(include_duplicates)
    try:
        payload = await service.build_payload(include)
    except ServiceUnavailableError:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Server error while fetching aggregated stats",
            },
        )
    return DashboardResponse(data=payload)
