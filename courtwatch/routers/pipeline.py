"""
Pipeline trigger – runs one fetch → diff → notify → persist cycle.

Meant to be called by an external scheduler (cron, uptime pinger).
"""

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse

from courtwatch.models import RunSummary
from courtwatch.rate_limit import PIPELINE, limiter
from courtwatch.services.registry import registry

router = APIRouter(prefix="/api", tags=["pipeline"])


@router.get(
    "/fetch-booking-times",
    response_model=RunSummary,
    operation_id="fetchBookingTimes",
    summary="Fetch all providers, detect newly available courts and notify users",
    responses={500: {"model": RunSummary, "description": "The run aborted"}},
)
@limiter.limit(PIPELINE)
async def fetch_booking_times(
    request: Request,
    days: int | None = Query(
        None, ge=1, le=30, description="Days ahead (including today) to fetch"
    ),
) -> RunSummary | JSONResponse:
    summary = await registry.get_aggregator().run(days)
    if not summary.success:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=summary.model_dump(mode="json"),
        )
    return summary
