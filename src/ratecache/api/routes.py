"""JSON API endpoints for range queries, manual backfill, and service status."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from ratecache.exceptions import InvalidRangeError, SamplingLadderExhausted
from ratecache.models import RatesResponse

log = structlog.get_logger(__name__)

router = APIRouter()


def _rates_to_json(response: RatesResponse) -> dict:
    """Serialize a RatesResponse; rates become strings to keep Decimal precision."""
    return {
        "interval": response.interval,
        "rates": [[s.timestamp, str(s.rate)] for s in response.rates],
    }


@router.get("/rates")
async def get_rates(
    request: Request,
    start: int = Query(..., description="Range start, seconds since epoch"),
    end: int = Query(..., description="Range end, seconds since epoch"),
) -> JSONResponse:
    """Cached subset of [start, end], downsampled; schedules missing minutes."""
    service = request.app.state.service
    try:
        response = service.get_rates(start, end)
    except InvalidRangeError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except SamplingLadderExhausted as e:
        log.error(
            "sampling_ladder_exhausted",
            start=start,
            end=end,
            count=e.count,
            max_points=e.max_points,
        )
        return JSONResponse(status_code=500, content={"error": str(e)})
    return JSONResponse(content=_rates_to_json(response))


@router.post("/jobs")
async def schedule_job(
    request: Request,
    timestamp: int = Query(..., description="Any timestamp inside the batch to fetch"),
) -> JSONResponse:
    """Manually schedule the batch window covering ``timestamp``."""
    service = request.app.state.service
    try:
        batch_start, created = service.schedule(timestamp)
    except ValueError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    log.info("manual_job_scheduled", batch_start=batch_start, created=created)
    return JSONResponse(content={"batch_start": batch_start, "created": created})


@router.get("/status")
async def get_status(request: Request) -> JSONResponse:
    """Cache size, queue depth, and dispatch counters."""
    return JSONResponse(content=request.app.state.service.status())
