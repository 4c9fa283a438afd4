from typing import Annotated
import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from nowplaying.config import settings
from nowplaying.dependencies import get_aggregator, get_refresher, get_snapshot_cache
from nowplaying.schemas import HealthResponse, PayloadType, ServiceInfo
from nowplaying.services import (
    NowPlayingAggregator,
    SnapshotCache,
    collect_schedule_payload,
    collect_status_payload,
    format_schedule,
    format_statuses,
)


logger = logging.getLogger(__name__)

main_router = APIRouter()

SERVICE_NAME = "VDJ Radio Now Playing"
SERVICE_VERSION = "0.1.0"


@main_router.get("/", response_model=ServiceInfo)
async def root(
    aggregator: Annotated[NowPlayingAggregator, Depends(get_aggregator)]
) -> ServiceInfo:
    """Root endpoint with service information"""
    next_run = get_refresher().get_next_run_time()

    return ServiceInfo(
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        channels=[channel.id for channel in aggregator.channels],
        next_scheduled_refresh=next_run.isoformat() if next_run else None,
        endpoints={
            "nowplaying": "/api/nowplaying - Current DJ for every channel",
            "schedule": "/api/nowplaying?type=schedule - Upcoming shows",
            "health": "/health - Health check",
        },
    )


@main_router.get("/health", response_model=HealthResponse)
async def health_check(
    aggregator: Annotated[NowPlayingAggregator, Depends(get_aggregator)]
) -> HealthResponse:
    """Health check endpoint"""
    return HealthResponse(
        status="ok",
        channels=len(aggregator.channels),
        refresher_running=get_refresher().running,
    )


@main_router.get("/api/nowplaying")
async def get_nowplaying(
    aggregator: Annotated[NowPlayingAggregator, Depends(get_aggregator)],
    cache: Annotated[SnapshotCache, Depends(get_snapshot_cache)],
    payload_type: Annotated[
        PayloadType,
        Query(alias="type", description="'status' (default) or 'schedule'"),
    ] = PayloadType.status,
) -> JSONResponse:
    """
    Current status of every channel, or the upcoming schedule

    Always answers 200: per-channel and per-source failures are reported in
    the payload's error fields.
    """
    if payload_type is PayloadType.schedule:
        payload = await collect_schedule_payload(
            aggregator, cache, settings.schedule_cache_max_age
        )
        logger.info("Serving schedule: %s upcoming shows", payload.get("count", 0))
        return format_schedule(payload, settings.schedule_cache_max_age)

    payload = await collect_status_payload(aggregator, cache, settings.status_cache_max_age)
    logger.info("Serving status for %s channels", len(payload))
    return format_statuses(payload, settings.status_cache_max_age)
