"""
Now Playing Service

Entry points for the two response modes. Runs the aggregator through the
snapshot cache and turns any unexpected failure into an error-bearing payload.
"""
import logging

from nowplaying.services.aggregation_service import NowPlayingAggregator
from nowplaying.services.snapshot_cache import SnapshotCache
from nowplaying.services.status_types import AggregatedSchedule, ChannelStatus
from nowplaying.utils.timestamps import iso_timestamp


logger = logging.getLogger(__name__)

STATUS_KEY = "status"
SCHEDULE_KEY = "schedule"


async def collect_status_payload(
    aggregator: NowPlayingAggregator,
    cache: SnapshotCache,
    max_age: float,
) -> list[dict]:
    """
    Build the status-mode payload

    Args:
        aggregator: Aggregator for the channel registry
        cache: Snapshot cache shared across requests
        max_age: Cache lifetime of the status snapshot in seconds

    Returns:
        One status dictionary per registered channel
    """
    try:
        return await cache.get_or_refresh(
            STATUS_KEY,
            max_age,
            lambda: _statuses_as_dicts(aggregator),
        )
    except Exception as exc:  # Catch-all to ensure API stability
        logger.error("Unexpected error collecting statuses: %s", exc, exc_info=True)
        timestamp = iso_timestamp()
        return [
            ChannelStatus.failed(channel, str(exc), timestamp).to_dict()
            for channel in aggregator.channels
        ]


async def collect_schedule_payload(
    aggregator: NowPlayingAggregator,
    cache: SnapshotCache,
    max_age: float,
) -> dict:
    """
    Build the schedule-mode payload

    Args:
        aggregator: Aggregator for the channel registry
        cache: Snapshot cache shared across requests
        max_age: Cache lifetime of the schedule snapshot in seconds

    Returns:
        Dictionary with upcoming entries, count and timestamp (plus error on failure)
    """
    try:
        return await cache.get_or_refresh(
            SCHEDULE_KEY,
            max_age,
            lambda: _schedule_as_dict(aggregator),
        )
    except Exception as exc:  # Catch-all to ensure API stability
        logger.error("Unexpected error collecting schedule: %s", exc, exc_info=True)
        payload = AggregatedSchedule(timestamp=iso_timestamp()).to_dict()
        payload["error"] = str(exc) or type(exc).__name__
        return payload


async def refresh_snapshots(aggregator: NowPlayingAggregator, cache: SnapshotCache) -> dict:
    """
    Re-collect both payloads into the cache

    Returns:
        Summary with per-mode counts or errors
    """
    summary: dict = {"timestamp": iso_timestamp()}

    try:
        statuses = await cache.refresh(
            STATUS_KEY,
            lambda: _statuses_as_dicts(aggregator),
        )
        summary["statuses"] = len(statuses)
    except Exception as exc:
        logger.error("Status refresh failed: %s", exc, exc_info=True)
        summary["status_error"] = str(exc)

    try:
        schedule = await cache.refresh(
            SCHEDULE_KEY,
            lambda: _schedule_as_dict(aggregator),
        )
        summary["upcoming"] = schedule["count"]
    except Exception as exc:
        logger.error("Schedule refresh failed: %s", exc, exc_info=True)
        summary["schedule_error"] = str(exc)

    return summary


async def _statuses_as_dicts(aggregator: NowPlayingAggregator) -> list[dict]:
    return [status.to_dict() for status in await aggregator.get_statuses()]


async def _schedule_as_dict(aggregator: NowPlayingAggregator) -> dict:
    return (await aggregator.get_schedule()).to_dict()
