"""
Dependency Configuration

Provides the process-wide aggregator, snapshot cache and background refresher
used by the routes. All are built lazily from settings on first use; tests
replace them through FastAPI's dependency_overrides or reset_dependencies().
"""
import logging

from nowplaying.channels import build_registry
from nowplaying.config import settings
from nowplaying.services.aggregation_service import NowPlayingAggregator
from nowplaying.services.nowplaying_service import refresh_snapshots
from nowplaying.services.scheduler_service import SnapshotRefresher
from nowplaying.services.snapshot_cache import SnapshotCache
from nowplaying.utils.page_fetch import PageFetcher


logger = logging.getLogger(__name__)

_aggregator: NowPlayingAggregator | None = None
_snapshot_cache: SnapshotCache | None = None
_refresher: SnapshotRefresher | None = None


def build_aggregator() -> NowPlayingAggregator:
    """Create an aggregator for the configured channel registry."""
    fetcher = PageFetcher(
        settings.client_identifier,
        timeout=settings.fetch_timeout_sec,
        max_retries=settings.fetch_max_retries,
        backoff_factor=settings.fetch_backoff_factor,
    )
    channels = build_registry(settings.source_base_url)
    logger.debug("Channel registry: %s", ", ".join(channel.id for channel in channels))
    return NowPlayingAggregator(
        channels,
        fetcher,
        base_url=settings.source_base_url,
        schedule_page_url=settings.schedule_page_url,
        channel_heading=settings.channel_schedule_heading,
        site_heading=settings.site_schedule_heading,
    )


def get_aggregator() -> NowPlayingAggregator:
    """
    Get the global aggregator instance.

    Returns:
        The global NowPlayingAggregator
    """
    global _aggregator
    if _aggregator is None:
        _aggregator = build_aggregator()
    return _aggregator


def get_snapshot_cache() -> SnapshotCache:
    """
    Get the global snapshot cache instance.

    Returns:
        The global SnapshotCache
    """
    global _snapshot_cache
    if _snapshot_cache is None:
        _snapshot_cache = SnapshotCache()
    return _snapshot_cache


async def _refresh_global_snapshots() -> dict:
    return await refresh_snapshots(get_aggregator(), get_snapshot_cache())


def get_refresher() -> SnapshotRefresher:
    """
    Get the global background refresher.

    Returns:
        The global SnapshotRefresher (inactive when refresh_interval_sec is 0)
    """
    global _refresher
    if _refresher is None:
        _refresher = SnapshotRefresher(_refresh_global_snapshots, settings.refresh_interval_sec)
    return _refresher


def reset_dependencies() -> None:
    """
    Reset the aggregator, cache and refresher (mainly for testing).

    WARNING: Only use this in test environments!
    """
    global _aggregator, _snapshot_cache, _refresher
    if _refresher is not None:
        _refresher.shutdown()
    _aggregator = None
    _snapshot_cache = None
    _refresher = None
