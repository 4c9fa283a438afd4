"""
Services package for the Now Playing service

This package contains all extraction, aggregation and response logic.
"""
from nowplaying.services.aggregation_service import NowPlayingAggregator
from nowplaying.services.nowplaying_service import (
    collect_schedule_payload,
    collect_status_payload,
    refresh_snapshots,
)
from nowplaying.services.response_formatter import format_schedule, format_statuses
from nowplaying.services.schedule_extractor import extract_schedule
from nowplaying.services.snapshot_cache import SnapshotCache
from nowplaying.services.status_extractor import extract_status

__all__ = [
    'NowPlayingAggregator',
    'SnapshotCache',
    'collect_schedule_payload',
    'collect_status_payload',
    'refresh_snapshots',
    'extract_schedule',
    'extract_status',
    'format_schedule',
    'format_statuses',
]
