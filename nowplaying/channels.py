"""
Channel Registry

Static set of broadcast channels polled by the service. Built once at process
start and handed to the aggregator; never mutated afterwards.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Channel:
    """One independently programmed stream with its own source page."""
    id: str
    display_name: str
    source_url: str


# (id, display name) in presentation order
DEFAULT_CHANNELS: tuple[tuple[str, str], ...] = (
    ("clubzone", "ClubZone"),
    ("hypnotica", "Hypnotica"),
    ("powerbase", "PowerBase"),
    ("thegrind", "TheGrind"),
)


def build_registry(
    base_url: str,
    channels: Sequence[tuple[str, str]] = DEFAULT_CHANNELS,
) -> tuple[Channel, ...]:
    """
    Build the immutable channel registry

    Args:
        base_url: Source site root, e.g. https://virtualdjradio.com
        channels: (id, display name) pairs

    Returns:
        Tuple of Channel records, one page per channel at <base_url>/<id>/

    Raises:
        ValueError: If channel ids are not unique
    """
    root = base_url.rstrip("/")
    registry = tuple(
        Channel(id=channel_id, display_name=name, source_url=f"{root}/{channel_id}/")
        for channel_id, name in channels
    )

    ids = [channel.id for channel in registry]
    if len(ids) != len(set(ids)):
        raise ValueError(f"Duplicate channel ids in registry: {ids}")

    return registry
