"""
Shared dataclasses produced by the extractors and consumed by the formatter.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from nowplaying.channels import Channel


DEFAULT_DJ_NAME = "AutoDJ"
DEFAULT_SHOW_NAME = "Mixed Hits"


@dataclass(frozen=True, slots=True)
class ChannelStatus:
    """What one channel is broadcasting at capture time."""
    channel_id: str
    channel_name: str
    timestamp: str
    is_live: bool = False
    is_replay: bool = False
    dj_name: str = DEFAULT_DJ_NAME
    show_name: str = DEFAULT_SHOW_NAME
    dj_slug: str = ""
    dj_image: str = ""
    dj_profile_url: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.is_live and self.is_replay:
            raise ValueError("A channel cannot be both live and replaying")

    @classmethod
    def failed(cls, channel: Channel, message: str, timestamp: str) -> ChannelStatus:
        """Default-filled status for a channel whose pipeline failed."""
        return cls(
            channel_id=channel.id,
            channel_name=channel.display_name,
            timestamp=timestamp,
            error=message or "Unknown error",
        )

    def to_dict(self) -> dict:
        payload = {
            "channel": self.channel_id,
            "channelName": self.channel_name,
            "isLive": self.is_live,
            "isReplay": self.is_replay,
            "djName": self.dj_name,
            "showName": self.show_name,
            "djSlug": self.dj_slug,
            "djImage": self.dj_image,
            "djProfileUrl": self.dj_profile_url,
            "timestamp": self.timestamp,
        }
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True, slots=True)
class ScheduleEntry:
    """One upcoming show; channel fields are unset for site-wide entries."""
    time: str
    dj_name: str
    show_name: str
    channel_id: str | None = None
    channel_name: str | None = None

    @property
    def dedup_key(self) -> tuple[str, str]:
        return self.time, self.dj_name

    def to_dict(self) -> dict:
        payload = {
            "time": self.time,
            "djName": self.dj_name,
            "showName": self.show_name,
        }
        if self.channel_id is not None:
            payload["channel"] = self.channel_id
            payload["channelName"] = self.channel_name
        return payload


@dataclass(slots=True)
class AggregatedSchedule:
    """
    Upcoming shows in discovery order.

    No two entries share the same (time, dj_name); the first entry seen for a
    key is kept and later ones are dropped.
    """
    timestamp: str
    entries: list[ScheduleEntry] = field(default_factory=list)
    _seen: set[tuple[str, str]] = field(default_factory=set, repr=False)

    @property
    def count(self) -> int:
        return len(self.entries)

    def add(self, entry: ScheduleEntry) -> bool:
        """Append an entry unless its key is taken. Returns True if appended."""
        key = entry.dedup_key
        if key in self._seen:
            return False
        self._seen.add(key)
        self.entries.append(entry)
        return True

    def extend(self, entries: list[ScheduleEntry]) -> int:
        """Add entries in order, returning how many were kept."""
        return sum(1 for entry in entries if self.add(entry))

    def to_dict(self) -> dict:
        return {
            "upcoming": [entry.to_dict() for entry in self.entries],
            "count": self.count,
            "timestamp": self.timestamp,
        }


__all__ = [
    "DEFAULT_DJ_NAME",
    "DEFAULT_SHOW_NAME",
    "ChannelStatus",
    "ScheduleEntry",
    "AggregatedSchedule",
]
