"""
Aggregation Service

Fans page fetches out across the channel registry and feeds the results to the
extractors. Per-source failures are converted to data here and never leave
this module as exceptions.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

from nowplaying.channels import Channel
from nowplaying.services.schedule_extractor import extract_channel_schedule, extract_site_schedule
from nowplaying.services.status_extractor import extract_status
from nowplaying.services.status_types import AggregatedSchedule, ChannelStatus
from nowplaying.utils.timestamps import iso_timestamp


logger = logging.getLogger(__name__)


class TextFetcher(Protocol):
    async def fetch_text(self, url: str) -> str: ...


class NowPlayingAggregator:
    """Collects channel statuses and the upcoming schedule for a channel registry."""

    def __init__(
        self,
        channels: Sequence[Channel],
        fetcher: TextFetcher,
        *,
        base_url: str,
        schedule_page_url: str,
        channel_heading: str,
        site_heading: str,
    ) -> None:
        self.channels: tuple[Channel, ...] = tuple(channels)
        self.fetcher = fetcher
        self.base_url = base_url
        self.schedule_page_url = schedule_page_url
        self.channel_heading = channel_heading
        self.site_heading = site_heading

    async def get_statuses(self) -> list[ChannelStatus]:
        """
        Fetch every channel page concurrently and extract its status

        Returns:
            One ChannelStatus per registered channel, in registry order
        """
        logger.info("Collecting status for %s channels", len(self.channels))

        tasks = [
            asyncio.create_task(self._collect_status(channel))
            for channel in self.channels
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        outcomes = {channel.id: result for channel, result in zip(self.channels, results)}

        statuses = []
        for channel in self.channels:
            outcome = outcomes[channel.id]
            if isinstance(outcome, BaseException):
                logger.error("[%s] Status task failed: %s", channel.id, outcome)
                outcome = ChannelStatus.failed(channel, str(outcome), iso_timestamp())
            statuses.append(outcome)

        failures = sum(1 for status in statuses if status.error)
        logger.info(
            "Status collected: %s channels, %s live, %s failed",
            len(statuses),
            sum(1 for status in statuses if status.is_live),
            failures,
        )
        return statuses

    async def _collect_status(self, channel: Channel) -> ChannelStatus:
        try:
            content = await self.fetcher.fetch_text(channel.source_url)
        except Exception as exc:
            logger.warning("[%s] Failed to fetch %s: %s", channel.id, channel.source_url, exc)
            return ChannelStatus.failed(channel, str(exc), iso_timestamp())

        return extract_status(content, channel, base_url=self.base_url, timestamp=iso_timestamp())

    async def get_schedule(self) -> AggregatedSchedule:
        """
        Collect upcoming shows from every channel page, then the site schedule

        Channel pages are processed sequentially in registry order so the
        first-seen entry for a (time, DJ) pair always comes from the earliest
        source.

        Returns:
            AggregatedSchedule with deduplicated entries
        """
        schedule = AggregatedSchedule(timestamp=iso_timestamp())

        for channel in self.channels:
            try:
                content = await self.fetcher.fetch_text(channel.source_url)
                entries = extract_channel_schedule(content, channel, self.channel_heading)
            except Exception as exc:
                logger.warning("[%s] Skipping schedule source: %s", channel.id, exc)
                continue

            kept = schedule.extend(entries)
            logger.debug("[%s] %s schedule entries, %s kept", channel.id, len(entries), kept)

        try:
            content = await self.fetcher.fetch_text(self.schedule_page_url)
            entries = extract_site_schedule(content, self.site_heading)
        except Exception as exc:
            logger.warning("Skipping site schedule %s: %s", self.schedule_page_url, exc)
        else:
            kept = schedule.extend(entries)
            logger.debug("[site] %s schedule entries, %s kept", len(entries), kept)

        logger.info("Schedule collected: %s upcoming shows", schedule.count)
        return schedule
