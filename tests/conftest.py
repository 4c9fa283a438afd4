"""Shared fixtures: a synthetic channel registry and an in-memory page fetcher."""

import asyncio

import pytest

from nowplaying.channels import build_registry
from nowplaying.services.aggregation_service import NowPlayingAggregator
from nowplaying.utils.page_fetch import PageFetchError


BASE_URL = "https://virtualdjradio.com"
SCHEDULE_URL = "https://virtualdjradio.com/schedule/"
CHANNEL_HEADING = "Next Up"
SITE_HEADING = "Upcoming Shows"


LIVE_PAGE = """<html><body>
<div class="player"><span class="badge">LIVE</span>
<a href="/djs/djnova/"><img src="/image/dj_banner/4821.jpg" alt=""></a>
<h2>Dj Nova</h2>
<p>Club Vibes (2025-08-08)</p>
</div>
<h3>Track History</h3>
<ul><li>Artist - Song</li></ul>
</body></html>"""

REPLAY_PAGE = """<html><body>
<nav><a href="/listen/">LIVE</a></nav>
<div class="player"><span class="badge">Replay</span>
<h2>DJ Pulse</h2>
<p>Deep Sessions (2025-07-30)</p>
</div>
</body></html>"""

EMPTY_PAGE = """<html><body><p>Welcome to the station</p></body></html>"""


class FakeFetcher:
    """Serves canned page text by URL; values may be exceptions or (delay, text) pairs."""

    def __init__(self, pages: dict):
        self.pages = pages
        self.requested: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_text(self, url: str) -> str:
        self.requested.append(url)
        page = self.pages.get(url)

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if isinstance(page, tuple):
                delay, page = page
                await asyncio.sleep(delay)
            else:
                await asyncio.sleep(0)
        finally:
            self.in_flight -= 1

        if isinstance(page, BaseException):
            raise page
        if page is None:
            raise PageFetchError(url, f"HTTP 404 fetching {url}")
        return page


@pytest.fixture
def channels():
    return build_registry(BASE_URL)


@pytest.fixture
def make_aggregator(channels):
    def _make(pages: dict) -> NowPlayingAggregator:
        return NowPlayingAggregator(
            channels,
            FakeFetcher(pages),
            base_url=BASE_URL,
            schedule_page_url=SCHEDULE_URL,
            channel_heading=CHANNEL_HEADING,
            site_heading=SITE_HEADING,
        )
    return _make
