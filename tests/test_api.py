"""Tests for the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from nowplaying.dependencies import get_aggregator, get_snapshot_cache, reset_dependencies
from nowplaying.main import app
from nowplaying.services.snapshot_cache import SnapshotCache

from tests.conftest import BASE_URL, LIVE_PAGE, REPLAY_PAGE, SCHEDULE_URL


PAGES = {
    f"{BASE_URL}/clubzone/": LIVE_PAGE,
    f"{BASE_URL}/hypnotica/": REPLAY_PAGE,
    f"{BASE_URL}/powerbase/": ConnectionError("network unreachable"),
    f"{BASE_URL}/thegrind/": "<h3>Next Up</h3><p>9:00 PM</p><p>DJ Nova</p><p>Club Vibes</p>",
    SCHEDULE_URL: "<h2>Upcoming Shows</h2><p>9:00 PM | DJ Nova | Other Show</p>",
}


@pytest.fixture
def client(make_aggregator):
    aggregator = make_aggregator(PAGES)
    app.dependency_overrides[get_aggregator] = lambda: aggregator
    cache = SnapshotCache()
    app.dependency_overrides[get_snapshot_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


class ExplodingAggregator:
    def __init__(self, channels):
        self.channels = channels

    async def get_statuses(self):
        raise RuntimeError("registry unavailable")

    async def get_schedule(self):
        raise RuntimeError("registry unavailable")


@pytest.fixture
def broken_client(channels):
    aggregator = ExplodingAggregator(channels)
    app.dependency_overrides[get_aggregator] = lambda: aggregator
    cache = SnapshotCache()
    app.dependency_overrides[get_snapshot_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_status_mode_is_default(client):
    response = client.get("/api/nowplaying")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.headers["cache-control"] == "public, max-age=30"
    assert response.headers["access-control-allow-origin"] == "*"

    body = response.json()
    assert [item["channel"] for item in body] == ["clubzone", "hypnotica", "powerbase", "thegrind"]
    assert body[0]["isLive"] is True
    assert body[0]["djName"] == "Dj Nova"
    assert body[0]["djProfileUrl"] == "https://virtualdjradio.com/djs/djnova/"
    assert body[1]["isReplay"] is True
    assert body[2]["error"] == "network unreachable"
    assert body[2]["djName"] == "AutoDJ"
    assert body[3]["djProfileUrl"] is None
    assert "error" not in body[3]


def test_schedule_mode(client):
    response = client.get("/api/nowplaying", params={"type": "schedule"})

    assert response.status_code == 200
    assert response.headers["cache-control"] == "public, max-age=60"
    assert response.headers["access-control-allow-origin"] == "*"

    body = response.json()
    assert body["count"] == 1
    assert body["upcoming"] == [{
        "time": "9:00 PM",
        "djName": "DJ Nova",
        "showName": "Club Vibes",
        "channel": "thegrind",
        "channelName": "TheGrind",
    }]
    assert "timestamp" in body
    assert "error" not in body


def test_invalid_mode_is_rejected(client):
    response = client.get("/api/nowplaying", params={"type": "history"})

    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["query", "type"]


def test_unexpected_status_failure_becomes_data(broken_client):
    response = broken_client.get("/api/nowplaying")

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 4
    assert all(item["error"] == "registry unavailable" for item in body)
    assert all(item["isLive"] is False and item["showName"] == "Mixed Hits" for item in body)


def test_unexpected_schedule_failure_becomes_data(broken_client):
    response = broken_client.get("/api/nowplaying", params={"type": "schedule"})

    assert response.status_code == 200
    body = response.json()
    assert body["upcoming"] == []
    assert body["count"] == 0
    assert body["error"] == "registry unavailable"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "channels": 4, "refresher_running": False}


def test_root_lists_channels(client):
    body = client.get("/").json()

    assert body["channels"] == ["clubzone", "hypnotica", "powerbase", "thegrind"]
    assert body["next_scheduled_refresh"] is None
    assert "nowplaying" in body["endpoints"]


def test_default_aggregator_is_built_from_settings():
    reset_dependencies()
    aggregator = get_aggregator()

    assert [channel.id for channel in aggregator.channels] == ["clubzone", "hypnotica", "powerbase", "thegrind"]
    assert aggregator.fetcher.client_identifier == "VDJRadio-App/1.0"
    assert aggregator.schedule_page_url == "https://virtualdjradio.com/schedule/"
    assert get_aggregator() is aggregator

    reset_dependencies()
    assert get_aggregator() is not aggregator
    reset_dependencies()
