"""Tests for the channel status rule cascade."""

import pytest

from nowplaying.channels import Channel
from nowplaying.services import status_extractor
from nowplaying.services.status_extractor import extract_status, run_rules
from nowplaying.services.status_types import DEFAULT_DJ_NAME, DEFAULT_SHOW_NAME

from tests.conftest import BASE_URL, EMPTY_PAGE, LIVE_PAGE, REPLAY_PAGE


CHANNEL = Channel(id="clubzone", display_name="ClubZone", source_url=f"{BASE_URL}/clubzone/")

SLUG_ONLY_PAGE = """<html><body>
<div class="status"><span>LIVE</span></div>
<a href="/djs/djmakoby/">Profile</a>
<ul class="tracks"><li>Track One</li></ul>
</body></html>"""

YEAR_ONLY_PAGE = """<div class="player"><span class="badge">Replay</span>
<h2>Dj Echo</h2>
<p>Sunset Grooves (2025-08</p>
</div>"""


def extract(content):
    return extract_status(content, CHANNEL, base_url=BASE_URL, timestamp="2025-08-08T21:00:00.000Z")


def test_live_page_resolves_every_field():
    status = extract(LIVE_PAGE)

    assert status.channel_id == "clubzone"
    assert status.channel_name == "ClubZone"
    assert status.is_live is True
    assert status.is_replay is False
    assert status.dj_name == "Dj Nova"
    assert status.show_name == "Club Vibes"
    assert status.dj_slug == "djnova"
    assert status.dj_image == "https://virtualdjradio.com/image/dj_banner/4821.jpg"
    assert status.dj_profile_url == "https://virtualdjradio.com/djs/djnova/"
    assert status.timestamp == "2025-08-08T21:00:00.000Z"
    assert status.error is None


def test_replay_marker_wins_over_live_marker():
    status = extract(REPLAY_PAGE)

    assert status.is_replay is True
    assert status.is_live is False
    assert status.dj_name == "DJ Pulse"
    assert status.show_name == "Deep Sessions"


def test_live_marker_is_case_insensitive():
    status = extract("<span> Live </span>")

    assert status.is_live is True
    assert status.is_replay is False


def test_year_fallback_when_date_is_incomplete():
    status = extract(YEAR_ONLY_PAGE)

    assert status.is_replay is True
    assert status.dj_name == "Dj Echo"
    assert status.show_name == "Sunset Grooves"


def test_slug_derived_name_when_no_name_phrase():
    status = extract(SLUG_ONLY_PAGE)

    assert status.dj_name == "DJ Makoby"
    assert status.is_live is True
    assert status.is_replay is False
    assert status.show_name == DEFAULT_SHOW_NAME
    assert status.dj_profile_url == "https://virtualdjradio.com/djs/djmakoby/"


def test_text_name_beats_slug_name():
    status = extract(LIVE_PAGE.replace("/djs/djnova/", "/djs/someoneelse/"))

    assert status.dj_name == "Dj Nova"
    assert status.dj_slug == "someoneelse"


def test_mixed_case_slug_gets_word_boundaries():
    status = extract('<span>LIVE</span><a href="/djs/DJNightOwl/">x</a>')

    assert status.dj_name == "DJ Night Owl"


def test_page_without_markers_uses_defaults():
    status = extract(EMPTY_PAGE)

    assert status.is_live is False
    assert status.is_replay is False
    assert status.dj_name == DEFAULT_DJ_NAME
    assert status.show_name == DEFAULT_SHOW_NAME
    assert status.dj_slug == ""
    assert status.dj_image == ""
    assert status.dj_profile_url is None
    assert status.error is None


@pytest.mark.parametrize("content", ["", None, "<<<>>>", "replay LIVE >live< (2025-01-01)"])
def test_degenerate_content_never_raises(content):
    status = extract(content)

    assert status.dj_name
    assert status.show_name
    assert not (status.is_live and status.is_replay)


@pytest.mark.parametrize("content", [LIVE_PAGE, REPLAY_PAGE, SLUG_ONLY_PAGE, YEAR_ONLY_PAGE, EMPTY_PAGE])
def test_status_invariants(content):
    status = extract(content)

    assert status.dj_name != ""
    assert status.show_name != ""
    assert not (status.is_live and status.is_replay)
    if status.dj_profile_url is not None:
        assert status.dj_slug
        assert status.dj_profile_url == f"{BASE_URL}/djs/{status.dj_slug}/"


def test_extraction_is_deterministic():
    first = extract(LIVE_PAGE)
    second = extract(LIVE_PAGE)

    assert first == second
    assert first.dj_profile_url == second.dj_profile_url


def test_internal_failure_becomes_error_status(monkeypatch):
    def broken_rules(content, base_url):
        raise RuntimeError("rule table exploded")

    monkeypatch.setattr(status_extractor, "run_rules", broken_rules)

    status = extract(LIVE_PAGE)

    assert status.error == "Extraction failed: rule table exploded"
    assert status.is_live is False
    assert status.is_replay is False
    assert status.dj_name == DEFAULT_DJ_NAME
    assert status.show_name == DEFAULT_SHOW_NAME


def test_first_success_per_field():
    rules = (
        ("first", lambda content, resolved, base: {"dj_name": "Dj A"}),
        ("second", lambda content, resolved, base: {"dj_name": "Dj B", "show_name": "Show B"}),
        ("placeholder", lambda content, resolved, base: {"dj_slug": ""}),
    )

    resolved = run_rules("", BASE_URL, rules)

    assert resolved == {"dj_name": "Dj A", "show_name": "Show B"}


def test_placeholder_values_stay_open_for_later_rules():
    rules = (
        ("sentinel", lambda content, resolved, base: {"dj_name": DEFAULT_DJ_NAME}),
        ("real", lambda content, resolved, base: {"dj_name": "Dj Real"}),
    )

    assert run_rules("", BASE_URL, rules) == {"dj_name": "Dj Real"}
