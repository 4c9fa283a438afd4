"""
Status Extraction Service

Turns the raw text of one channel page into a ChannelStatus.

The page has no stable structure, so extraction is an ordered cascade of
independent rules over the same content. Each rule returns a partial result;
a field keeps the first non-placeholder value any rule produced, so later
rules only fill what earlier ones left open.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping

from nowplaying.channels import Channel
from nowplaying.services.status_types import (
    DEFAULT_DJ_NAME,
    DEFAULT_SHOW_NAME,
    ChannelStatus,
)
from nowplaying.utils.text import (
    build_banner_url,
    build_profile_url,
    collapse_whitespace,
    slug_to_display_name,
    strip_date_suffix,
)
from nowplaying.utils.timestamps import iso_timestamp


logger = logging.getLogger(__name__)

Rule = Callable[[str, Mapping[str, object], str], dict]

# At least one tag or line break, with horizontal whitespace around it
_SEP = r"(?:[ \t\r\f\v]*(?:<[^>]*>|\n))+[ \t\r\f\v]*"
# Same, but plain spacing is enough
_GAP = r"(?:[ \t\r\f\v]*(?:<[^>]*>|\n))*[ \t\r\f\v]*"
_STATUS_TOKEN = r"\b(?:live|replay)\b"
_DJ_PHRASE = r"((?:dj )?[a-z0-9][a-z0-9 ]*)"

_LIVE_MARKER_RE = re.compile(r">\s*live\s*<", re.IGNORECASE)
_REPLAY_MARKER_RE = re.compile(r"replay", re.IGNORECASE)
_BANNER_RE = re.compile(r"dj_banner/(\d+)\.jpg", re.IGNORECASE)
_PROFILE_LINK_RE = re.compile(
    r"""href\s*=\s*["'](?:https?://[^/"'\s]+)?/djs/([a-z0-9]+)/["']""",
    re.IGNORECASE,
)
_DATED_NAME_RE = re.compile(
    _STATUS_TOKEN + _GAP + _DJ_PHRASE + _SEP
    + r"([a-z0-9][a-z0-9 '\-]*?)[ \t]*\(\d{4}-\d{2}-\d{2}\)",
    re.IGNORECASE,
)
_YEAR_NAME_RE = re.compile(
    _STATUS_TOKEN + _GAP + _DJ_PHRASE + _SEP
    + r"([a-z0-9][a-z0-9 '\-]*?)[ \t]*\(?\d{4}(?!\d)",
    re.IGNORECASE,
)

# Values that count as "not resolved yet" for a field
_PLACEHOLDERS = {
    "dj_name": DEFAULT_DJ_NAME,
    "show_name": DEFAULT_SHOW_NAME,
}


def _match_broadcast_markers(content: str, resolved: Mapping[str, object], base_url: str) -> dict:
    is_replay = _REPLAY_MARKER_RE.search(content) is not None
    is_live = _LIVE_MARKER_RE.search(content) is not None and not is_replay
    return {"is_live": is_live, "is_replay": is_replay}


def _match_banner_image(content: str, resolved: Mapping[str, object], base_url: str) -> dict:
    match = _BANNER_RE.search(content)
    if not match:
        return {}
    return {"dj_image": build_banner_url(base_url, match.group(1))}


def _match_profile_slug(content: str, resolved: Mapping[str, object], base_url: str) -> dict:
    match = _PROFILE_LINK_RE.search(content)
    if not match:
        return {}
    return {"dj_slug": match.group(1)}


def _names_from(match: re.Match | None) -> dict:
    if not match:
        return {}
    return {
        "dj_name": collapse_whitespace(match.group(1)),
        "show_name": collapse_whitespace(match.group(2)),
    }


def _match_dated_name_phrase(content: str, resolved: Mapping[str, object], base_url: str) -> dict:
    """'Live / Dj Name / Show Name (2025-08-08)'"""
    return _names_from(_DATED_NAME_RE.search(content))


def _match_year_name_phrase(content: str, resolved: Mapping[str, object], base_url: str) -> dict:
    """Looser variant: only a 4-digit year has to follow the show name."""
    if not _is_unresolved("dj_name", resolved.get("dj_name")):
        return {}
    return _names_from(_YEAR_NAME_RE.search(content))


def _derive_name_from_slug(content: str, resolved: Mapping[str, object], base_url: str) -> dict:
    slug = resolved.get("dj_slug")
    if not slug or not _is_unresolved("dj_name", resolved.get("dj_name")):
        return {}
    return {"dj_name": slug_to_display_name(str(slug))}


# Order matters: the slug-derived name is a last resort after both text rules
STATUS_RULES: tuple[tuple[str, Rule], ...] = (
    ("broadcast_markers", _match_broadcast_markers),
    ("banner_image", _match_banner_image),
    ("profile_slug", _match_profile_slug),
    ("dated_name_phrase", _match_dated_name_phrase),
    ("year_name_phrase", _match_year_name_phrase),
    ("slug_name", _derive_name_from_slug),
)


def _is_unresolved(field_name: str, value: object) -> bool:
    return value is None or value == "" or value == _PLACEHOLDERS.get(field_name)


def run_rules(content: str, base_url: str, rules=STATUS_RULES) -> dict:
    """
    Apply the rule cascade with first-success-per-field merging

    Args:
        content: Raw page text
        base_url: Source site root for rebuilding absolute URLs
        rules: Ordered (name, rule) pairs

    Returns:
        Dictionary of resolved fields (missing keys were never resolved)
    """
    resolved: dict[str, object] = {}

    for name, rule in rules:
        partial = rule(content, resolved, base_url)
        for field_name, value in partial.items():
            if _is_unresolved(field_name, value):
                continue
            if field_name in resolved and not _is_unresolved(field_name, resolved[field_name]):
                continue
            resolved[field_name] = value
            logger.debug("Rule %s resolved %s=%r", name, field_name, value)

    return resolved


def extract_status(
    content: str,
    channel: Channel,
    *,
    base_url: str,
    timestamp: str | None = None,
) -> ChannelStatus:
    """
    Extract the current broadcast status from one channel page

    Never raises: an internal failure yields an error-bearing default status.

    Args:
        content: Raw text of the channel page
        channel: Channel the page belongs to
        base_url: Source site root used to rebuild image and profile URLs
        timestamp: Capture time (defaults to now)

    Returns:
        ChannelStatus for the channel
    """
    timestamp = timestamp or iso_timestamp()

    try:
        resolved = run_rules(content or "", base_url)

        show_name = strip_date_suffix(str(resolved.get("show_name") or ""))
        dj_slug = str(resolved.get("dj_slug") or "")

        status = ChannelStatus(
            channel_id=channel.id,
            channel_name=channel.display_name,
            timestamp=timestamp,
            is_live=bool(resolved.get("is_live")),
            is_replay=bool(resolved.get("is_replay")),
            dj_name=str(resolved.get("dj_name") or DEFAULT_DJ_NAME),
            show_name=show_name or DEFAULT_SHOW_NAME,
            dj_slug=dj_slug,
            dj_image=str(resolved.get("dj_image") or ""),
            dj_profile_url=build_profile_url(base_url, dj_slug),
        )
    except Exception as exc:
        logger.error("Status extraction failed for %s: %s", channel.id, exc, exc_info=True)
        return ChannelStatus.failed(channel, f"Extraction failed: {exc}", timestamp)

    logger.debug(
        "[%s] live=%s replay=%s dj=%r show=%r slug=%r",
        channel.id,
        status.is_live,
        status.is_replay,
        status.dj_name,
        status.show_name,
        status.dj_slug,
    )
    return status
