"""
Schedule Extraction Service

Finds an "upcoming shows" section in raw page text and parses its entries.
Channel pages and the site-wide schedule page use different headings; entries
from a channel page are tagged with that channel.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from nowplaying.channels import Channel
from nowplaying.services.status_types import ScheduleEntry
from nowplaying.utils.text import collapse_whitespace


logger = logging.getLogger(__name__)

# Headings that follow an upcoming-shows listing, plus footer markers
SECTION_BOUNDARIES: tuple[str, ...] = (
    "Recently Played",
    "Track History",
    "Past Shows",
    "Top DJs",
    "Chat",
    "<footer",
    "Copyright",
    "©",
)

_MERIDIEM = r"[ \t]*[ap]\.?m\b\.?"
# A meridiem that is present always belongs to the time token
_TIME = rf"(?<![\d:])(\d{{1,2}}:\d{{2}}(?:{_MERIDIEM}|(?!{_MERIDIEM})))(?![\d:])"
_LEAD = r"(?:\s|<[^>]*>|[|•·–—:\-])*"
# Each repetition owns only the spacing before its token
_ENTRY_SEP = r"(?:[ \t\r\f\v]*(?:<[^>]*>|\n|[|•·–—])|[ \t\r\f\v]+-(?=[ \t]))+[ \t\r\f\v]*"
_NAME = r"([a-z0-9][a-z0-9 '\-]*?)"
# A show name ends at markup, a line break, a separator or the next time token
_NAME_END = r"(?=[ \t\r\f\v]*(?:<|\n|$|[|•·–—]| - |(?<!\d)\d{1,2}:\d{2}))"

_ENTRY_RE = re.compile(
    _TIME + _LEAD + _NAME + _ENTRY_SEP + _NAME + _NAME_END,
    re.IGNORECASE,
)


def find_section(content: str, heading: str, boundaries: Sequence[str] = SECTION_BOUNDARIES) -> str | None:
    """
    Locate the body of a section

    Args:
        content: Raw page text
        heading: Section heading to look for (case-insensitive, first occurrence)
        boundaries: Markers that end the section

    Returns:
        Text between the heading and the nearest boundary (or end of content),
        None if the heading does not occur
    """
    lowered = content.lower()
    index = lowered.find(heading.lower())
    if index < 0:
        return None

    start = index + len(heading)
    end = len(content)
    for marker in boundaries:
        position = lowered.find(marker.lower(), start)
        if position >= 0:
            end = min(end, position)

    return content[start:end]


def parse_entries(section: str, channel: Channel | None = None) -> list[ScheduleEntry]:
    """Parse 'time / DJ / show' entries out of a section body."""
    entries = []
    for match in _ENTRY_RE.finditer(section):
        time_token, dj_name, show_name = (collapse_whitespace(group) for group in match.groups())
        if not dj_name or not show_name:
            continue
        entries.append(
            ScheduleEntry(
                time=time_token,
                dj_name=dj_name,
                show_name=show_name,
                channel_id=channel.id if channel else None,
                channel_name=channel.display_name if channel else None,
            )
        )
    return entries


def extract_schedule(
    content: str,
    heading: str,
    *,
    channel: Channel | None = None,
    boundaries: Sequence[str] = SECTION_BOUNDARIES,
) -> list[ScheduleEntry]:
    """
    Extract upcoming shows from a page

    Never raises: a missing heading, an empty section or an internal error
    all yield an empty list.

    Args:
        content: Raw page text
        heading: Section heading marking the listing
        channel: Channel the page belongs to, None for site-wide pages
        boundaries: Markers that end the section

    Returns:
        Schedule entries in page order
    """
    source = channel.id if channel else "site"
    try:
        section = find_section(content or "", heading, boundaries)
        if section is None:
            logger.debug("[%s] Heading %r not found", source, heading)
            return []

        entries = parse_entries(section, channel)
    except Exception as exc:
        logger.error("Schedule extraction failed for %s: %s", source, exc, exc_info=True)
        return []

    logger.debug("[%s] Parsed %s schedule entries under %r", source, len(entries), heading)
    return entries


def extract_channel_schedule(content: str, channel: Channel, heading: str) -> list[ScheduleEntry]:
    """Entries from a channel page, tagged with the channel."""
    return extract_schedule(content, heading, channel=channel)


def extract_site_schedule(content: str, heading: str) -> list[ScheduleEntry]:
    """Entries from the site-wide schedule page, untagged."""
    return extract_schedule(content, heading)
