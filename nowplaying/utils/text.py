"""
Text normalization utilities

Small, pure helpers shared by the status and schedule extractors.
"""
import re


_DATE_SUFFIX_RE = re.compile(r"(?:\s*\(\d{4}-\d{2}-\d{2}\))+\s*$")
_LEADING_DJ_RE = re.compile(r"^dj", re.IGNORECASE)
_CASE_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")
_LEADING_TITLED_DJ_RE = re.compile(r"^Dj\b")


def collapse_whitespace(text: str) -> str:
    """Trim and collapse internal whitespace runs to single spaces."""
    return " ".join(text.split())


def strip_date_suffix(show_name: str) -> str:
    """
    Remove a trailing '(YYYY-MM-DD)' date token from a show name

    Repeated suffixes are removed together, so applying this twice gives the
    same result as applying it once.

    Args:
        show_name: Raw show name, e.g. 'Club Vibes (2025-08-08)'

    Returns:
        Show name without the date suffix, e.g. 'Club Vibes'
    """
    return _DATE_SUFFIX_RE.sub("", show_name).strip()


def slug_to_display_name(slug: str) -> str:
    """
    Synthesize a display name from a DJ profile slug

    A leading 'dj' becomes 'DJ ', a lowercase-to-uppercase transition starts a
    new word, every word is capitalized and the leading 'Dj' is re-normalized.

    Args:
        slug: Profile slug, e.g. 'djmakoby' or 'DJNova'

    Returns:
        Display name, e.g. 'DJ Makoby' or 'DJ Nova'
    """
    name = _LEADING_DJ_RE.sub("DJ ", slug.strip())
    name = _CASE_BOUNDARY_RE.sub(r"\1 \2", name)
    name = " ".join(word.capitalize() for word in name.split())
    return _LEADING_TITLED_DJ_RE.sub("DJ", name)


def build_banner_url(base_url: str, banner_id: str) -> str:
    """Absolute URL of a DJ banner image."""
    return f"{base_url.rstrip('/')}/image/dj_banner/{banner_id}.jpg"


def build_profile_url(base_url: str, slug: str) -> str | None:
    """Absolute URL of a DJ profile page, None without a slug."""
    if not slug:
        return None
    return f"{base_url.rstrip('/')}/djs/{slug}/"
