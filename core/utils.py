"""
Core utility functions for the mirror.
Provides common functionality used across multiple modules.
"""
import re
import posixpath
from datetime import datetime, timezone
from typing import Iterable, List, Optional, TypeVar

# Type variable for generic helpers
T = TypeVar('T')

UTC = timezone.utc

# "webpack://", "ng://", "file://" ...
SCHEME_PREFIX_RE = re.compile(r"^[a-z]+://")


def get_utc_now() -> datetime:
    """
    Get current datetime in UTC.

    Always returns a timezone-aware datetime object.
    """
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """
    Convert any datetime to UTC.

    Args:
        dt: Datetime object (aware or naive)

    Returns:
        Datetime in UTC; naive datetimes are assumed to already be UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def from_timestamp(timestamp: float) -> datetime:
    """POSIX timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp, tz=UTC)


def strip_source_scheme(source: str) -> str:
    """
    Removes the bundler scheme from a sourcemap ``sources`` entry.

    Example:
        >>> strip_source_scheme("webpack:///src/app.js")
        'src/app.js'
    """
    return SCHEME_PREFIX_RE.sub("", source, count=1).lstrip("/")


def normalize_relative_path(path: str) -> Optional[str]:
    """
    Normalizes a relative POSIX path.

    Returns None for empty paths and for paths that leave their root
    (absolute, or climbing out with "..").
    """
    if not path:
        return None
    if posixpath.isabs(path):
        return None
    normalized = posixpath.normpath(path)
    if normalized in (".", "") or normalized == ".." or normalized.startswith("../"):
        return None
    return normalized


def dedupe(items: Iterable[T]) -> List[T]:
    """Removes duplicates, keeping the first occurrence of each item."""
    seen = set()
    result = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate text to max length with suffix.

    Args:
        text: Text to truncate
        max_length: Maximum allowed length including suffix
        suffix: Suffix to append when truncating

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
