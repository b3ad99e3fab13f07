"""
Text formatting utilities for change reports.
Provides relative time phrases, path ordering and report line rendering.
"""

import math
import unicodedata
from datetime import datetime
from typing import Optional, Tuple

from core import constants
from core.utils import get_utc_now, to_utc


def _round_half_up(value: float) -> int:
    # round() would round halves to even: -2.5 -> -2 here, 2.5 -> 3
    return math.floor(value + 0.5)


def format_relative_time(past: datetime, now: Optional[datetime] = None) -> str:
    """
    Describes a timestamp relative to now, e.g. "3 days ago" or "in 2 hours".

    The largest unit that fits the distance is used. Months are 365/12 days
    and years are 365 days.

    Args:
        past: Timestamp to describe (naive values are treated as UTC)
        now: Reference time, defaults to the current UTC time

    Returns:
        English long-form relative phrase
    """
    now = to_utc(now) if now else get_utc_now()
    diff_ms = (to_utc(past) - now).total_seconds() * 1000
    abs_diff = abs(diff_ms)

    unit, unit_ms = constants.TIME_UNITS[-1]
    for candidate, candidate_ms in constants.TIME_UNITS:
        if abs_diff >= candidate_ms:
            unit, unit_ms = candidate, candidate_ms
            break

    magnitude = abs(_round_half_up(diff_ms / unit_ms))
    label = unit if magnitude == 1 else f"{unit}s"
    phrase = f"{magnitude:,} {label}"

    if diff_ms < 0:
        return f"{phrase} ago"
    return f"in {phrase}"


def _primary_weight(base: str) -> Tuple[int, int, str]:
    rank = constants.COLLATION_PUNCTUATION.find(base)
    if rank >= 0:
        return 0, rank, ""
    digit = unicodedata.digit(base, None)
    if digit is not None:
        return 2, digit, ""
    if base.isalpha():
        return 3, 0, base.casefold()
    # Other symbols sit between punctuation and digits
    return 1, ord(base), ""


def path_sort_key(path: str) -> Tuple[tuple, tuple, tuple]:
    """
    Sort key following the Unicode root collation used by localeCompare.

    Characters are compared on three levels: base letter (punctuation, then
    symbols, digits and letters), then accents, then case with lowercase
    first. So "a.js" < "A.js" < "foo_bar.js" < "foo.js" < "foo/a.js".
    """
    primary, secondary, tertiary = [], [], []
    for char in path:
        decomposed = unicodedata.normalize("NFD", char)
        base, marks = decomposed[0], decomposed[1:]
        primary.append(_primary_weight(base))
        secondary.append(marks)
        tertiary.append(1 if base.isupper() else 0)
    return tuple(primary), tuple(secondary), tuple(tertiary)


def format_changed_line(path: str, previous_modified: Optional[datetime], now: Optional[datetime] = None) -> str:
    if previous_modified is None:
        return f"{path} ({constants.NEW_FILE_SUFFIX})"
    return f"{path} ({format_relative_time(previous_modified, now)})"


def format_failed_line(url: str, error: str) -> str:
    return f"{url} ({error})"
