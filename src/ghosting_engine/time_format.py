"""Time-string helpers shared by the loader, validator and player UI."""

from __future__ import annotations

import math
import re

_MMSS_FRACTION = re.compile(r"^(\d+):(\d+)\.(\d+)$")
_MMSS = re.compile(r"^(\d+):(\d+)$")
_DURATION = re.compile(r"^(\d+(?:\.\d+)?)s$")


def seconds_to_time_str(
    seconds: float, precise: bool = False, high_precision: bool = False
) -> str:
    """Format seconds as ``MM:SS`` (``MM:SS.cc`` / ``MM:SS.mmm`` if asked).

    Negative or non-numeric input formats as zero.
    """
    if not isinstance(seconds, (int, float)) or isinstance(seconds, bool) or seconds < 0:
        return "00:00.00" if precise else "00:00"
    minutes = math.floor(seconds / 60)
    rest = seconds % 60
    whole = math.floor(rest)
    if precise:
        return f"{minutes:02d}:{whole:02d}.{math.floor((rest % 1) * 100):02d}"
    if high_precision:
        return f"{minutes:02d}:{whole:02d}.{math.floor((rest % 1) * 1000):03d}"
    return f"{minutes:02d}:{whole:02d}"


def time_str_to_seconds(value: str | float) -> float:
    """Parse ``MM:SS`` or ``MM:SS.cc`` (hundredths). Numbers pass through.

    Unparseable strings give 0.0.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, str):
        return 0.0
    m = _MMSS_FRACTION.match(value)
    if m:
        return int(m.group(1)) * 60 + int(m.group(2)) + int(m.group(3)) / 100
    m = _MMSS.match(value)
    if m:
        return float(int(m.group(1)) * 60 + int(m.group(2)))
    return 0.0


def parse_duration(value: str) -> float:
    """Parse ``"5s"`` / ``"2.5s"``; anything else gives 0.0."""
    if not isinstance(value, str):
        return 0.0
    m = _DURATION.match(value)
    return float(m.group(1)) if m else 0.0


def parse_time_value(value: str | float) -> float | None:
    """Seconds from a number, ``MM:SS``, ``MM:SS.cc``, ``"5s"`` or ``"30"``.

    Returns None when the string matches none of those forms.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if _MMSS.match(text) or _MMSS_FRACTION.match(text):
        return time_str_to_seconds(text)
    if _DURATION.match(text):
        return parse_duration(text)
    try:
        return float(text)
    except ValueError:
        return None


def format_remaining_time(seconds: float) -> str:
    """``"1:05 min"`` from a minute up, ``"12.5s"`` below."""
    if seconds >= 60:
        return f"{math.floor(seconds / 60)}:{math.floor(seconds % 60):02d} min"
    return f"{seconds:.1f}s"
