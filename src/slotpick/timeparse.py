"""
Time label parsing: free-text labels like "2:30 PM" to a 24-hour hour value.

Labels are practice-local wall-clock time; no timezone handling happens here.
"""

from __future__ import annotations

import re

from .config import DEFAULT_HOUR, TIME_RANGES

_TIME_RE = re.compile(r"(\d+):?(\d*)\s*(AM|PM)?", re.IGNORECASE)


def parse_time_to_hour(text: str) -> int:
    match = _TIME_RE.search(text or "")
    if not match:
        return DEFAULT_HOUR

    # Not clamped: "13:00 PM" gives 25, which no time range admits.
    hour = int(match.group(1))
    is_pm = (match.group(3) or "").upper() == "PM"
    if is_pm and hour != 12:
        hour += 12
    elif not is_pm and hour == 12:
        hour = 0
    return hour


def is_in_time_range(text: str, time_range: str) -> bool:
    # Hours before 9 fall outside every range.
    _label, start, end = TIME_RANGES[time_range]
    hour = parse_time_to_hour(text)
    return start <= hour < end


def time_bucket(text: str) -> str:
    """Histogram bucket for a label; unlike the filter ranges this covers every hour."""
    hour = parse_time_to_hour(text)
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"
