"""Utility functions for duration formatting and date arithmetic."""

from __future__ import annotations

import re
from datetime import datetime, timedelta

DURATION_INPUT_FORMAT = "HH:MM"
MAX_INPUT_HOURS = 24

_HHMM_RE = re.compile(r"\s*(-?\d+)\s*:\s*(-?\d+)\s*")


def format_duration(value: timedelta) -> str:
    """Render a signed duration as [-]HH:MM.

    Hours are not wrapped at 24, so 25 hours renders as "25:00".
    """
    # Truncate toward zero, sub-minute remainders are dropped
    minutes = int(value / timedelta(minutes=1))
    sign = "-" if minutes < 0 else ""
    h, m = divmod(abs(minutes), 60)
    return f"{sign}{h:02d}:{m:02d}"


def parse_hhmm(text: str) -> timedelta:
    """Parse user input like '09:15' into a duration.

    Raises ValueError with a message suitable for showing to the user.
    """
    match = _HHMM_RE.fullmatch(text)
    if not match:
        raise ValueError(f"Wrong format! Input in this format: {DURATION_INPUT_FORMAT}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    # 24:00 is allowed for a full day
    if not 0 <= hours <= MAX_INPUT_HOURS or not 0 <= minutes <= 59:
        raise ValueError(
            f"Wrong format! HH must be from 00 to {MAX_INPUT_HOURS} and MM from 00 to 59."
        )
    return timedelta(hours=hours, minutes=minutes)


def is_same_date(a: datetime, b: datetime) -> bool:
    """Check whether two timestamps fall on the same calendar date."""
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def days_between(earlier: datetime, later: datetime) -> int:
    """Number of calendar days from earlier to later."""
    return later.date().toordinal() - earlier.date().toordinal()


def history_with_gaps(history: list) -> list:
    """Return history records with a None placeholder for every skipped day."""
    rows: list = []
    prev = None
    for record in history:
        if prev is not None:
            rows.extend([None] * max(0, days_between(prev.date, record.date) - 1))
        rows.append(record)
        prev = record
    return rows
