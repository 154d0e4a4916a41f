# life_organizer/utils/timeutils.py
"""
Date/time helpers shared by the template expander and the weekly-hours
aggregator.

Time-of-day values travel as "HH:MM" (or "HH:MM:SS") strings. Parsing them is
deliberately lenient: see ``coerce_time_component``.
"""
from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterator

from life_organizer.core.errors import InvalidInput

MINUTES_PER_DAY = 24 * 60

_YMD_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class WeekWindow:
    start: date  # Monday
    end: date  # Sunday

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def days(self) -> Iterator[date]:
        for i in range((self.end - self.start).days + 1):
            yield self.start + timedelta(days=i)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_ymd(value: str | None, field: str = "date") -> date:
    """Strict YYYY-MM-DD parse; raises InvalidInput on anything else."""
    s = str(value or "").strip()
    if not _YMD_RE.match(s):
        raise InvalidInput(f"{field}=YYYY-MM-DD required")
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidInput(f"{field} is not a valid calendar date")


def parse_month(value: str | None, field: str = "month") -> tuple[int, int]:
    """Strict YYYY-MM parse into (year, month)."""
    s = str(value or "").strip()
    if not _MONTH_RE.match(s):
        raise InvalidInput(f"{field}=YYYY-MM is required")
    year, month = (int(p) for p in s.split("-"))
    try:
        date(year, month, 1)
    except ValueError:
        raise InvalidInput(f"{field} is not a valid month")
    return year, month


def coerce_time_component(raw, upper: int) -> int:
    """
    Leniency policy for time-of-day components.

    Reads the leading integer of ``raw`` (so "09", "9", "09am" all give 9).
    Missing, non-numeric, negative or out-of-range (>= ``upper``) components
    become 0. Never raises.
    """
    if raw is None:
        return 0
    m = _LEADING_INT_RE.match(str(raw))
    if not m:
        return 0
    val = int(m.group(1))
    if val < 0 or val >= upper:
        return 0
    return val


# ---------------------------------------------------------------------------
# Time of day & durations
# ---------------------------------------------------------------------------

def weekday(d: date) -> int:
    """ISO weekday, Monday=1 .. Sunday=7."""
    return d.isoweekday()


def minutes_of_day(value) -> int:
    parts = str(value if value is not None else "").split(":")
    hh = coerce_time_component(parts[0] if parts else None, 24)
    mm = coerce_time_component(parts[1] if len(parts) > 1 else None, 60)
    return hh * 60 + mm


def duration_minutes(start_time, end_time) -> int:
    """
    Minutes from start to end. When end <= start the interval runs past
    midnight, so equal times mean a full 24h span (1440), not zero.
    """
    s = minutes_of_day(start_time)
    e = minutes_of_day(end_time)
    diff = e - s
    if diff <= 0:
        diff = (MINUTES_PER_DAY - s) + e
    return diff


def format_duration(minutes: int) -> str:
    minutes = int(minutes or 0)
    return f"{minutes // 60}h {minutes % 60}m"


# ---------------------------------------------------------------------------
# Calendar windows
# ---------------------------------------------------------------------------

def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the stored DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def week_window(reference: date) -> WeekWindow:
    # (dow + 6) % 7 with Sunday=0 is exactly Python's weekday() (Mon=0)
    offset = reference.weekday()
    monday = reference - timedelta(days=offset)
    # The last week of the calendar is cut short at date.max
    span = min(6, (date.max - monday).days)
    return WeekWindow(start=monday, end=monday + timedelta(days=span))


def month_days(year: int, month: int) -> Iterator[date]:
    last = calendar.monthrange(year, month)[1]
    for day in range(1, last + 1):
        yield date(year, month, day)


def term_week_number(term_start: date, d: date) -> int:
    """
    1-based count of 7-day blocks since ``term_start``.

    Dates before ``term_start`` give 0 or negative numbers; they are not
    clamped.
    """
    return (d - term_start).days // 7 + 1
