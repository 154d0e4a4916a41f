from __future__ import annotations

"""
life_organizer/services/hours.py

Weekly-hours aggregation and the advisory rules built on it:
- weekly_total_minutes(): pure sum over entries inside a WeekWindow
- work/study store helpers that load one owner's week and sum it
- LOW_STUDY_HOURS reminder and WEEKLY_LIMIT_EXCEEDED warning
- the single-entry length cap (the only hard rule tied to duration)
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Optional
import logging

from sqlalchemy.orm import Session
from sqlalchemy import select

from life_organizer.core.config import settings
from life_organizer.core.errors import InvalidInput
from life_organizer.models.entities import WorkShift, StudySession
from life_organizer.utils.timeutils import WeekWindow, duration_minutes, format_duration

log = logging.getLogger(__name__)

LOW_STUDY_HOURS = "LOW_STUDY_HOURS"
WEEKLY_LIMIT_EXCEEDED = "WEEKLY_LIMIT_EXCEEDED"


@dataclass(frozen=True)
class TimedEntry:
    date: date
    start_time: str
    end_time: str

    @property
    def minutes(self) -> int:
        return duration_minutes(self.start_time, self.end_time)


@dataclass(frozen=True)
class Advisory:
    code: str
    message: str
    window: WeekWindow
    total_minutes: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "weekStart": self.window.start.isoformat(),
            "weekEnd": self.window.end.isoformat(),
            "weeklyTotalMinutes": self.total_minutes,
            "weeklyTotalText": format_duration(self.total_minutes),
        }


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def weekly_total_minutes(entries: Iterable[TimedEntry], window: WeekWindow) -> int:
    """Total scheduled minutes of ``entries`` dated inside ``window``.

    Overnight entries count their full span against the day they start on.
    """
    return sum(e.minutes for e in entries if window.contains(e.date))


def _load_week(db: Session, model, date_col, user_id: int, window: WeekWindow) -> list[TimedEntry]:
    rows = db.execute(
        select(date_col, model.start_time, model.end_time).where(
            model.user_id == user_id,
            date_col >= window.start,
            date_col <= window.end,
        )
    ).all()
    return [TimedEntry(date=r[0], start_time=r[1], end_time=r[2]) for r in rows]


def work_week_total(db: Session, user_id: int, window: WeekWindow) -> int:
    return weekly_total_minutes(_load_week(db, WorkShift, WorkShift.shift_date, user_id, window), window)


def study_week_total(db: Session, user_id: int, window: WeekWindow) -> int:
    return weekly_total_minutes(_load_week(db, StudySession, StudySession.study_date, user_id, window), window)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def ensure_entry_length(minutes: int, limit: int, too_long: str) -> None:
    if minutes > limit:
        raise InvalidInput(too_long)


def ensure_work_shift_length(start_time: str, end_time: str) -> int:
    minutes = duration_minutes(start_time, end_time)
    ensure_entry_length(minutes, settings.MAX_WORK_SHIFT_MINUTES, "Shift too long. Please enter a valid shift.")
    return minutes


def ensure_study_session_length(start_time: str, end_time: str) -> int:
    minutes = duration_minutes(start_time, end_time)
    ensure_entry_length(
        minutes, settings.MAX_STUDY_SESSION_MINUTES, "Study session too long. Please enter a valid session."
    )
    return minutes


def low_study_reminder(window: WeekWindow, total_minutes: int) -> Optional[Advisory]:
    if total_minutes >= settings.LOW_STUDY_MINUTES:
        return None
    target_h = settings.LOW_STUDY_MINUTES // 60
    return Advisory(
        code=LOW_STUDY_HOURS,
        message=(
            f"Reminder: Your study hours this week are {format_duration(total_minutes)}. "
            f"Try to reach {target_h}h+ for good progress."
        ),
        window=window,
        total_minutes=total_minutes,
    )


def over_hours_warning(window: WeekWindow, total_minutes: int) -> Optional[Advisory]:
    limit = settings.WORK_WEEK_LIMIT_MINUTES
    if total_minutes <= limit:
        return None
    log.info("Work week %s..%s over limit: %d > %d minutes", window.start, window.end, total_minutes, limit)
    return Advisory(
        code=WEEKLY_LIMIT_EXCEEDED,
        message=(
            f"Reminder: You are over {limit // 60} hours this week "
            f"({format_duration(total_minutes)})."
        ),
        window=window,
        total_minutes=total_minutes,
    )
