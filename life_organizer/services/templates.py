from __future__ import annotations

"""
life_organizer/services/templates.py

Recurring template expansion:
- TemplateRule: the typed view of a stored work/study template
- expand(): lazy occurrence generator over any run of dates
- month/week wrappers and multi-template concatenation
"""

from dataclasses import dataclass, field
from datetime import date
from itertools import chain
from typing import Any, Dict, Iterable, Iterator, Optional, Sequence

from life_organizer.core.config import settings
from life_organizer.core.errors import InvalidInput
from life_organizer.utils.timeutils import month_days, parse_month, parse_ymd, term_week_number, week_window, weekday

# Label columns carried through to occurrences, per template kind
WORK_LABELS = ("workplace", "role")
STUDY_LABELS = ("subject",)


@dataclass(frozen=True)
class TemplateRule:
    id: Optional[int]
    weekday: int  # 1=Mon..7=Sun
    start_time: str
    end_time: str
    start_date: date
    end_date: date
    labels: Dict[str, Optional[str]] = field(default_factory=dict)
    notes: Optional[str] = None

    @classmethod
    def from_entity(cls, row: Any, label_fields: Sequence[str]) -> "TemplateRule":
        return cls(
            id=row.id,
            weekday=int(row.weekday),
            start_time=row.start_time,
            end_time=row.end_time,
            start_date=row.start_date,
            end_date=row.end_date,
            labels={name: getattr(row, name, None) or None for name in label_fields},
            notes=row.notes or None,
        )


@dataclass(frozen=True)
class Occurrence:
    template_id: Optional[int]
    date: date
    start_time: str
    end_time: str
    week_number: int
    labels: Dict[str, Optional[str]] = field(default_factory=dict)
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": "template",
            "template_id": self.template_id,
            "date": self.date.isoformat(),
        }
        out.update(self.labels)
        out.update({
            "start_time": self.start_time,
            "end_time": self.end_time,
            "notes": self.notes,
            "weekNumber": self.week_number,
        })
        return out


def expand(rule: TemplateRule, days: Iterable[date], skip_week: Optional[int] = None) -> Iterator[Occurrence]:
    """Yield one occurrence per matching date, in the order ``days`` are given."""
    skip = settings.SKIP_WEEK if skip_week is None else skip_week
    for d in days:
        if d < rule.start_date or d > rule.end_date:
            continue
        if weekday(d) != rule.weekday:
            continue
        wk = term_week_number(rule.start_date, d)
        if wk == skip:
            continue
        yield Occurrence(
            template_id=rule.id,
            date=d,
            start_time=rule.start_time,
            end_time=rule.end_time,
            week_number=wk,
            labels=dict(rule.labels),
            notes=rule.notes,
        )


def expand_month(rule: TemplateRule, year: int, month: int, skip_week: Optional[int] = None) -> Iterator[Occurrence]:
    return expand(rule, month_days(year, month), skip_week)


def expand_week(rule: TemplateRule, week_start: date, skip_week: Optional[int] = None) -> Iterator[Occurrence]:
    return expand(rule, week_window(week_start).days(), skip_week)


def expand_all(
    rules: Iterable[TemplateRule],
    *,
    month: Optional[tuple[int, int]] = None,
    week_start: Optional[date] = None,
    skip_week: Optional[int] = None,
) -> Iterator[Occurrence]:
    """
    Concatenate per-template expansions: all of template 1, then template 2...
    Callers wanting a single calendar order sort by date themselves.
    """
    if (month is None) == (week_start is None):
        raise ValueError("exactly one of month or week_start is required")
    if month is not None:
        year, mon = month
        return chain.from_iterable(expand_month(r, year, mon, skip_week) for r in rules)
    return chain.from_iterable(expand_week(r, week_start, skip_week) for r in rules)


# --- Request helpers ---
def validate_rule(weekday_value: int, start_date: date, end_date: date) -> None:
    if not 1 <= int(weekday_value) <= 7:
        raise InvalidInput("weekday must be 1 (Monday) .. 7 (Sunday)")
    if start_date > end_date:
        raise InvalidInput("start_date must be on or before end_date")


def parse_period(month: Optional[str], week_start: Optional[str]) -> Dict[str, Any]:
    """Turn ?month= / ?weekStart= into expand_all() keyword arguments."""
    if month and week_start:
        raise InvalidInput("use either month=YYYY-MM or weekStart=YYYY-MM-DD, not both")
    if month:
        return {"month": parse_month(month)}
    if week_start:
        ws = parse_ymd(week_start, "weekStart")
        if ws.isoweekday() != 1:
            raise InvalidInput("weekStart must be a Monday")
        return {"week_start": ws}
    raise InvalidInput("month=YYYY-MM or weekStart=YYYY-MM-DD (Monday) required")
