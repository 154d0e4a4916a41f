# life_organizer/utils/seed.py
from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy import select

from life_organizer.models.entities import Task, User

log = logging.getLogger(__name__)

STARTER_TASKS_CSV = Path(__file__).resolve().parent.parent / "data" / "starter_tasks.csv"
DEFAULT_DUE_DAYS = 7


def _get_first_present(row: dict, *keys: str, default=None):
    """Return row[key] for the first present key (case-sensitive), else default."""
    for k in keys:
        if k in row and row[k] not in (None, ""):
            return row[k]
    return default


def _safe_int(v, default: int = 0) -> int:
    try:
        return int(v)
    except Exception:
        try:
            # Sometimes numeric strings come as floats like "7.0"
            return int(float(v))
        except Exception:
            return default


@dataclass
class _DetectedDialect:
    delimiter: str = ","


def _detect_dialect(sample: str) -> _DetectedDialect:
    lines = sample.splitlines()
    # Prefer tab if tabs exist in the first line (common for spreadsheets copied as TSV)
    if lines and "\t" in lines[0]:
        return _DetectedDialect(delimiter="\t")
    try:
        sniffer = csv.Sniffer()
        dialect = sniffer.sniff(sample, delimiters=",\t;|")
        return _DetectedDialect(delimiter=dialect.delimiter)
    except csv.Error:
        return _DetectedDialect()


def _read_rows(csv_path: Path) -> list[dict]:
    with csv_path.open("r", newline="", encoding="utf-8") as f:
        head = f.read(4096)
        f.seek(0)
        dialect = _detect_dialect(head)
        reader = csv.DictReader(f, delimiter=dialect.delimiter)
        return list(reader)


@dataclass(frozen=True)
class StarterTask:
    title: str
    description: Optional[str]
    due_days: int


def load_starter_tasks(csv_path: Path = STARTER_TASKS_CSV) -> list[StarterTask]:
    """
    Read the newcomer starter checklist.

    Columns: title (or Title), description, due_days (days from today; falls
    back to 7 when missing or unparsable). Rows without a title are skipped.
    """
    if not csv_path.exists():
        log.warning("Starter task file missing: %s", csv_path)
        return []
    out: list[StarterTask] = []
    for r in _read_rows(csv_path):
        title = str(_get_first_present(r, "title", "Title", default="")).strip()
        if not title:
            continue
        desc = str(_get_first_present(r, "description", "Description", default="")).strip()
        due_days = _safe_int(_get_first_present(r, "due_days", "dueDays"), default=DEFAULT_DUE_DAYS)
        out.append(StarterTask(title=title, description=desc or None, due_days=due_days or DEFAULT_DUE_DAYS))
    return out


def add_starter_tasks(db: Session, user_id: int, today: Optional[date] = None) -> int:
    """Insert the starter checklist for ``user_id``. Returns the number inserted."""
    today = today or date.today()
    inserted = 0
    for t in load_starter_tasks():
        db.add(Task(
            user_id=user_id,
            title=t.title,
            description=t.description,
            due_date=today + timedelta(days=t.due_days),
            status="pending",
            is_starter=True,
        ))
        inserted += 1
    db.commit()
    return inserted


def bootstrap_admin(db: Session, email: str, password_hash: str, full_name: str = "Administrator") -> bool:
    """Create the seed admin account if no user owns ``email`` yet."""
    email = email.strip().lower()
    if db.scalar(select(User).where(User.email == email)):
        return False
    db.add(User(full_name=full_name, email=email, password_hash=password_hash, role="admin"))
    db.commit()
    log.info("Seeded admin account %s", email)
    return True
