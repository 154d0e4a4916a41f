from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import select, delete

from life_organizer.core.errors import NotFound
from life_organizer.core.security import RequestContext, get_context
from life_organizer.models.db import get_db
from life_organizer.models.entities import StudySession
from life_organizer.models.schemas import (
    StudySessionIn, StudySessionList, StudySessionCreated, DeletedOut, MessageOut,
)
from life_organizer.services.hours import ensure_study_session_length, low_study_reminder, study_week_total
from life_organizer.utils.timeutils import format_duration, minutes_of_day, week_window

router = APIRouter(prefix="/api/study-schedule", tags=["study-schedule"])


@router.get("", response_model=StudySessionList)
def list_sessions(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    stmt = select(StudySession).where(StudySession.user_id == ctx.user_id)
    if date_from:
        stmt = stmt.where(StudySession.study_date >= date_from)
    if date_to:
        stmt = stmt.where(StudySession.study_date <= date_to)
    rows = db.scalars(stmt.order_by(StudySession.study_date.desc(), StudySession.id)).all()
    rows = sorted(rows, key=lambda s: (-s.study_date.toordinal(), minutes_of_day(s.start_time)))

    # Weekly total always reflects the current week, independent of the filter
    window = week_window(date.today())
    total = study_week_total(db, ctx.user_id, window)

    return {
        "sessions": [
            {
                "id": s.id,
                "study_date": s.study_date,
                "start_time": s.start_time,
                "end_time": s.end_time,
                "subject": s.subject,
                "notes": s.notes,
            }
            for s in rows
        ],
        "weekly": {
            "weekStart": window.start,
            "weekEnd": window.end,
            "totalMinutes": total,
            "totalText": format_duration(total),
        },
    }


@router.post("", response_model=StudySessionCreated, status_code=201)
def add_session(payload: StudySessionIn, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    ensure_study_session_length(payload.start_time, payload.end_time)

    s = StudySession(
        user_id=ctx.user_id,
        study_date=payload.study_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        subject=payload.subject.strip(),
        notes=payload.notes or None,
    )
    db.add(s)
    db.commit()
    db.refresh(s)

    # After insert, recompute the week total and attach a reminder if it is low
    window = week_window(payload.study_date)
    total = study_week_total(db, ctx.user_id, window)
    reminder = low_study_reminder(window, total)

    return {
        "message": "Study session added",
        "id": s.id,
        "weeklyTotalMinutes": total,
        "weeklyTotalText": format_duration(total),
        "reminder": reminder.to_dict() if reminder else None,
    }


@router.put("/{session_id}", response_model=MessageOut)
def update_session(
    session_id: int, payload: StudySessionIn, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)
):
    s = db.get(StudySession, session_id)
    if not s or s.user_id != ctx.user_id:
        raise NotFound("Not found")
    ensure_study_session_length(payload.start_time, payload.end_time)

    s.study_date = payload.study_date
    s.start_time = payload.start_time
    s.end_time = payload.end_time
    s.subject = payload.subject.strip()
    s.notes = payload.notes or None
    db.commit()
    return {"message": "Updated"}


@router.delete("/{session_id}", response_model=DeletedOut)
def delete_session(session_id: int, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    res = db.execute(delete(StudySession).where(StudySession.id == session_id, StudySession.user_id == ctx.user_id))
    db.commit()
    if not res.rowcount:
        raise NotFound("Not found")
    return {"message": "Deleted", "deleted": res.rowcount}
