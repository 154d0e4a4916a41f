import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import select, delete

from life_organizer.core.errors import NotFound
from life_organizer.core.security import RequestContext, get_context
from life_organizer.models.db import get_db
from life_organizer.models.entities import WorkShift
from life_organizer.models.schemas import WorkShiftIn, WorkShiftOut, WorkShiftCreated, DeletedOut, MessageOut
from life_organizer.services.hours import ensure_work_shift_length, over_hours_warning, work_week_total
from life_organizer.utils.timeutils import minutes_of_day, week_window

router = APIRouter(prefix="/api/work-schedule", tags=["work-schedule"])
log = logging.getLogger(__name__)


def _shift_out(s: WorkShift) -> dict:
    return {
        "id": s.id,
        "shift_date": s.shift_date,
        "start_time": s.start_time,
        "end_time": s.end_time,
        "workplace": s.workplace,
        "role": s.role,
        "notes": s.notes,
    }


@router.get("", response_model=List[WorkShiftOut])
def list_shifts(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    stmt = select(WorkShift).where(WorkShift.user_id == ctx.user_id)
    if date_from:
        stmt = stmt.where(WorkShift.shift_date >= date_from)
    if date_to:
        stmt = stmt.where(WorkShift.shift_date <= date_to)
    rows = db.scalars(stmt.order_by(WorkShift.shift_date, WorkShift.id)).all()
    # start_time is free text ("9:00" vs "10:00"), so order by the parsed minute of day
    rows = sorted(rows, key=lambda s: (s.shift_date, minutes_of_day(s.start_time)))
    return [_shift_out(s) for s in rows]


# Over 24h/week is allowed; the response just carries a warning
@router.post("", response_model=WorkShiftCreated, status_code=201)
def add_shift(payload: WorkShiftIn, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    new_minutes = ensure_work_shift_length(payload.start_time, payload.end_time)

    window = week_window(payload.shift_date)
    # Read-then-insert is not serialized per owner; concurrent adds may both see a stale total
    weekly_total_after = work_week_total(db, ctx.user_id, window) + new_minutes

    s = WorkShift(
        user_id=ctx.user_id,
        shift_date=payload.shift_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        workplace=payload.workplace or None,
        role=payload.role or None,
        notes=payload.notes or None,
    )
    db.add(s)
    db.commit()
    db.refresh(s)

    warning = over_hours_warning(window, weekly_total_after)
    return {
        "message": "Shift added",
        "id": s.id,
        "warning": warning.to_dict() if warning else None,
    }


@router.put("/{shift_id}", response_model=MessageOut)
def update_shift(
    shift_id: int, payload: WorkShiftIn, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)
):
    s = db.get(WorkShift, shift_id)
    if not s or s.user_id != ctx.user_id:
        raise NotFound("Not found")
    ensure_work_shift_length(payload.start_time, payload.end_time)

    s.shift_date = payload.shift_date
    s.start_time = payload.start_time
    s.end_time = payload.end_time
    s.workplace = payload.workplace or None
    s.role = payload.role or None
    s.notes = payload.notes or None
    db.commit()
    return {"message": "Updated"}


@router.delete("/{shift_id}", response_model=DeletedOut)
def delete_shift(shift_id: int, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    res = db.execute(delete(WorkShift).where(WorkShift.id == shift_id, WorkShift.user_id == ctx.user_id))
    db.commit()
    if not res.rowcount:
        raise NotFound("Not found")
    return {"message": "Deleted", "deleted": res.rowcount}
