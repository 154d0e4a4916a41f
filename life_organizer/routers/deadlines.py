from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import select, delete

from life_organizer.core.errors import InvalidInput, NotFound
from life_organizer.core.security import RequestContext, get_context
from life_organizer.models.db import get_db
from life_organizer.models.entities import Deadline
from life_organizer.models.schemas import DeadlineIn, DeadlineUpdateIn, DeadlineOut, CreatedOut, MessageOut

router = APIRouter(prefix="/api/deadlines", tags=["deadlines"])

CATEGORIES = {"immigration", "housing", "employment", "health", "finance", "education", "other"}
PRIORITIES = {"low", "medium", "high"}
STATUSES = {"upcoming", "done"}


def _pick(value: Optional[str], allowed: set, fallback: str) -> str:
    return value if value in allowed else fallback


def _deadline_out(d: Deadline) -> dict:
    return {
        "id": d.id,
        "title": d.title,
        "category": d.category,
        "due_date": d.due_date,
        "notes": d.notes,
        "priority": d.priority,
        "status": d.status,
    }


@router.get("", response_model=List[DeadlineOut])
def list_deadlines(ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    rows = db.scalars(
        select(Deadline).where(Deadline.user_id == ctx.user_id).order_by(Deadline.due_date, Deadline.id)
    ).all()
    return [_deadline_out(d) for d in rows]


@router.post("", response_model=CreatedOut, status_code=201)
def create_deadline(payload: DeadlineIn, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    title = (payload.title or "").strip()
    if not title or payload.due_date is None:
        raise InvalidInput("title and due_date are required")
    d = Deadline(
        user_id=ctx.user_id,
        title=title,
        category=_pick(payload.category, CATEGORIES, "other"),
        due_date=payload.due_date,
        notes=payload.notes or None,
        priority=_pick(payload.priority, PRIORITIES, "medium"),
        status="upcoming",
    )
    db.add(d)
    db.commit()
    db.refresh(d)
    return {"message": "Deadline created", "id": d.id}


@router.put("/{deadline_id}", response_model=MessageOut)
def update_deadline(
    deadline_id: int,
    payload: DeadlineUpdateIn,
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    d = db.get(Deadline, deadline_id)
    if not d or d.user_id != ctx.user_id:
        raise NotFound("Deadline not found")

    # Empty values leave the stored column untouched
    if payload.title:
        d.title = payload.title.strip() or d.title
    if payload.category:
        d.category = _pick(payload.category, CATEGORIES, "other")
    if payload.due_date:
        d.due_date = payload.due_date
    if payload.notes:
        d.notes = payload.notes
    if payload.priority:
        d.priority = _pick(payload.priority, PRIORITIES, "medium")
    if payload.status:
        d.status = _pick(payload.status, STATUSES, "upcoming")

    db.commit()
    return {"message": "Deadline updated"}


@router.delete("/{deadline_id}", response_model=MessageOut)
def delete_deadline(deadline_id: int, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    res = db.execute(delete(Deadline).where(Deadline.id == deadline_id, Deadline.user_id == ctx.user_id))
    db.commit()
    if not res.rowcount:
        raise NotFound("Deadline not found")
    return {"message": "Deadline deleted"}
