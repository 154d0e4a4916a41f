from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import select, delete

from life_organizer.core.errors import NotFound
from life_organizer.core.security import RequestContext, get_context
from life_organizer.models.db import get_db
from life_organizer.models.entities import WorkTemplate
from life_organizer.models.schemas import WorkTemplateIn, WorkTemplateOut, GenerateOut, CreatedOut, DeletedOut
from life_organizer.services.templates import WORK_LABELS, TemplateRule, expand_all, parse_period, validate_rule
from life_organizer.utils.timeutils import minutes_of_day

router = APIRouter(prefix="/api/work-templates", tags=["work-templates"])


def _template_out(t: WorkTemplate) -> dict:
    return {
        "id": t.id,
        "workplace": t.workplace,
        "role": t.role,
        "weekday": t.weekday,
        "start_time": t.start_time,
        "end_time": t.end_time,
        "start_date": t.start_date,
        "end_date": t.end_date,
        "notes": t.notes,
    }


@router.get("", response_model=List[WorkTemplateOut])
def list_templates(ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    rows = db.scalars(
        select(WorkTemplate)
        .where(WorkTemplate.user_id == ctx.user_id)
        .order_by(WorkTemplate.weekday, WorkTemplate.id)
    ).all()
    rows = sorted(rows, key=lambda t: (t.weekday, minutes_of_day(t.start_time)))
    return [_template_out(t) for t in rows]


@router.post("", response_model=CreatedOut, status_code=201)
def create_template(payload: WorkTemplateIn, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    validate_rule(payload.weekday, payload.start_date, payload.end_date)
    t = WorkTemplate(
        user_id=ctx.user_id,
        workplace=payload.workplace or None,
        role=payload.role or None,
        weekday=payload.weekday,
        start_time=payload.start_time,
        end_time=payload.end_time,
        start_date=payload.start_date,
        end_date=payload.end_date,
        notes=payload.notes or None,
    )
    db.add(t)
    db.commit()
    db.refresh(t)
    return {"message": "Template saved", "id": t.id}


@router.get("/generate", response_model=GenerateOut)
def generate(
    week_start: Optional[str] = Query(None, alias="weekStart", description="YYYY-MM-DD (Monday)"),
    month: Optional[str] = Query(None, description="YYYY-MM"),
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    period = parse_period(month, week_start)
    templates = db.scalars(
        select(WorkTemplate).where(WorkTemplate.user_id == ctx.user_id).order_by(WorkTemplate.id)
    ).all()
    rules = [TemplateRule.from_entity(t, WORK_LABELS) for t in templates]
    events = [occ.to_dict() for occ in expand_all(rules, **period)]
    return {"month": month, "weekStart": period.get("week_start"), "events": events}


@router.delete("/{template_id}", response_model=DeletedOut)
def delete_template(template_id: int, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    res = db.execute(
        delete(WorkTemplate).where(WorkTemplate.id == template_id, WorkTemplate.user_id == ctx.user_id)
    )
    db.commit()
    if not res.rowcount:
        raise NotFound("Template not found")
    return {"message": "Deleted", "deleted": res.rowcount}
