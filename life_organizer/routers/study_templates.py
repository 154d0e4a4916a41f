from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import select, delete

from life_organizer.core.errors import NotFound
from life_organizer.core.security import RequestContext, get_context
from life_organizer.models.db import get_db
from life_organizer.models.entities import StudyTemplate
from life_organizer.models.schemas import StudyTemplateIn, StudyTemplateOut, GenerateOut, CreatedOut, DeletedOut
from life_organizer.services.templates import STUDY_LABELS, TemplateRule, expand_all, parse_period, validate_rule
from life_organizer.utils.timeutils import minutes_of_day

router = APIRouter(prefix="/api/study-templates", tags=["study-templates"])


@router.get("", response_model=List[StudyTemplateOut])
def list_templates(ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    rows = db.scalars(
        select(StudyTemplate)
        .where(StudyTemplate.user_id == ctx.user_id)
        .order_by(StudyTemplate.weekday, StudyTemplate.id)
    ).all()
    rows = sorted(rows, key=lambda t: (t.weekday, minutes_of_day(t.start_time)))
    return [
        {
            "id": t.id,
            "subject": t.subject,
            "weekday": t.weekday,
            "start_time": t.start_time,
            "end_time": t.end_time,
            "start_date": t.start_date,
            "end_date": t.end_date,
            "notes": t.notes,
        }
        for t in rows
    ]


@router.post("", response_model=CreatedOut, status_code=201)
def create_template(payload: StudyTemplateIn, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    validate_rule(payload.weekday, payload.start_date, payload.end_date)
    t = StudyTemplate(
        user_id=ctx.user_id,
        subject=payload.subject.strip(),
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


# Generate events for a month: /api/study-templates/generate?month=YYYY-MM
@router.get("/generate", response_model=GenerateOut)
def generate(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    week_start: Optional[str] = Query(None, alias="weekStart", description="YYYY-MM-DD (Monday)"),
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    period = parse_period(month, week_start)
    templates = db.scalars(
        select(StudyTemplate).where(StudyTemplate.user_id == ctx.user_id).order_by(StudyTemplate.id)
    ).all()
    rules = [TemplateRule.from_entity(t, STUDY_LABELS) for t in templates]
    events = [occ.to_dict() for occ in expand_all(rules, **period)]
    return {"month": month, "weekStart": period.get("week_start"), "events": events}


@router.delete("/{template_id}", response_model=DeletedOut)
def delete_template(template_id: int, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    res = db.execute(
        delete(StudyTemplate).where(StudyTemplate.id == template_id, StudyTemplate.user_id == ctx.user_id)
    )
    db.commit()
    if not res.rowcount:
        raise NotFound("Template not found")
    return {"message": "Deleted", "deleted": res.rowcount}
