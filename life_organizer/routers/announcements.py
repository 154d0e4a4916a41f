from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import select, delete

from life_organizer.core.errors import InvalidInput, NotFound
from life_organizer.core.security import RequestContext, get_context, require_role
from life_organizer.models.db import get_db
from life_organizer.models.entities import Announcement, User
from life_organizer.models.schemas import (
    AnnouncementIn, AnnouncementUpdateIn, AnnouncementOut, CreatedOut, MessageOut,
)
from life_organizer.utils.timeutils import utcnow

router = APIRouter(prefix="/api/announcements", tags=["announcements"])

CATEGORIES = {"immigration", "housing", "employment", "health", "finance", "education", "general"}


def _category(value) -> str:
    return value if value in CATEGORIES else "general"


@router.get("", response_model=List[AnnouncementOut])
def list_announcements(ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    rows = db.execute(
        select(Announcement, User.full_name)
        .join(User, User.id == Announcement.created_by)
        .order_by(Announcement.created_at.desc(), Announcement.id.desc())
    ).all()
    return [
        {
            "id": a.id,
            "title": a.title,
            "message": a.message,
            "category": a.category,
            "created_at": a.created_at,
            "updated_at": a.updated_at,
            "created_by_name": name,
        }
        for a, name in rows
    ]


@router.post("", response_model=CreatedOut, status_code=201)
def create_announcement(
    payload: AnnouncementIn, ctx: RequestContext = Depends(require_role("admin")), db: Session = Depends(get_db)
):
    if not payload.title or not payload.message:
        raise InvalidInput("title and message are required")
    a = Announcement(
        title=payload.title,
        message=payload.message,
        category=_category(payload.category),
        created_by=ctx.user_id,
    )
    db.add(a)
    db.commit()
    db.refresh(a)
    return {"message": "Announcement created", "id": a.id}


@router.put("/{announcement_id}", response_model=MessageOut)
def update_announcement(
    announcement_id: int,
    payload: AnnouncementUpdateIn,
    ctx: RequestContext = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    a = db.get(Announcement, announcement_id)
    if not a:
        raise NotFound("Announcement not found")
    if payload.title:
        a.title = payload.title
    if payload.message:
        a.message = payload.message
    if payload.category:
        a.category = _category(payload.category)
    a.updated_at = utcnow()
    db.commit()
    return {"message": "Announcement updated"}


@router.delete("/{announcement_id}", response_model=MessageOut)
def delete_announcement(
    announcement_id: int, ctx: RequestContext = Depends(require_role("admin")), db: Session = Depends(get_db)
):
    res = db.execute(delete(Announcement).where(Announcement.id == announcement_id))
    db.commit()
    if not res.rowcount:
        raise NotFound("Announcement not found")
    return {"message": "Announcement deleted"}
