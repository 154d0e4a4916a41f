import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import select, func, delete

from life_organizer.core.errors import InvalidInput, NotFound
from life_organizer.core.security import ROLES, RequestContext, hash_password, require_role
from life_organizer.models.db import get_db
from life_organizer.models.entities import Announcement, Deadline, Task, User
from life_organizer.models.schemas import AdminStatsOut, DeletedOut, MessageOut, ResetPasswordIn, RoleIn
from life_organizer.routers.profile import MIN_PASSWORD_LEN
from life_organizer.utils.seed import add_starter_tasks

router = APIRouter(prefix="/api/admin", tags=["admin"])
log = logging.getLogger(__name__)


def _ensure_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


@router.get("/stats", response_model=AdminStatsOut)
def stats(ctx: RequestContext = Depends(require_role("admin")), db: Session = Depends(get_db)):
    return {
        "totalUsers": db.scalar(select(func.count(User.id))) or 0,
        "totalTasks": db.scalar(select(func.count(Task.id))) or 0,
        "completedTasks": db.scalar(select(func.count(Task.id)).where(Task.status == "completed")) or 0,
        "totalAnnouncements": db.scalar(select(func.count(Announcement.id))) or 0,
        "totalDeadlines": db.scalar(select(func.count(Deadline.id))) or 0,
    }


@router.get("/users")
def list_users(ctx: RequestContext = Depends(require_role("admin")), db: Session = Depends(get_db)):
    users = db.scalars(select(User).order_by(User.id.desc())).all()
    return {"users": [
        {"id": u.id, "full_name": u.full_name, "email": u.email, "role": u.role} for u in users
    ]}


@router.put("/users/{user_id}/role", response_model=MessageOut)
def change_role(
    user_id: int, payload: RoleIn, ctx: RequestContext = Depends(require_role("admin")), db: Session = Depends(get_db)
):
    if payload.role not in ROLES:
        raise InvalidInput("Invalid role")
    user = _ensure_user(db, user_id)
    user.role = payload.role
    db.commit()
    log.info("Admin %s set role of user %s to %s", ctx.user_id, user_id, payload.role)
    return {"message": "Role updated successfully"}


@router.put("/users/{user_id}/reset-password", response_model=MessageOut)
def reset_password(
    user_id: int,
    payload: ResetPasswordIn,
    ctx: RequestContext = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    if not payload.newPassword or len(payload.newPassword) < MIN_PASSWORD_LEN:
        raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LEN} characters")
    user = _ensure_user(db, user_id)
    user.password_hash = hash_password(payload.newPassword)
    db.commit()
    log.info("Admin %s reset password of user %s", ctx.user_id, user_id)
    return {"message": "Password reset successfully"}


@router.post("/users/{user_id}/add-starter-tasks")
def add_starters(user_id: int, ctx: RequestContext = Depends(require_role("admin")), db: Session = Depends(get_db)):
    _ensure_user(db, user_id)
    inserted = add_starter_tasks(db, user_id)
    return {"message": "Starter tasks added", "inserted": inserted}


@router.delete("/users/{user_id}/remove-starter-tasks", response_model=DeletedOut)
def remove_starters(user_id: int, ctx: RequestContext = Depends(require_role("admin")), db: Session = Depends(get_db)):
    res = db.execute(delete(Task).where(Task.user_id == user_id, Task.is_starter.is_(True)))
    db.commit()
    return {"message": "Starter tasks removed", "deleted": res.rowcount or 0}
