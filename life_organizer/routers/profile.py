from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from life_organizer.core.errors import InvalidInput, NotFound
from life_organizer.core.security import RequestContext, get_context, hash_password, require_role, verify_password
from life_organizer.models.db import get_db
from life_organizer.models.entities import User
from life_organizer.models.schemas import ChangePasswordIn, MessageOut, ProfileUpdateIn

MIN_PASSWORD_LEN = 6

router = APIRouter(prefix="/api", tags=["profile"])


def _load_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@router.get("/profile/me")
def my_profile(ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    u = _load_user(db, ctx.user_id)
    return {"user": {"id": u.id, "full_name": u.full_name, "email": u.email, "role": u.role}}


@router.put("/profile/me", response_model=MessageOut)
def update_profile(payload: ProfileUpdateIn, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    full_name = (payload.full_name or "").strip()
    if len(full_name) < 2:
        raise InvalidInput("Full name is required")
    u = _load_user(db, ctx.user_id)
    u.full_name = full_name
    db.commit()
    return {"message": "Profile updated"}


@router.put("/profile/change-password", response_model=MessageOut)
def change_password(payload: ChangePasswordIn, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    if not payload.currentPassword or not payload.newPassword:
        raise InvalidInput("Both passwords are required")
    if len(payload.newPassword) < MIN_PASSWORD_LEN:
        raise InvalidInput(f"New password must be at least {MIN_PASSWORD_LEN} characters")

    u = _load_user(db, ctx.user_id)
    if not verify_password(payload.currentPassword, u.password_hash):
        raise InvalidInput("Current password is incorrect")

    u.password_hash = hash_password(payload.newPassword)
    db.commit()
    return {"message": "Password updated successfully"}


# ---------------------------------------------------------------------------
# Dashboards
# ---------------------------------------------------------------------------

@router.get("/dashboard/me")
def dashboard_me(ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    u = _load_user(db, ctx.user_id)
    return {"user": {
        "id": u.id, "full_name": u.full_name, "email": u.email, "role": u.role, "created_at": u.created_at,
    }}


@router.get("/dashboard/newcomer")
def dashboard_newcomer(ctx: RequestContext = Depends(require_role("newcomer"))):
    return {
        "message": "Welcome to Newcomer Dashboard",
        "nextSteps": ["View tasks", "Add deadlines", "Upload documents"],
    }


@router.get("/dashboard/admin")
def dashboard_admin(ctx: RequestContext = Depends(require_role("admin"))):
    return {
        "message": "Welcome to Admin Dashboard",
        "actions": ["Manage users", "Post announcements", "View reports"],
    }
