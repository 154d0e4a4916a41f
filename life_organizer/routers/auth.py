import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import select

from life_organizer.core.errors import AuthRequired, Conflict, InvalidInput
from life_organizer.core.security import (
    RequestContext, get_context, hash_password, issue_token, revoke_token, verify_password,
)
from life_organizer.models.db import get_db
from life_organizer.models.entities import User
from life_organizer.models.schemas import AuthOut, LoginIn, MessageOut, RegisterIn

router = APIRouter(prefix="/api/auth", tags=["auth"])
log = logging.getLogger(__name__)


def _brief(user: User) -> dict:
    return {"id": user.id, "email": user.email, "role": user.role}


@router.post("/register", response_model=AuthOut, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    full_name = payload.full_name.strip()
    email = payload.email.strip().lower()
    if not full_name or not email or not payload.password:
        raise InvalidInput("full_name, email, password required")

    safe_role = "admin" if payload.role == "admin" else "newcomer"

    if db.scalar(select(User.id).where(User.email == email)):
        raise Conflict("Email already exists")

    user = User(full_name=full_name, email=email, password_hash=hash_password(payload.password), role=safe_role)
    db.add(user)
    db.commit()
    db.refresh(user)
    log.info("Registered user %s (%s)", user.id, safe_role)

    return {"message": "Registered", "token": issue_token(db, user), "user": _brief(user)}


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    user = db.scalar(select(User).where(User.email == email))
    if not user or not verify_password(payload.password, user.password_hash):
        raise AuthRequired("Invalid credentials")
    return {"message": "Logged in", "token": issue_token(db, user), "user": _brief(user)}


@router.post("/logout", response_model=MessageOut)
def logout(ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    revoke_token(db, ctx.token)
    return {"message": "Logged out"}
