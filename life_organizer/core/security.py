# life_organizer/core/security.py
from __future__ import annotations

import base64
import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from life_organizer.core.config import settings
from life_organizer.core.errors import AuthRequired, Forbidden
from life_organizer.models.db import get_db
from life_organizer.models.entities import AuthSession, User
from life_organizer.utils.timeutils import utcnow

log = logging.getLogger(__name__)

ROLES = ("newcomer", "admin")

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Who is calling. Resolved once per request and handed to each handler."""

    user_id: int
    email: str
    role: str
    token: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------

BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes; newer releases refuse longer input
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


# ---------------------------------------------------------------------------
# Session tokens
# ---------------------------------------------------------------------------

def _rand_token(nbytes: int = 48) -> str:
    return base64.urlsafe_b64encode(os.urandom(nbytes)).rstrip(b"=").decode("ascii")


def issue_token(db: Session, user: User) -> str:
    now = utcnow()
    token = _rand_token()
    db.add(AuthSession(
        token=token,
        user_id=user.id,
        issued_at=now,
        expires_at=now + timedelta(minutes=settings.SESSION_TTL_MINUTES),
    ))
    db.commit()
    return token


def revoke_token(db: Session, token: str) -> int:
    res = db.execute(delete(AuthSession).where(AuthSession.token == token))
    db.commit()
    return res.rowcount or 0


def resolve_token(db: Session, token: str) -> Optional[RequestContext]:
    row = db.execute(
        select(AuthSession, User)
        .join(User, User.id == AuthSession.user_id)
        .where(AuthSession.token == token)
    ).first()
    if row is None:
        return None
    sess, user = row
    if sess.expires_at < utcnow():
        log.info("Expired session for user %s", user.id)
        return None
    return RequestContext(user_id=user.id, email=user.email, role=user.role, token=token)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: Session = Depends(get_db),
) -> RequestContext:
    if credentials is None or not credentials.credentials:
        raise AuthRequired("No token provided")
    ctx = resolve_token(db, credentials.credentials)
    if ctx is None:
        raise AuthRequired("Invalid token")
    return ctx


def require_role(*roles: str) -> Callable[..., RequestContext]:
    def _dep(ctx: RequestContext = Depends(get_context)) -> RequestContext:
        if ctx.role not in roles:
            raise Forbidden("Access denied")
        return ctx

    return _dep
