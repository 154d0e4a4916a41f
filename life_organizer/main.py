# life_organizer/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import PlainTextResponse
from sqlalchemy import text
from pathlib import Path

from life_organizer.core.config import settings
from life_organizer.core.errors import register_error_handlers
from life_organizer.core.logging_config import setup_logging
from life_organizer.core.security import hash_password
from life_organizer.models.db import engine, SessionLocal, Base
from life_organizer.models import entities  # noqa: F401  Ensure models are registered
from life_organizer.utils.seed import bootstrap_admin
from life_organizer.routers import (
    admin,
    announcements,
    auth,
    deadlines,
    profile,
    study_schedule,
    study_templates,
    tasks,
    work_schedule,
    work_templates,
)

setup_logging()
log = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

# --------------------------- CORS ---------------------------
# Static frontend is usually served from a separate dev port
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS or ["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# --------------------------- DB init ---------------------------

def _init_db() -> None:
    Base.metadata.create_all(bind=engine)
    if settings.HAS_ADMIN_SEED:
        with SessionLocal() as db:
            bootstrap_admin(db, settings.ADMIN_EMAIL, hash_password(settings.ADMIN_PASSWORD))


_init_db()
log.info("Database ready (%s)", "sqlite" if settings.DB_IS_SQLITE else "external")

# --------------------------- Routers ---------------------------
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(tasks.router)
app.include_router(deadlines.router)
app.include_router(announcements.router)
app.include_router(admin.router)
app.include_router(work_templates.router)
app.include_router(work_schedule.router)
app.include_router(study_templates.router)
app.include_router(study_schedule.router)


# --------------------------- Root & Health ---------------------------
@app.get("/", response_class=PlainTextResponse)
def root():
    return f"{settings.APP_NAME} API running"


@app.get("/healthz")
def health():
    return {"ok": True, "app": settings.APP_NAME}


@app.get("/db-test")
def db_test():
    with SessionLocal() as db:
        ok = db.execute(text("SELECT 1 AS ok")).scalar_one()
    return {"message": "DB connected", "result": {"ok": ok}}


# --------------------------- Frontend (Static) ---------------------------
# Serve the static pages from frontend/ when the folder ships alongside the API
_frontend_dir = Path(__file__).resolve().parent.parent / "frontend"
if _frontend_dir.exists():
    app.mount("/frontend", StaticFiles(directory=_frontend_dir, html=True), name="frontend")
