# life_organizer/core/config.py
from __future__ import annotations

import os
from typing import List, Optional
from pydantic import BaseModel
from dotenv import load_dotenv

# Pick up a local .env (never overrides variables already set)
load_dotenv()


def _get_bool(env_name: str, default: bool = False) -> bool:
    val = os.getenv(env_name)
    if val is None:
        return default
    return str(val).strip().lower() not in {"0", "false", "no", "off", ""}


def _get_int(env_name: str, default: int) -> int:
    val = os.getenv(env_name)
    if val is None or not str(val).strip():
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _split_csv(env_name: str, default: str = "") -> List[str]:
    raw = os.getenv(env_name, default)
    if not raw:
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


class Settings(BaseModel):
    # ------------------------- App -------------------------
    APP_NAME: str = os.getenv("APP_NAME", "Digital Life Organizer")
    DEBUG: bool = _get_bool("DEBUG", False)

    # ------------------------- DB -------------------------
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///organizer.db")

    # ------------------------- Auth -------------------------
    SESSION_TTL_MINUTES: int = _get_int("SESSION_TTL_MINUTES", 60 * 24 * 7)
    # Seeds an admin account on first boot when both are set
    ADMIN_EMAIL: Optional[str] = os.getenv("ADMIN_EMAIL")
    ADMIN_PASSWORD: Optional[str] = os.getenv("ADMIN_PASSWORD")

    # ------------------------- Scheduling rules -------------------------
    SKIP_WEEK: int = _get_int("SKIP_WEEK", 8)
    LOW_STUDY_MINUTES: int = _get_int("LOW_STUDY_MINUTES", 10 * 60)
    WORK_WEEK_LIMIT_MINUTES: int = _get_int("WORK_WEEK_LIMIT_MINUTES", 24 * 60)
    MAX_WORK_SHIFT_MINUTES: int = _get_int("MAX_WORK_SHIFT_MINUTES", 16 * 60)
    MAX_STUDY_SESSION_MINUTES: int = _get_int("MAX_STUDY_SESSION_MINUTES", 12 * 60)

    # ------------------------- Logging -------------------------
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_TO_FILE: bool = _get_bool("LOG_TO_FILE", False)
    LOG_FILE: str = os.getenv("LOG_FILE", "logs/organizer.log")

    # ------------------------- CORS -------------------------
    # e.g. CORS_ALLOW_ORIGINS="http://localhost:5500,http://127.0.0.1:5500"
    CORS_ALLOW_ORIGINS: List[str] = _split_csv(
        "CORS_ALLOW_ORIGINS",
        "http://localhost:5500,http://127.0.0.1:5500,"
        "http://localhost:5173,http://127.0.0.1:5173,"
        "http://localhost:3000,http://127.0.0.1:3000",
    )

    # ------------------------- Derived flags -------------------------
    @property
    def DB_IS_SQLITE(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def DB_IS_MEMORY(self) -> bool:
        return self.DATABASE_URL in {"sqlite://", "sqlite:///:memory:"}

    @property
    def SQLALCHEMY_ECHO(self) -> bool:
        return self.DEBUG

    @property
    def HAS_ADMIN_SEED(self) -> bool:
        return bool(self.ADMIN_EMAIL and self.ADMIN_PASSWORD)


settings = Settings()
