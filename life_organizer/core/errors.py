# life_organizer/core/errors.py
"""Error types raised by services/routers and the handlers that render them."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

log = logging.getLogger(__name__)


class OrganizerError(Exception):
    """Base error carrying the HTTP status and the caller-facing description."""

    status_code = 400
    default_detail = "Bad request"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidInput(OrganizerError):
    status_code = 400
    default_detail = "Invalid input"


class AuthRequired(OrganizerError):
    status_code = 401
    default_detail = "Invalid token"


class Forbidden(OrganizerError):
    status_code = 403
    default_detail = "Access denied"


class NotFound(OrganizerError):
    status_code = 404
    default_detail = "Not found"


class Conflict(OrganizerError):
    status_code = 409
    default_detail = "Conflict"


async def _organizer_error_handler(request: Request, exc: OrganizerError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        log.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def _store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    log.exception("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OrganizerError, _organizer_error_handler)
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)
