"""
main.py — Scouting Portal API entry point

The FastAPI application instance lives here. All middleware, routers,
exception handlers and startup/shutdown events are registered in this file.

Usage
-----
Development (auto-reloads on file save):
    cd backend
    uvicorn api.main:app --reload --port 8000

Production (multiple worker processes, shared DATABASE_URL):
    cd backend
    gunicorn api.main:app -c gunicorn.conf.py

Docs (once running):
    http://localhost:8000/docs    — Swagger UI (interactive)
    http://localhost:8000/redoc   — ReDoc (read-only)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from api.routers.health import router as health_router
from api.v1.router import v1_router
from core.config import settings
from core.errors import PortalError, UpstreamError, display_message
from core.logging import configure_logging
from core.middleware import RequestIDMiddleware, TimingMiddleware
from db.database import SessionLocal, init_db
from db.session_store import SessionStore

logger = logging.getLogger(__name__)

_VERSION = "1.0.0"


# ---------------------------------------------------------------------------
# Lifespan — startup and shutdown hooks
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ────────────────────────────────────────────────────────────────
    configure_logging(settings.log_level)
    init_db()
    with SessionLocal() as db:
        SessionStore(db).purge_expired()
    logger.info(
        "Scouting Portal API starting",
        extra={
            "environment": settings.environment,
            "version": _VERSION,
            "log_level": settings.log_level,
            "upstream_api_url": settings.upstream_api_url,
            "allowed_origins": settings.allowed_origins,
        },
    )
    yield
    # ── Shutdown ───────────────────────────────────────────────────────────────
    logger.info("Scouting Portal API shutting down")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Scouting Portal API",
    description=(
        "Backend-for-frontend of the football talent scouting portal. "
        "Holds login sessions, gates views by role and profile completeness, "
        "and relays talent, team, match and scouting data to the upstream API."
    ),
    version=_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Middleware  (add_middleware order matters: last added = outermost = first to
# handle incoming requests)
#
#   Execution order for a request:
#     CORS → RequestID → Timing → route handler
# ---------------------------------------------------------------------------

app.add_middleware(TimingMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every error leaves as {"error", "status_code", "request_id"}; errors that
# require navigation add "redirect" (/login when the session is gone, / when
# the role may not do this).
# ---------------------------------------------------------------------------

def _error_response(
    request: Request,
    status_code: int,
    message: str,
    redirect: Optional[str] = None,
    details: Optional[list] = None,
) -> JSONResponse:
    content = {
        "error": message,
        "status_code": status_code,
        "request_id": getattr(request.state, "request_id", None),
    }
    if redirect:
        content["redirect"] = redirect
    if details:
        content["details"] = details
    response = JSONResponse(status_code=status_code, content=content)
    if redirect == "/login":
        response.delete_cookie(settings.session_cookie_name)
    return response


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Upstream failures, expired sessions, role and form errors."""
    fallback = "An unexpected error occurred"
    if isinstance(exc, UpstreamError) and exc.is_not_found:
        fallback = "Resource not found"
    message = display_message(exc, fallback)
    if exc.status_code >= 500:
        logger.error(
            "request failed",
            extra={"path": request.url.path, "status_code": exc.status_code, "error": message},
        )
    return _error_response(request, exc.status_code, message, exc.redirect)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Form validation: the first message as "error", every field in "details"."""
    details = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())[1:])
        message = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        details.append({"field": field, "message": message})
    message = details[0]["message"] if details else "Invalid request"
    return _error_response(request, 422, message, details=details)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return structured JSON for plain HTTP errors (404, 405, etc.)."""
    return _error_response(request, exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: log the traceback, return clean JSON."""
    logger.error(
        "unhandled exception",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "method": request.method,
            "path": request.url.path,
            "error": str(exc),
        },
        exc_info=True,
    )
    return _error_response(request, 500, "Internal server error")


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(health_router)            # /health, /health/db  (unversioned)
app.include_router(v1_router, prefix="/api/v1")


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------

@app.get("/", tags=["root"], summary="API root")
def root():
    """Confirms the API is running. Returns service name, version, and docs URL."""
    return {
        "service": "Scouting Portal API",
        "version": _VERSION,
        "docs":    "/docs",
    }
