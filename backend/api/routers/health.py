"""api/routers/health.py — Health check endpoints.

Routes (mounted at root, no /api/v1 prefix):
    GET /health        Liveness check — returns env, version, upstream origin, timestamp
    GET /health/db     Readiness check — verifies the session store is reachable

Neither route calls the upstream API; an unreachable upstream shows up on
the first real request instead.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.dependencies import check_db_connectivity
from core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

_VERSION = "1.0.0"


@router.get("/health", summary="Liveness check")
def health():
    return {
        "status": "ok",
        "environment": settings.environment,
        "version": _VERSION,
        "upstream": settings.upstream_api_url,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/db", summary="Readiness check")
def health_db():
    """HTTP 200 when the session store answers SELECT 1, HTTP 503 when not."""
    try:
        check_db_connectivity()
    except RuntimeError as exc:
        logger.warning("health/db: session store unreachable: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": str(exc)},
        )
    logger.debug("health/db: session store reachable")
    return {"status": "ok", "db": "connected"}
