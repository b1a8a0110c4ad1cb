"""core/middleware.py — Custom ASGI middleware for the scouting portal.

Provides:
  - RequestIDMiddleware  : reuses or mints a request ID (X-Request-ID header)
  - TimingMiddleware     : logs method, path, status, user, and duration per request

Both middleware classes use Starlette's BaseHTTPMiddleware and integrate with
the JSON logger configured in core/logging.py.
"""

from __future__ import annotations

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

# Incoming IDs are echoed into logs and upstream headers, so keep them tame
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to every request and response.

    A well-formed X-Request-ID sent by the caller is kept so a browser trace
    can be followed through the portal into the upstream API logs; otherwise
    a fresh UUID is generated.

    Sets:
      - request.state.request_id  — read by route handlers and the upstream client
      - X-Request-ID response header
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        incoming = request.headers.get("X-Request-ID", "")
        request_id = incoming if _VALID_REQUEST_ID.match(incoming) else str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status code, user, and wall-clock duration.

    request.state.user_id is filled in by the session dependency when the
    request carried a valid portal session; anonymous requests log "-".
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)

        logger.info(
            "request completed",
            extra={
                "request_id": getattr(request.state, "request_id", "-"),
                "user_id": getattr(request.state, "user_id", "-"),
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
