"""Access log for the API.

Every response carries an X-Request-ID (reused from the request when sent).
One record per request with method, path, status, timing, client ip and the
signed-in user id. Bodies are never logged since they hold passwords and tokens.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.security import session_subject
from app.middleware.auth import extract_session_token

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger("app.request")


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def request_log_fields(request: Request, request_id: str) -> Dict[str, Any]:
    token = extract_session_token(request, request.headers.get("Authorization"))
    return {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else None,
        "user_sub": session_subject(token),
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        started = time.monotonic()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        fields = request_log_fields(request, request_id)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed", extra={**fields, "duration_ms": _elapsed_ms(started)}
            )
            raise

        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                **fields,
                "status": response.status_code,
                "duration_ms": _elapsed_ms(started),
            },
        )
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response
