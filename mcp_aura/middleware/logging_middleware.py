"""
Per-request logging.

Emits one ``http_request`` event per call. The request id, plus the wallet
address and network when the query string carries them, are bound to
structlog's context so builder and service logs for the same call can be
joined.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.stdlib.get_logger("mcp_aura.http")

REQUEST_ID_HEADER = "x-request-id"
_QUIET_PATHS = frozenset({"/healthz"})
_CONTEXT_PARAMS = {"address": "wallet", "network": "network", "sessionId": "session_id"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]

        context = {"request_id": request_id}
        for param, key in _CONTEXT_PARAMS.items():
            value = request.query_params.get(param)
            if value:
                context[key] = value
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(**context)

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
            if status_code >= 500:
                emit = logger.error
            elif status_code >= 400:
                emit = logger.warning
            elif request.url.path in _QUIET_PATHS:
                emit = logger.debug
            else:
                emit = logger.info
            emit(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=status_code,
                duration_ms=elapsed_ms,
            )
