"""
Request ID tracking.

Each request gets an id (client supplied ``X-Request-ID`` or a fresh UUID).
It is kept in a context variable so every log record emitted while the
request is being handled carries it, including records from thread-pool
handlers, and it is echoed back in the response headers.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-ID"

_request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIDLogFilter(logging.Filter):
    """Copies the current request id onto every record passing the handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id_ctx.get()
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        token = _request_id_ctx.set(request_id)
        try:
            response: Response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            _request_id_ctx.reset(token)


def get_request_id(request: Request) -> str:
    """Request id stored by the middleware, or "no-request-id" outside of it."""
    return getattr(request.state, "request_id", "no-request-id")
