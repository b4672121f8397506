"""Request logging middleware: one log line per request with status and duration."""


import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("mailroom.requests")

# Methods that mutate state
_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status code and duration.

    Writes are logged at INFO, reads at DEBUG, server errors at WARNING.
    Administrative audit rows are written by the services, not here.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000)

        if response.status_code >= 500:
            level = logging.WARNING
        elif request.method in _WRITE_METHODS:
            level = logging.INFO
        else:
            level = logging.DEBUG
        logger.log(
            level,
            "%s %s -> %d (%dms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response
