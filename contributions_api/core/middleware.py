import logging
from collections.abc import Awaitable
from collections.abc import Callable
from time import monotonic

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status code and duration of every request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = monotonic()
        response = await call_next(request)
        elapsed_ms = (monotonic() - started) * 1000

        logger.info(
            "%s %s -> %d (%.1f ms) client=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            self._client_ip(request),
        )
        return response

    @staticmethod
    def _client_ip(request: Request) -> str:
        # First X-Forwarded-For hop is the original caller behind a proxy.
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip() or "unknown"

        if request.client and request.client.host:
            return request.client.host

        return "unknown"
