"""Access logging middleware: one record per request and one per response."""

import logging
import time
from typing import Callable, Dict, Iterable, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ....infrastructure.logging import (
    clear_correlation_id,
    generate_correlation_id,
    get_logger,
    set_correlation_id
)

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Session tokens travel in these; their values never reach the logs
REDACTED_HEADERS = frozenset({
    'authorization',
    'cookie',
    'set-cookie',
    'proxy-authorization',
})

QUIET_PATHS = ('/health', '/docs', '/redoc', '/openapi.json', '/favicon.ico')


def sanitize_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Copy headers with credential-bearing values replaced."""
    return {
        key: "[REDACTED]" if key.lower() in REDACTED_HEADERS else value
        for key, value in headers.items()
    }


def level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestResponseLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with a correlation id and log it with its outcome.

    The id is taken from the ``X-Correlation-ID`` request header when the
    client sends one and is echoed back on the response. Paths in
    ``quiet_paths`` and anything below ``quiet_prefixes`` are passed through
    without logging.
    """

    def __init__(
        self,
        app: ASGIApp,
        quiet_paths: Iterable[str] = QUIET_PATHS,
        quiet_prefixes: Tuple[str, ...] = ()
    ):
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths)
        self.quiet_prefixes = tuple(quiet_prefixes)

    def is_quiet(self, path: str) -> bool:
        return path in self.quiet_paths or (bool(self.quiet_prefixes) and path.startswith(self.quiet_prefixes))

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self.is_quiet(request.url.path):
            return await call_next(request)

        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        set_correlation_id(correlation_id)
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"

        try:
            logger.info(f"--> {route}", extra=self._request_fields(request))
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"<-- {route} raised {type(exc).__name__}",
                extra={"duration_ms": self._elapsed_ms(started), "error": str(exc)},
                exc_info=True
            )
            raise
        else:
            response.headers[CORRELATION_HEADER] = correlation_id
            duration_ms = self._elapsed_ms(started)
            logger.log(
                level_for_status(response.status_code),
                f"<-- {route} {response.status_code} ({duration_ms}ms)",
                extra={
                    "response_status": response.status_code,
                    "response_headers": sanitize_headers(dict(response.headers)),
                    "duration_ms": duration_ms
                }
            )
            return response
        finally:
            clear_correlation_id()

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)

    @staticmethod
    def _request_fields(request: Request) -> Dict[str, Optional[str]]:
        return {
            "request_method": request.method,
            "request_path": request.url.path,
            "request_query": str(request.query_params) or None,
            "request_headers": sanitize_headers(dict(request.headers)),
            "client_host": request.client.host if request.client else None,
            "content_type": request.headers.get('content-type'),
        }
