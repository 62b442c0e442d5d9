"""
Request Logging Middleware

This module implements request/response logging middleware for the API,
and binds a per-request correlation ID used by the structured logs of the
assistant fallback chain.

Anti-Patterns Avoided:
- No bare except clauses
- Credentials never reach the logs
"""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from assistant_gateway.observability.logging import request_context

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Request-ID"

# Headers that should be redacted (case-insensitive substring matching)
SENSITIVE_HEADER_PATTERNS = [
    "authorization",
    "api-key",
    "apikey",
    "api_key",
    "x-goog-api-key",
    "x-auth-token",
    "cookie",
]


def redact_sensitive_headers(headers: dict[str, str]) -> dict[str, str]:
    """
    Redact sensitive headers from a headers dictionary.

    Args:
        headers: Dictionary of HTTP headers

    Returns:
        Dictionary with sensitive values replaced with [REDACTED]
    """
    redacted = {}
    for key, value in headers.items():
        key_lower = key.lower()
        is_sensitive = any(pattern in key_lower for pattern in SENSITIVE_HEADER_PATTERNS)
        redacted[key] = "[REDACTED]" if is_sensitive else value
    return redacted


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.

    Features:
    - Logs request method, path and client IP
    - Logs response status code and duration
    - Redacts sensitive headers from logs
    - Propagates X-Request-ID (generated if absent) as the correlation ID
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        start_time = time.perf_counter()

        method = request.method
        path = request.url.path
        client_host = request.client.host if request.client else "unknown"
        correlation_id = request.headers.get(CORRELATION_ID_HEADER) or uuid.uuid4().hex

        redacted_headers = redact_sensitive_headers(dict(request.headers))
        logger.debug(
            f"Request: {method} {path} from {client_host} "
            f"headers={redacted_headers}"
        )

        with request_context(correlation_id, method=method, path=path):
            try:
                response = await call_next(request)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    f"Request failed: {method} {path} from {client_host} "
                    f"error={type(e).__name__}: {e} duration={duration_ms:.2f}ms"
                )
                raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers[CORRELATION_ID_HEADER] = correlation_id

        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"{method} {path} {response.status_code} "
            f"from {client_host} duration={duration_ms:.2f}ms "
            f"request_id={correlation_id}",
        )

        return response
