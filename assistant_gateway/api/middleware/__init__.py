"""
API Middleware Package

Middleware Components:
- logging: Request/response logging with header redaction and correlation IDs
"""

from assistant_gateway.api.middleware.logging import (
    CORRELATION_ID_HEADER,
    RequestLoggingMiddleware,
    redact_sensitive_headers,
)

__all__ = [
    "CORRELATION_ID_HEADER",
    "RequestLoggingMiddleware",
    "redact_sensitive_headers",
]
