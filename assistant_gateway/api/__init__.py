"""API Package - FastAPI routes, middleware, and dependencies.

Components:
- routes: API endpoint routers (assistant, health)
- middleware: Request/response logging
- deps: FastAPI dependency injection functions

Note: Import routers directly from assistant_gateway.api.routes to avoid circular imports.
"""

__all__ = ["routes", "middleware", "deps"]
