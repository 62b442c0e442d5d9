"""Routes Package - API endpoint definitions.

Note: Import routers directly from individual modules to avoid circular imports.
Example: from assistant_gateway.api.routes.assistant import router as assistant_router
"""

__all__ = ["assistant", "health"]
