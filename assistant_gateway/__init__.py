"""Assistant Gateway - conversational assistant for the kiosk event system.

Note: Import `app` directly from `assistant_gateway.main` to avoid circular imports.
"""

__all__ = ["main", "api", "core", "models", "providers", "services"]
