"""Orders HTTP API."""

from ordering.api.routes import get_manager, order_router

__all__ = ["get_manager", "order_router"]
