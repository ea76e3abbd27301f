"""Orders service FastAPI application.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8080 --reload

Configuration comes from the environment (see ``ordering.config``):
ORDER_STORE_URL selects the store, NOTIFICATION_GATEWAY the notification
adapter, NOTIFICATIONS_TIMEOUT_MS bounds every notification call.
"""

from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering.api import order_router
from ordering.domain import ordering
from ordering.order.lifecycle import OrderLifecycleManager, build_manager
from ordering.utils.logging import add_context, clear_context, configure_logging


def create_app(manager: OrderLifecycleManager | None = None) -> FastAPI:
    """Build the application around ``manager`` (assembled from configuration if omitted)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.order_manager.shutdown()

    app = FastAPI(
        title="Orders API",
        description="Retail order creation, tracking and status updates",
        lifespan=lifespan,
    )
    app.state.order_manager = manager or build_manager()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Tag every log line emitted while serving a request with its id."""
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        add_context(request_id=request_id, path=request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_context()
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(order_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "service": "orders"})

    return app


# Logging first, so that domain init leaves our handlers alone.
# PROTEAN_ENV names the domain.toml table merged over the defaults.
configure_logging()
ordering.init(traverse=False)

app = create_app()
