import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from routes import sold_router, thrift_router
from services.app_state import AppState
from services.error_handler import setup_error_handlers

logger = logging.getLogger(__name__)

LIVENESS_MESSAGE = "Thrift Fashion Backend is running ✔"


def create_app(state: AppState) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    This factory pattern allows for:
    - Dependency injection of application state
    - Easier testing with fake gateways and seeded randomness
    - Clean separation of concerns
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        logger.info("[STARTUP] Thrift Fashion Proxy starting...")
        logger.info(f"[STARTUP] Token refresh: {state.token_provider.can_refresh}")
        logger.info(f"[STARTUP] Category filter: {state.classifier.use_categories}")

        yield

        logger.info("[SHUTDOWN] Thrift Fashion Proxy shutting down...")
        logger.info(f"[SHUTDOWN] Total requests: {state.stats['total_requests']}")
        await state.aclose()

    app = FastAPI(
        title="Thrift Fashion Proxy",
        description="Curated secondhand fashion feed over the eBay Browse and Finding APIs",
        lifespan=lifespan,
    )

    # Store state in app for access by routes
    app.state.app_state = state

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def count_requests(request: Request, call_next):
        state.increment_stat("total_requests")
        return await call_next(request)

    setup_error_handlers(app, debug=state.settings.debug_errors)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return LIVENESS_MESSAGE

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "total_requests": state.stats["total_requests"],
            "upstream_errors": state.stats["upstream_errors"],
            "uptime_seconds": round(state.get_session_duration(), 1),
            "token_cached": state.token_provider.token_available,
            "cache": state.cache.get_stats(),
        }

    app.include_router(thrift_router)
    app.include_router(sold_router)

    return app
