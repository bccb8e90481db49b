from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .errors import register_exception_handlers
from .hub import BroadcastHub
from .logging_config import setup_logging
from .repositories import InMemoryRepository
from .routers import todos as todos_router
from .routers import ws as ws_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "CRUD operations for Todo items with offset/limit pagination.",
    },
    {
        "name": "notifications",
        "description": "WebSocket channel pushing a message after every Todo mutation.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    logger.info("Todo service starting (max page size %d)", settings.max_limit)
    yield
    logger.info("Todo service shutting down")
    await app.state.hub.close_all()
    app.state.repository.clear()


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application with its own store and broadcast hub.

    Args:
        settings: Explicit settings; read from the environment when omitted.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Todo Service",
        description="In-memory Todo API with live WebSocket notifications.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = InMemoryRepository(max_limit=settings.max_limit)
    app.state.hub = BroadcastHub(queue_size=settings.ws_queue_size)

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/", summary="Health Check", tags=["health"])
    def health_check(request: Request) -> dict:
        """
        Health check endpoint.

        Returns:
            A JSON object with the number of stored todos and live subscribers.
        """
        return {
            "message": "Healthy",
            "todos": request.app.state.repository.count(),
            "subscribers": request.app.state.hub.subscriber_count,
        }

    app.include_router(todos_router.router)
    app.include_router(ws_router.router)
    return app


app = create_app()
