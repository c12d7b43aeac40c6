"""FastAPI application factory and configuration.

Hosts the NiceGUI chat UI and, when enabled, the in-memory development
backend under /chat.
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes import router as chat_router

logger = logging.getLogger(__name__)


def dev_backend_enabled() -> bool:
    return os.getenv("DEV_BACKEND", "true").strip().lower() in {"1", "true", "yes", "on"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting chat client server...")
    yield
    logger.info("Shutting down chat client server...")


def create_app(include_dev_backend: bool | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        include_dev_backend: Mount the development backend at /chat.
            Reads DEV_BACKEND from the environment when not given.

    Returns:
        Configured FastAPI application instance.
    """
    if include_dev_backend is None:
        include_dev_backend = dev_backend_enabled()

    application = FastAPI(
        title="Chat Client",
        description=(
            "Browser chat client for a remote chat backend. Optionally serves an "
            "in-memory development backend implementing the session and message API."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if include_dev_backend:
        application.include_router(chat_router)
        logger.info("Development backend mounted at /chat")

    @application.get("/health")
    async def health_check() -> dict[str, str | bool]:
        """Check service health status."""
        return {
            "status": "healthy",
            "service": "chat-client",
            "dev_backend": include_dev_backend,
        }

    return application


app = create_app()
