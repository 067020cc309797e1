"""
HTTP Application

Builds the FastAPI application that serves the store: the four routes
mounted under Settings.API_PATH, the error handlers and the middleware
chain. The application is an ASGI callable; kvstore.server runs it with
uvicorn and tests drive it with fastapi.testclient.TestClient.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .. import __version__
from ..config.settings import Settings
from ..service.facade import KVService, KVServiceInterface
from ..storage.engine import KVEngine
from .handlers import register_exception_handlers, router
from .middleware import DEFAULT_MIDDLEWARE

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(f"KV-Store ready, routes under {settings.API_PATH}")

    yield

    engine: Optional[KVEngine] = app.state.engine
    if engine is not None:
        stats = engine.get_stats()
        logger.info(f"KV-Store stopped with {stats['total_keys']} keys ({stats['total_bytes']} bytes)")
    else:
        logger.info("KV-Store stopped")


def create_app(
        settings: Optional[Settings] = None,
        service: Optional[KVServiceInterface] = None,
        engine: Optional[KVEngine] = None,
) -> FastAPI:
    """
    Create the HTTP application.

    Args:
        settings: Server settings (default Settings())
        service: Store facade or a test double; built over engine when omitted
        engine: Engine for the default service (default a fresh KVEngine)

    Returns:
        A FastAPI application with routes, error handlers and middleware installed
    """
    settings = settings or Settings()
    if service is None:
        engine = engine or KVEngine()
        service = KVService(engine=engine)

    # Interactive docs would shadow keys named "docs" or "openapi.json"
    app = FastAPI(
        title="kv-store",
        description="In-memory key-value store",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.service = service
    app.state.engine = engine

    app.include_router(router, prefix=settings.API_PATH.rstrip("/"))
    register_exception_handlers(app)

    # Each registration wraps the previous ones, so register innermost first
    for middleware in reversed(DEFAULT_MIDDLEWARE):
        app.middleware("http")(middleware)

    return app
