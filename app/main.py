from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app import __version__
from app.core.config import get_settings
from app.core.container import ApplicationContainer, get_container
from app.core.logging import configure_logging
from app.infrastructure.database.session import init_db
from app.interfaces.http.errors import register_exception_handlers
from app.interfaces.http.middleware import BodySizeLimitMiddleware, RequestIdMiddleware
from app.interfaces.http.routers import create_api_router
from app.schemas import HealthResponse

logger = logging.getLogger(__name__)


def create_app(container: ApplicationContainer | None = None) -> FastAPI:
    container = container or get_container()
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.database.create_tables:
            await init_db(container.engine)
        logger.info("service started (environment=%s)", settings.environment)
        yield
        await container.shutdown()
        logger.info("service stopped")

    app = FastAPI(
        title=settings.project_name,
        description="Concurrent wallet ledger with transactional deposit/withdraw",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    # last added runs first: request ids cover body-size rejections too
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.server.max_body_size)
    app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(app)
    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", response_model=HealthResponse, include_in_schema=False)
    async def health() -> HealthResponse:
        return HealthResponse()

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level, settings.logging.format)
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
        log_config=None,
    )
