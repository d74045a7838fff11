"""
Application factory.

Serve with:
    uvicorn --factory resource_crud.main:create_app
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resource_crud.api.v1 import api_router
from resource_crud.api.v1.error_handlers import register_exception_handlers
from resource_crud.config.settings import Settings, get_settings
from resource_crud.core.logging import RequestIDMiddleware, setup_logging
from resource_crud.database.session import create_engine_from_settings, create_session_factory, init_models
from resource_crud.services.product_service import build_product_service

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    When `session_factory` is given the caller owns the engine (tests); otherwise
    the app creates one from settings and disposes it on shutdown.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    engine = None
    if session_factory is None:
        engine = create_engine_from_settings(settings)
        session_factory = create_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if engine is not None:
            if settings.DB_CREATE_ALL:
                await init_models(engine)
            logger.info("app.startup", extra={"env": settings.ENV})
        yield
        if engine is not None:
            await engine.dispose()
            logger.info("app.shutdown")

    app = FastAPI(title="Resource CRUD", lifespan=lifespan)
    app.state.product_service = build_product_service(session_factory)

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    return app
