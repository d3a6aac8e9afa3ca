import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resource_hub.config import settings
from resource_hub.database import Base, engine
from resource_hub.exception_handlers import register_exception_handlers
from resource_hub.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from resource_hub.plugins import create_hook_registry, initialize_plugins
from resource_hub.routes import blocks, resources

setup_structured_logging(log_level=settings.log_level, json_format=settings.log_json)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Tasks to run at application startup and shutdown."""
    logger.info("Starting up %s v%s (%s)", settings.app_name, settings.app_version, settings.environment)

    if settings.debug:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created (if not existing).")

    yield

    logger.info("Shutting down the application...")
    await engine.dispose()


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Render resource library blocks and export resource metadata",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Extension points are wired once; handlers never change while serving.
    app.state.hooks = create_hook_registry()
    initialize_plugins(app.state.hooks, settings.plugins)

    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(blocks.router, prefix="/api/v1")
    app.include_router(resources.router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "healthy", "version": settings.app_version}

    if settings.debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
