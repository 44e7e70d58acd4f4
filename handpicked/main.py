"""
Handpicked Main Application

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from handpicked import __version__
from handpicked.config import get_config, load_config
from handpicked.database import close_db, init_db
from handpicked.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup: load configuration, set up logging, initialize the database.
    Shutdown: close database connections.
    """
    config = load_config()
    setup_logging(config.logging, log_level=config.server.log_level if config.server.debug else None)
    logger.info(f"Starting Handpicked v{__version__}, server port: {config.server.port}")

    await init_db()

    yield

    logger.info("Shutting down Handpicked")
    await close_db()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Handpicked",
        description="Always-on curated video channels",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    from handpicked.api import api_router
    app.include_router(api_router)

    return app


app = create_app()


def main() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "handpicked.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
    )


if __name__ == "__main__":
    main()
