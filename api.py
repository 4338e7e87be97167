"""
FastAPI REST API for the bootcamp directory.

Serves bootcamps, courses, reviews and users with filtering, sorting,
field selection, pagination and relation expansion on every listing.
"""

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request

from devcamper import config
from devcamper.error_handlers import install_error_handlers
from devcamper.orchestrator import AdvancedResults
from devcamper.routes import api_router

if not logging.getLogger().handlers:
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

logger = logging.getLogger(__name__)


def build_results() -> AdvancedResults:
    """AdvancedResults for the configured store backend."""
    translator_config = config.translator_config_from_env()
    if config.STORE_BACKEND == "memory":
        logger.warning("Using the in-memory store; data is lost on restart")
        return AdvancedResults.in_memory(config=translator_config)
    return AdvancedResults.from_mongodb(
        mongo_uri=config.MONGO_URI,
        database_name=config.MONGO_DATABASE,
        config=translator_config,
    )


def create_app(results: Optional[AdvancedResults] = None) -> FastAPI:
    """
    Create the API application.

    Args:
        results: Query orchestrator to serve from; built from the
            environment when omitted

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="DevCamper API",
        description="Bootcamp directory with filtered, paginated listings",
        version="1.0.0",
    )
    app.state.results = results if results is not None else build_results()

    install_error_handlers(app)
    app.include_router(api_router)

    if config.IS_DEV_ENV:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            logger.info(
                "%s %s %d %.1fms",
                request.method,
                request.url,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)
