"""FastAPI application factory."""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import load_config
from core.errors import BaseUidError
from core.health import (
    HealthChecker,
    check_clock,
    check_codec,
    create_entropy_check,
)
from internal.logging import get_logger, LogLevel, StructuredLogger
from utils.crash import create_async_handler
from ui.routes import uids, health


def create_app(config=None):
    """Create and configure the FastAPI application."""
    config = config or load_config()

    # Configure structured logging
    StructuredLogger.configure(min_level=LogLevel.parse(config.logging.level))
    logger_instance = get_logger().bind(service="small-uid")

    health_checker = HealthChecker()
    health_checker.register("clock", check_clock, critical=True)
    health_checker.register("codec", check_codec, critical=True)
    health_checker.register("entropy", create_entropy_check(), critical=False)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger_instance.info("Application starting", version="1.0.0")
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(create_async_handler(logger_instance))
        report = await health_checker.check()
        logger_instance.info("Application started successfully", health=report.status.value)

        yield

        # Shutdown
        logger_instance.info("Application shutdown complete")

    app = FastAPI(
        title="Small UID",
        version="1.0.0",
        description="small, sortable, url-safe unique ids",
        lifespan=lifespan,
    )

    # Initialize route modules with dependencies
    uids.init(config.uid, logger_instance.bind(router="uid"))
    health.init(health_checker)

    # Include routers
    app.include_router(uids.router)
    app.include_router(health.router)

    @app.exception_handler(BaseUidError)
    async def uid_error(request: Request, exc: BaseUidError):
        logger_instance.warn("Rejected uid input", error=exc, path=request.url.path,
                             kind=type(exc).__name__)
        return JSONResponse(status_code=400, content=exc.to_dict())

    return app
