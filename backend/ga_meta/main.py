"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ga_meta import __version__
from ga_meta.api import api_router
from ga_meta.core.config import settings
from ga_meta.core.logging import setup_logging

setup_logging("api")
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup and shutdown events.
    """
    logger.info(
        "Starting Grand Archive Meta API",
        version=__version__,
        debug=settings.api_debug,
    )

    yield

    logger.info("Shutting down Grand Archive Meta API")

    from ga_meta.db.session import engine
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Grand Archive TCG tournament results and meta statistics",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


app.include_router(api_router, prefix="/api")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug("Request", method=request.method, path=request.url.path)
    response = await call_next(request)
    logger.debug(
        "Response",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ga_meta.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
