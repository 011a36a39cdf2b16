"""
FastAPI main application for the author and book services.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import APIConfig, config as default_api_config
from api.container import ServiceContainer
from api.models import ErrorResponse, HealthResponse
from api.routes import authors_router, books_router
from utilities.config import BffConfig, config as default_config
from utilities.logger import setup_logging

logger = structlog.get_logger(__name__)


def create_app(
    bff_config: Optional[BffConfig] = None,
    api_config: Optional[APIConfig] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        bff_config: Service configuration; the environment-derived default if omitted
        api_config: Server/API configuration
        container: Pre-built components; built during startup if omitted
    """
    bff_config = bff_config or (container.config if container else default_config)
    api_config = api_config or default_api_config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Bookshelf BFF API")
        app.state.container = container or ServiceContainer.build(bff_config)

        yield

        logger.info("Shutting down Bookshelf BFF API")
        if container is None:
            await app.state.container.close()

    app = FastAPI(
        title=api_config.api_title,
        description=api_config.api_description,
        version=api_config.api_version,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_credentials=api_config.cors_allow_credentials,
        allow_methods=api_config.cors_allow_methods,
        allow_headers=api_config.cors_allow_headers,
    )

    if bff_config.serve_authors:
        app.include_router(authors_router)
    if bff_config.serve_books:
        app.include_router(books_router)

    # Exception handlers
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail),
                status_code=exc.status_code
            ).model_dump(),
            headers=exc.headers
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="Internal server error",
                detail=str(exc) if api_config.debug else None,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            ).model_dump()
        )

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        broker_status = "healthy"
        try:
            await request.app.state.container.broker.ping()
        except Exception as e:
            logger.warning("Broker health check failed", error=str(e))
            broker_status = "unhealthy"

        return HealthResponse(
            status="healthy" if broker_status == "healthy" else "degraded",
            timestamp=datetime.now(timezone.utc),
            version=api_config.api_version,
            broker_status=broker_status
        )

    # Metrics endpoint
    @app.get("/metrics", tags=["Health"])
    async def get_metrics(request: Request):
        """Get request, error and duration metrics per operation."""
        return request.app.state.container.metrics.snapshot()

    return app


def build_app() -> FastAPI:
    """Entry point for uvicorn's ``--factory`` mode: configures logging first."""
    setup_logging(
        log_level=default_config.log_level,
        log_format=default_config.log_format,
        log_file=default_config.get_log_file_path(),
        debug=default_config.debug
    )
    return create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:build_app",
        factory=True,
        host=default_api_config.host,
        port=default_api_config.port,
        log_level="info"
    )
