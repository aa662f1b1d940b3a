# =============================================================================
# REELSOCIAL BACKEND - MAIN APPLICATION
# =============================================================================
# File: main.py
# Description: FastAPI application factory with lifecycle management
# =============================================================================

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from reelsocial import __version__
from reelsocial.api import (
    api_router,
    health_router,
    RequestIDMiddleware,
    LoggingMiddleware,
)
from reelsocial.context import AppContext
from reelsocial.core.config import Settings, get_settings
from reelsocial.core.exceptions import AppException


logger = logging.getLogger(__name__)


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager.

    - Startup: connect the database, create tables, start the AI scheduler
    - Shutdown: stop background work and close all connections
    """
    context: AppContext = app.state.context
    settings = context.settings

    # STARTUP
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    try:
        await context.startup()
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise
    logger.info(f"{settings.app_name} started successfully")

    yield  # Application runs here

    # SHUTDOWN
    logger.info(f"Shutting down {settings.app_name}")
    try:
        await context.shutdown()
    except Exception as e:
        logger.error(f"Shutdown error: {e}")
    logger.info(f"{settings.app_name} shutdown complete")


# =============================================================================
# ERROR BODIES
# =============================================================================

def _error_body(error_code: str, message: str, details: Optional[dict] = None) -> dict:
    return {
        "error": True,
        "error_code": error_code,
        "message": message,
        "details": details or {},
    }


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_application(
    settings: Optional[Settings] = None,
    context: Optional[AppContext] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Configuration (defaults to the environment)
        context: Prebuilt application context, e.g. with fake collaborators

    Returns:
        FastAPI: Configured application instance
    """
    if context is None:
        context = AppContext(settings or get_settings())
    settings = context.settings
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Movie-review social network API",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.context = context

    # =========================================================================
    # MIDDLEWARE STACK (last added = outermost)
    # =========================================================================

    # Logging (reads the request ID set by the outer middleware)
    app.add_middleware(LoggingMiddleware)

    # Request ID
    app.add_middleware(RequestIDMiddleware)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request,
        exc: AppException,
    ) -> JSONResponse:
        """Handle application exceptions."""
        if exc.status_code >= 500:
            logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Handle standard HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(f"HTTP_{exc.status_code}", str(exc.detail)),
        )

    @app.exception_handler(RequestValidationError)
    @app.exception_handler(PydanticValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Request bodies, forms and query strings that fail validation."""
        errors = exc.errors() if hasattr(exc, "errors") else []
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            content=_error_body(
                "VALIDATION_ERROR",
                "Validation failed",
                {"errors": jsonable_encoder(errors, exclude={"ctx", "url"})},
            ),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled exception")

        # Don't expose internal errors in production
        if settings.is_production:
            message = "An internal error occurred"
        else:
            message = str(exc)

        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", message),
        )

    # =========================================================================
    # ROUTES
    # =========================================================================

    app.include_router(api_router)

    # Health routes at root level
    app.include_router(health_router)

    # Uploaded images
    app.mount(
        "/images",
        StaticFiles(directory=settings.upload_path, check_dir=False),
        name="images",
    )

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.app_name,
            "version": __version__,
            "status": "running",
            "docs": "/docs" if settings.is_development else None,
        }

    return app


# =============================================================================
# ENTRYPOINT
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "reelsocial.main:create_application",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level.lower(),
    )
