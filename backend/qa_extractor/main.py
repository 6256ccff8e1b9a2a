"""
QA Extractor: FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings) wires services, middleware,
       exception handlers and routes, and returns the app.
Who:   uvicorn imports `qa_extractor.main:app`; tests call create_app()
       with their own settings and a fake model client.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌─────────────────┐               │
    │  │  Request ID  │→│  Logging        │               │
    │  └──────────────┘ └─────────────────┘               │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────┐ ┌──────────────────┐ ┌──────────────┐   │
    │  │ GET /  │ │ POST /extract_qa │ │ GET /health  │   │
    │  └────────┘ └──────────────────┘ └──────────────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→400 │ other→500    │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (abort startup on missing GOOGLE_API_KEY)
    Shutdown:
    1. Log shutdown complete
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from qa_extractor import __version__
from qa_extractor.config import Settings, settings as default_settings
from qa_extractor.exceptions import (
    ImageNotFoundError,
    QAExtractorError,
    ValidationError,
)
from qa_extractor.middleware.logging import RequestLoggingMiddleware
from qa_extractor.middleware.request_id import RequestIDMiddleware, request_id_var
from qa_extractor.routes import extract, health, root
from qa_extractor.services.extraction_service import ExtractionService
from qa_extractor.services.file_service import FileService
from qa_extractor.services.gemini_service import GeminiClient
from qa_extractor.services.image_service import ImageNormalizer
from qa_extractor.services.llm_base import ModelClient

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR = "Internal server error"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once during startup, before any other initialization logs.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, then configuration validation. A missing API key
    raises here, which makes uvicorn abort startup.
    """
    app_settings: Settings = app.state.settings

    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("QA Extractor %s starting up...", __version__)

    try:
        app_settings.validate_required()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise

    logger.info(
        "Server ready at http://%s:%d (model=%s, environment=%s)",
        app_settings.host,
        app_settings.port,
        app_settings.gemini_model,
        app_settings.environment,
    )
    logger.info("=" * 60)

    yield

    logger.info("QA Extractor shutting down...")
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def server_error_body(exc: Exception, include_stack: bool) -> dict:
    """JSON body for a 500: generic error, underlying message, optional stack."""
    message = exc.message if isinstance(exc, QAExtractorError) else str(exc)
    body = {"error": INTERNAL_SERVER_ERROR, "message": message}
    if include_stack:
        body["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return body


def register_exception_handlers(app: FastAPI, app_settings: Settings) -> None:
    """
    Map the exception taxonomy to HTTP responses, once for all routes.

    Handler hierarchy:
        ValidationError         → 400 {"error": "No valid image provided"}
        ImageNotFoundError      → 400 {"error": "Image file not found"}
        QAExtractorError (base) → 500 (ImageReadError, ImageDecodeError,
                                  ModelInvocationError)
        Exception (fallback)    → 500 (unexpected errors)

    500 bodies carry a stack trace only in development mode.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(ImageNotFoundError)
    async def handle_image_not_found(request: Request, exc: ImageNotFoundError):
        rid = request_id_var.get("")
        logger.warning("[%s] Image not found: %s", rid, exc.path)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(QAExtractorError)
    async def handle_pipeline_error(request: Request, exc: QAExtractorError):
        """ImageReadError, ImageDecodeError and ModelInvocationError land here."""
        rid = request_id_var.get("")
        logger.error(
            "[%s] %s: %s | Context: %s",
            rid,
            type(exc).__name__,
            exc.message,
            exc.context,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content=server_error_body(exc, app_settings.is_development),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all so clients always get the JSON error shape."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=server_error_body(exc, app_settings.is_development),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    model_client: Optional[ModelClient] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Configuration; defaults to the environment-loaded one.
        model_client: Model client to inject; defaults to a GeminiClient
            built from app_settings.

    Returns: Fully configured FastAPI instance.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="QA Extractor API",
        description=(
            "Extracts question/answer pairs from images using the Google Gemini API. "
            "Upload an image (or name a file on the server) and get structured pairs back."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Wire Services ─────────────────────────────────────────────────────
    client = model_client or GeminiClient(app_settings)
    app.state.settings = app_settings
    app.state.model_client = client
    app.state.file_service = FileService()
    app.state.extraction_service = ExtractionService(
        model_client=client,
        normalizer=ImageNormalizer(
            max_side=app_settings.image_max_side,
            quality=app_settings.jpeg_quality,
        ),
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → routes
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app, app_settings)

    app.include_router(root.router)
    app.include_router(extract.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the default app with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "qa_extractor.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


# uvicorn expects `qa_extractor.main:app` to be importable
app = create_app()
