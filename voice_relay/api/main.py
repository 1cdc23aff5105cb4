"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance.
It handles:
1. Application initialization
2. Router registration
3. Middleware configuration (audit, CORS)
4. Exception handlers
5. Startup/shutdown of the shared RelayService

Run with: uvicorn voice_relay.api.main:app --reload
"""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from voice_relay import __version__
from voice_relay.core.config import get_settings
from voice_relay.core.logging_config import setup_logging, get_logger
from voice_relay.core.exceptions import CredentialExchangeError, RelayException
from voice_relay.core.audit import AuditMiddleware
from voice_relay.api.routes import chat_router, voices_router, health_router
from voice_relay.services.relay_service import RelayService


# Initialize logging before anything else
settings = get_settings()
setup_logging(settings.log_level, Path(settings.log_dir), settings.app_name)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup builds the RelayService, which mints the provider token. A
    credential failure aborts startup instead of failing every request.
    """
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(f"LLM Model: {settings.llm_model}")
    logger.info(f"Google auth mode: {settings.google_auth_mode}")

    try:
        app.state.relay_service = RelayService.from_settings(settings)
    except CredentialExchangeError as e:
        logger.critical(f"Startup aborted, could not obtain credentials: {e.message}")
        raise

    yield  # Application runs here

    logger.info(f"Shutting down {settings.app_name}")
    await app.state.relay_service.aclose()
    app.state.relay_service = None


app = FastAPI(
    title="Voice Relay API",
    description="""
    Relays a prompt to Gemini and reads the answer aloud with ElevenLabs.

    - `POST /chat`: `{prompt, voice_id}` → `{text, audio}`
    - `GET /voices`: available voices
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# Middleware Configuration (Order matters!)
# ============================================================

if settings.enable_audit_logging:
    app.add_middleware(AuditMiddleware)
    logger.info("Audit logging middleware enabled")

if settings.cors_allow_all:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ============================================================
# Exception Handlers
# ============================================================

@app.exception_handler(RelayException)
async def relay_exception_handler(request: Request, exc: RelayException):
    """Handle all custom relay exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors, reported like missing fields."""
    logger.warning(f"Rejected request body: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request body",
            "code": "validation_error",
            "details": str(exc.errors()) if settings.is_development() else None,
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions globally.

    Detailed error information is only included in development mode.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "code": "internal_error",
            "details": str(exc) if settings.is_development() else None,
        }
    )


# ============================================================
# Routers
# ============================================================

app.include_router(health_router)
app.include_router(chat_router)
app.include_router(voices_router)


@app.get("/", include_in_schema=False)
async def root():
    """Redirect root to the bundled web client."""
    return RedirectResponse(url="/index.html", status_code=302)


# Static web client, mounted last so API routes take precedence
public_dir = Path(settings.public_dir)
if public_dir.is_dir():
    app.mount("/", StaticFiles(directory=public_dir), name="public")
    logger.info(f"Serving static files from {public_dir.resolve()}")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "voice_relay.api.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development()
    )
