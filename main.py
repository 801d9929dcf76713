"""
Voice Calc - Backend Application

FastAPI application for a voice-driven calculator.
Turns spoken arithmetic in six languages into safely evaluated results.

Features:
    - Spoken-math normalization (en, es, fr, de, pt, it)
    - Sanitized expression evaluation
    - Remote voice sessions over WebSocket
    - Calculation history and webhook notifications

Run:
    python main.py
    # or
    uvicorn main:app --reload
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
import uvicorn

from config.settings import settings
from core.dependencies import get_calculator, initialize_services, shutdown_services
from services.math.languages import SUPPORTED_LANGUAGES
from utils.logging import setup_logging, get_logger
from utils.exceptions import VoiceCalcError
from utils.rate_limit import limiter, rate_limit_exceeded_handler

# Import Routers
from routers import calculator, voice

# Initialize logging
setup_logging()
logger = get_logger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events:
        - Startup: Build the calculator and result sinks
        - Shutdown: Flush pending webhooks and close clients
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    initialize_services()
    app.state.calculator = get_calculator()

    yield

    # Shutdown
    logger.info("Shutting down application")
    await shutdown_services()


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    description="Voice-driven calculator API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Attach rate limiter to app state
app.state.limiter = limiter


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=500)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(VoiceCalcError)
async def voicecalc_exception_handler(request: Request, exc: VoiceCalcError):
    """
    Handle custom Voice Calc exceptions.

    Returns standardized error response with appropriate status code.
    """
    logger.error(f"VoiceCalcError: {exc.message}", extra={"details": exc.details})
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


# Rate limit exceeded handler
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


# =============================================================================
# Routers
# =============================================================================

app.include_router(calculator.router)
app.include_router(voice.router)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint - basic health check.

    Returns:
        dict: Simple status message
    """
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Detailed health check endpoint.

    Checks:
        - Arithmetic engine round trip
        - Pattern cache state
        - Sink configuration

    Returns:
        dict: Health status with component details
    """
    calculator_service = get_calculator()
    engine_ok = calculator_service.evaluate("1 + 1") == "2"
    cache = calculator_service.compiler.cache_info()

    return {
        "status": "healthy" if engine_ok else "degraded",
        "components": {
            "evaluator": engine_ok,
            "history_enabled": settings.HISTORY_ENABLED,
            "webhook_configured": settings.WEBHOOK_URL is not None,
        },
        "languages": list(SUPPORTED_LANGUAGES),
        "pattern_cache": cache._asdict(),
        "version": settings.APP_VERSION
    }


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
