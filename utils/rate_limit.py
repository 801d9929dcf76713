"""
Rate Limiting

Per-client request limits for the HTTP endpoints, built on slowapi.
Counters live in Redis when REDIS_URL is set, otherwise in process memory.

Usage:
    from utils.rate_limit import limiter, rate_limit_exceeded_handler

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from config.settings import settings
from utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Rate Limit Presets
# =============================================================================

RATE_LIMITS = {
    "calculate": "120/minute",  # Normalize / evaluate / calculate
    "history": "60/minute",     # History reads and clears
    "default": "300/minute",    # General endpoints
}

DEFAULT_RETRY_AFTER = 60


# =============================================================================
# Limiter
# =============================================================================

def get_client_key(request: Request) -> str:
    """
    Rate-limit key for a request.

    The first X-Forwarded-For hop is used only when TRUST_PROXY_HEADERS is
    set; otherwise any client could pick its own key.
    """
    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def _get_storage_uri() -> str:
    if settings.REDIS_URL:
        logger.info("Rate limiter using Redis storage")
        return settings.REDIS_URL
    logger.info("Rate limiter using in-memory storage")
    return "memory://"


limiter = Limiter(
    key_func=get_client_key,
    default_limits=[RATE_LIMITS["default"]],
    storage_uri=_get_storage_uri(),
)


# =============================================================================
# Exception Handler
# =============================================================================

async def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded
) -> JSONResponse:
    """Answer 429 in the same error shape as VoiceCalcError.to_dict()."""
    retry_after = DEFAULT_RETRY_AFTER
    if exc.limit is not None:
        retry_after = exc.limit.limit.get_expiry()

    logger.warning(f"Rate limit exceeded for {get_client_key(request)} on {request.url.path}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "RateLimitExceeded",
            "kind": None,
            "message": f"Too many requests. Limit: {exc.detail}",
            "details": {"retry_after": retry_after},
        },
        headers={"Retry-After": str(retry_after)}
    )


# =============================================================================
# Decorator Helpers
# =============================================================================

def limit_calculate(func):
    """Apply calculation rate limit."""
    return limiter.limit(RATE_LIMITS["calculate"])(func)


def limit_history(func):
    """Apply history rate limit."""
    return limiter.limit(RATE_LIMITS["history"])(func)
