"""
Utilities Module

Provides shared utilities across the application:
- Logging configuration
- Custom exceptions
- Rate limiting
"""

from .logging import get_logger, setup_logging, log_api_call, log_calculation
from .exceptions import (
    ErrorKind,
    VoiceCalcError,
    SessionError,
    PermissionDeniedError,
    UnsupportedPlatformError,
    CalculationError,
    EmptyInputError,
    IncompleteExpressionError,
    InvalidCharactersError,
    EvaluationFailureError,
    AmbiguousVoiceNumberError,
)
from .rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    RATE_LIMITS,
    limit_calculate,
    limit_history,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "log_api_call",
    "log_calculation",
    # Exceptions
    "ErrorKind",
    "VoiceCalcError",
    "SessionError",
    "PermissionDeniedError",
    "UnsupportedPlatformError",
    "CalculationError",
    "EmptyInputError",
    "IncompleteExpressionError",
    "InvalidCharactersError",
    "EvaluationFailureError",
    "AmbiguousVoiceNumberError",
    # Rate Limiting
    "limiter",
    "rate_limit_exceeded_handler",
    "RATE_LIMITS",
    "limit_calculate",
    "limit_history",
]
