"""
Custom Exceptions Module

Defines application-specific exceptions for clearer error handling.
All exceptions inherit from a base VoiceCalcError for easy catching.

Calculation errors are raised inside the expression evaluator and collapsed
to the MATH_ERROR sentinel at its boundary; they never reach callers of
``evaluate()``. Session errors abort ``VoiceSessionController.start()``.

Usage:
    from utils.exceptions import PermissionDeniedError, ErrorKind

    try:
        controller.start()
    except PermissionDeniedError as e:
        logger.warning(f"Microphone blocked: {e}")
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorKind(str, Enum):
    """Error categories surfaced on error events."""
    PERMISSION_DENIED = "permission_denied"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    EMPTY_INPUT = "empty_input"
    INCOMPLETE_EXPRESSION = "incomplete_expression"
    INVALID_CHARACTERS = "invalid_characters"
    EVALUATION_FAILURE = "evaluation_failure"
    AMBIGUOUS_VOICE_NUMBER = "ambiguous_voice_number"
    RECOGNITION_FAILURE = "recognition_failure"
    SPEECH_SYNTHESIS_FAILURE = "speech_synthesis_failure"


class VoiceCalcError(Exception):
    """
    Base exception for all Voice Calc application errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (optional)
        status_code: HTTP status code to return (optional)
    """

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "kind": self.kind.value if self.kind else None,
            "message": self.message,
            "details": self.details
        }


# =============================================================================
# Session Exceptions
# =============================================================================

class SessionError(VoiceCalcError):
    """Raised when a voice session cannot be started."""


class PermissionDeniedError(SessionError):
    """
    Raised when microphone or recognition permission is not granted.

    The session stays idle; the caller should alert the user.
    """

    kind = ErrorKind.PERMISSION_DENIED

    def __init__(
        self,
        message: str = "Microphone permission is required",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, details=details, status_code=403)


class UnsupportedPlatformError(SessionError):
    """Raised when no speech-recognition capability is available."""

    kind = ErrorKind.UNSUPPORTED_PLATFORM

    def __init__(
        self,
        message: str = "Speech recognition is not supported on this platform",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, details=details, status_code=501)


# =============================================================================
# Calculation Exceptions
# =============================================================================

class CalculationError(VoiceCalcError):
    """
    Base class for evaluation-time failures.

    Attributes:
        expression: The expression being evaluated when the failure occurred
    """

    kind = ErrorKind.EVALUATION_FAILURE
    default_message = "Calculation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        expression: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.expression = expression
        super().__init__(
            message=message or self.default_message,
            details={"expression": expression, **(details or {})},
            status_code=422
        )


class EmptyInputError(CalculationError):
    """Raised for empty or whitespace-only input."""
    kind = ErrorKind.EMPTY_INPUT
    default_message = "Nothing to calculate"


class IncompleteExpressionError(CalculationError):
    """Raised when an expression ends with a dangling binary operator."""
    kind = ErrorKind.INCOMPLETE_EXPRESSION
    default_message = "Expression ends with an operator"


class InvalidCharactersError(CalculationError):
    """Raised when the sanitization gate rejects a character."""
    kind = ErrorKind.INVALID_CHARACTERS
    default_message = "Expression contains characters that are not allowed"


class EvaluationFailureError(CalculationError):
    """Raised when the arithmetic engine cannot produce a finite number."""
    kind = ErrorKind.EVALUATION_FAILURE
    default_message = "Expression could not be evaluated"


class AmbiguousVoiceNumberError(CalculationError):
    """Raised when a bare number is dictated without any operator."""
    kind = ErrorKind.AMBIGUOUS_VOICE_NUMBER
    default_message = "A number was heard but no operation"
