"""
Core Module

Provides request/response schemas and dependencies for the application.
"""

from .schemas import (
    NormalizeRequest,
    NormalizeResponse,
    EvaluateRequest,
    EvaluateResponse,
    CalculateRequest,
    CalculateResponse,
    LanguageInfo,
    HistoryEntryResponse,
    HistoryResponse,
)
from .dependencies import (
    get_calculator,
    get_history,
    get_webhook_sink,
    get_result_sinks,
    initialize_services,
    shutdown_services,
    reset_services,
)

__all__ = [
    # Schemas
    "NormalizeRequest",
    "NormalizeResponse",
    "EvaluateRequest",
    "EvaluateResponse",
    "CalculateRequest",
    "CalculateResponse",
    "LanguageInfo",
    "HistoryEntryResponse",
    "HistoryResponse",
    # Dependencies
    "get_calculator",
    "get_history",
    "get_webhook_sink",
    "get_result_sinks",
    "initialize_services",
    "shutdown_services",
    "reset_services",
]
