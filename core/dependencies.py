"""
FastAPI Dependencies Module

Provides dependency injection for services and shared state.
All service instances are singletons so the compiled-pattern cache and the
history are shared by every request and voice session.

Usage:
    from core.dependencies import get_calculator

    @router.post("/evaluate")
    async def evaluate(
        calculator: CalculatorService = Depends(get_calculator)
    ):
        ...
"""

from utils.logging import get_logger

# Lazy imports to avoid circular dependencies
_calculator = None
_history = None
_webhook_sink = None

logger = get_logger(__name__)


# =============================================================================
# Service Initialization
# =============================================================================

def _initialize_services() -> None:
    """
    Initialize all service singletons.

    Called lazily on first access to any service.
    """
    global _calculator, _history, _webhook_sink

    from services.calculator import CalculatorService
    from services.sinks.history import CalculationHistory
    from services.sinks.webhook import WebhookConfig, WebhookSink

    _calculator = CalculatorService()
    _history = CalculationHistory()

    webhook_config = WebhookConfig.from_settings()
    if webhook_config is None:
        logger.info("WEBHOOK_URL not configured - webhook notifications disabled")
        _webhook_sink = None
    else:
        _webhook_sink = WebhookSink(webhook_config)

    logger.info(f"Services initialized (default language '{_calculator.default_language}')")


def _ensure_initialized() -> None:
    """Ensure services are initialized."""
    if _calculator is None:
        _initialize_services()


def initialize_services() -> None:
    _ensure_initialized()


async def shutdown_services() -> None:
    """Close network clients held by the services."""
    if _webhook_sink is not None:
        await _webhook_sink.drain()
        await _webhook_sink.close()


def reset_services() -> None:
    """Drop every singleton; the next access rebuilds them."""
    global _calculator, _history, _webhook_sink
    _calculator = None
    _history = None
    _webhook_sink = None


# =============================================================================
# Service Providers
# =============================================================================

def get_calculator():
    """
    Get CalculatorService singleton.

    Returns:
        CalculatorService: Shared normalizer, evaluator and pattern cache
    """
    _ensure_initialized()
    return _calculator


def get_history():
    """
    Get CalculationHistory singleton.

    Returns:
        CalculationHistory: In-memory calculation history
    """
    _ensure_initialized()
    return _history


def get_webhook_sink():
    """
    Get WebhookSink singleton.

    Returns:
        Optional[WebhookSink]: Webhook sink or None if not configured
    """
    _ensure_initialized()
    return _webhook_sink


def get_result_sinks() -> list:
    """History and webhook sinks that should see every result."""
    _ensure_initialized()
    return [sink for sink in (_history, _webhook_sink) if sink is not None]
