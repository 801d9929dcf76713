"""
Calculator Router

Normalization, evaluation and history endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from config.constants import LOCALE_MAP, SPEECH_RECOGNITION_LANG_MAP
from core.dependencies import get_calculator, get_history, get_webhook_sink
from core.schemas import (
    CalculateRequest,
    CalculateResponse,
    EvaluateRequest,
    EvaluateResponse,
    HistoryResponse,
    LanguageInfo,
    NormalizeRequest,
    NormalizeResponse,
)
from services.calculator import CalculatorService
from services.math.evaluator import EvaluationOutcome
from services.math.languages import LANGUAGE_PATTERNS
from services.sinks.history import CalculationHistory
from utils.logging import get_logger, log_calculation
from utils.rate_limit import limit_calculate, limit_history

logger = get_logger(__name__)

router = APIRouter(tags=["Calculator"])


def _publish(
    equation: str,
    outcome: EvaluationOutcome,
    source: str,
    language: str,
    transcript: Optional[str] = None,
) -> None:
    """Hand a successful result to the history and webhook sinks."""
    log_calculation(equation, outcome.value, source, language)
    if not outcome.ok:
        return

    get_history().record(
        equation=equation,
        result=outcome.value,
        display=outcome.display,
        source=source,
        language=language,
        transcript=transcript,
    )
    webhook = get_webhook_sink()
    if webhook is not None:
        webhook.notify(equation, outcome.value, source=source)


def _evaluate_response(outcome: EvaluationOutcome) -> dict:
    return {
        "result": outcome.value,
        "display": outcome.display,
        "ok": outcome.ok,
        "error": outcome.error_kind.value if outcome.error_kind else None,
        "detail": outcome.detail,
    }


@router.get("/languages", response_model=List[LanguageInfo])
async def list_languages():
    """Supported languages with their speech tags and display locales."""
    return [
        LanguageInfo(
            code=code,
            name=patterns.name,
            speech_tag=SPEECH_RECOGNITION_LANG_MAP[code],
            locale=LOCALE_MAP[code],
        )
        for code, patterns in LANGUAGE_PATTERNS.items()
    ]


@router.post("/normalize", response_model=NormalizeResponse)
@limit_calculate
async def normalize(
    request: Request,  # Required for rate limiter
    payload: NormalizeRequest,
    calculator: CalculatorService = Depends(get_calculator),
):
    """Rewrite a spoken transcript into a canonical expression, with the per-pass trace."""
    language = calculator.resolve_language(payload.language)
    result = calculator.normalize_detailed(payload.text, language)
    return NormalizeResponse(
        normalized=result.value,
        language=language,
        valid=result.is_valid,
        steps=result.steps,
        errors=result.errors,
    )


@router.post("/evaluate", response_model=EvaluateResponse)
@limit_calculate
async def evaluate(
    request: Request,  # Required for rate limiter
    payload: EvaluateRequest,
    calculator: CalculatorService = Depends(get_calculator),
):
    """
    Evaluate a canonical expression.

    Failures are reported in the body with ``ok: false`` and the result
    MATH_ERROR, never as an HTTP error.
    """
    language = calculator.resolve_language(payload.language)
    outcome = calculator.evaluate_detailed(payload.expression, payload.source, language)
    _publish(payload.expression, outcome, payload.source.value, language)
    return _evaluate_response(outcome)


@router.post("/calculate", response_model=CalculateResponse)
@limit_calculate
async def calculate(
    request: Request,  # Required for rate limiter
    payload: CalculateRequest,
    calculator: CalculatorService = Depends(get_calculator),
):
    """Normalize and evaluate a transcript as speech input."""
    language = calculator.resolve_language(payload.language)
    equation, outcome = calculator.calculate(payload.text, language)
    _publish(equation, outcome, "speech", language, transcript=payload.text)
    return {**_evaluate_response(outcome), "equation": equation, "language": language}


@router.get("/history", response_model=HistoryResponse)
@limit_history
async def get_calculation_history(
    request: Request,  # Required for rate limiter
    limit: Optional[int] = Query(None, ge=1, description="Maximum entries to return"),
    history: CalculationHistory = Depends(get_history),
):
    """Most recent calculations first."""
    entries = history.entries(limit)
    return {"entries": [entry.to_dict() for entry in entries], "count": len(entries)}


@router.delete("/history")
@limit_history
async def clear_calculation_history(
    request: Request,  # Required for rate limiter
    history: CalculationHistory = Depends(get_history),
):
    """Clear the calculation history."""
    removed = history.clear()
    return {"success": True, "removed": removed}
