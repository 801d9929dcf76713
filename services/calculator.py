"""
Calculator Service

Application-owned context that bundles the compiled-pattern cache, the
spoken-math normalizer and the expression evaluator, plus the debounced
live preview used for keypad input.

Usage:
    from services.calculator import CalculatorService

    calculator = CalculatorService()
    calculator.normalize("twenty plus five", "en")      # "20 + 5"
    calculator.evaluate("20 + 5", "speech", "en")       # "25"
"""

from typing import Callable, Optional, Tuple, Union

from config.settings import settings
from services.math.base_normalizer import NormalizationResult
from services.math.compiler import CompiledLanguageRegex, PatternCompiler
from services.math.evaluator import EvaluationOutcome, EvaluationSource, ExpressionEvaluator
from services.math.languages import resolve_language
from services.math.normalizer import SpokenMathNormalizer
from services.voice.scheduler import Scheduler, TimerHandle
from utils.logging import get_logger

logger = get_logger(__name__)


class CalculatorService:
    """
    Normalize-and-evaluate facade.

    One instance per application; it owns the matcher cache, so compiled
    patterns are shared by every session and request.
    """

    def __init__(
        self,
        compiler: Optional[PatternCompiler] = None,
        normalizer: Optional[SpokenMathNormalizer] = None,
        evaluator: Optional[ExpressionEvaluator] = None,
        default_language: Optional[str] = None,
    ):
        self.default_language = resolve_language(default_language or settings.DEFAULT_LANGUAGE)
        self.compiler = compiler or PatternCompiler(self.default_language)
        self.normalizer = normalizer or SpokenMathNormalizer()
        self.evaluator = evaluator or ExpressionEvaluator()

    def resolve_language(self, language: Optional[str]) -> str:
        return resolve_language(language, self.default_language)

    def compiled(self, language: Optional[str]) -> CompiledLanguageRegex:
        return self.compiler.compile(self.resolve_language(language))

    def normalize(self, transcript: str, language: Optional[str] = None) -> str:
        """Spoken transcript → canonical expression."""
        return self.normalizer.normalize(transcript, self.compiled(language))

    def normalize_detailed(self, transcript: str, language: Optional[str] = None) -> NormalizationResult:
        """Like normalize(), with the per-pass trace."""
        return self.normalizer.process(transcript, self.compiled(language))

    def evaluate(
        self,
        expression: str,
        source: Union[EvaluationSource, str] = EvaluationSource.KEYPAD,
        language: Optional[str] = None,
    ) -> str:
        """Canonical expression → value string or MATH_ERROR."""
        return self.evaluator.evaluate(expression, source, self.resolve_language(language))

    def evaluate_detailed(
        self,
        expression: str,
        source: Union[EvaluationSource, str] = EvaluationSource.KEYPAD,
        language: Optional[str] = None,
    ) -> EvaluationOutcome:
        return self.evaluator.evaluate_detailed(expression, source, self.resolve_language(language))

    def calculate(self, transcript: str, language: Optional[str] = None) -> Tuple[str, EvaluationOutcome]:
        """
        Normalize and evaluate a transcript as speech input.

        Returns:
            Tuple of (equation, outcome)
        """
        equation = self.normalize(transcript, language)
        return equation, self.evaluate_detailed(equation, EvaluationSource.SPEECH, language)

    def match_percent_of_that(self, transcript: str, language: Optional[str] = None) -> Optional[str]:
        return self.normalizer.match_percent_of_that(transcript, self.compiled(language))

    def create_preview(
        self,
        scheduler: Scheduler,
        on_preview: Callable[[Optional[str]], None],
        language: Optional[str] = None,
    ) -> "LivePreview":
        return LivePreview(self, scheduler, on_preview, language=language)


class LivePreview:
    """
    Debounced evaluation of keypad input.

    Each update() cancels the pending evaluation and schedules a new one, so
    a burst of keystrokes costs at most one evaluation. The callback gets
    the display string, or None when there is nothing worth showing.
    """

    INCOMPLETE_SUFFIXES = ("+", "-", "*", "/", "^", "(")

    def __init__(
        self,
        calculator: CalculatorService,
        scheduler: Scheduler,
        on_preview: Callable[[Optional[str]], None],
        language: Optional[str] = None,
        debounce_ms: Optional[int] = None,
    ):
        self.calculator = calculator
        self.scheduler = scheduler
        self.on_preview = on_preview
        self.language = calculator.resolve_language(language)
        ms = debounce_ms if debounce_ms is not None else settings.PREVIEW_DEBOUNCE_MS
        self.debounce = ms / 1000

        self.evaluations = 0
        self._pending: Optional[TimerHandle] = None
        self._expression = ""

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def update(self, expression: str) -> None:
        self.cancel()
        self._expression = expression or ""
        self._pending = self.scheduler.call_later(self.debounce, self._run)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _run(self) -> None:
        self._pending = None
        expression = self._expression.strip()

        preview = None
        if expression and not expression.endswith(self.INCOMPLETE_SUFFIXES):
            self.evaluations += 1
            outcome = self.calculator.evaluate_detailed(expression, EvaluationSource.KEYPAD, self.language)
            if outcome.ok and outcome.value != expression:
                preview = outcome.display

        try:
            self.on_preview(preview)
        except Exception as e:
            logger.error(f"Preview callback failed: {e}", exc_info=True)
