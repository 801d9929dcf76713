"""
Calculator Service Tests

Tests for the normalize-and-evaluate facade and the keypad live preview.
"""

from services.calculator import CalculatorService
from services.math.evaluator import MATH_ERROR, EvaluationSource
from services.voice.scheduler import PeriodicTask


class TestCalculatorService:
    """Tests for CalculatorService."""

    def test_calculate(self, calculator):
        equation, outcome = calculator.calculate("cinco por tres", "es-MX")
        assert equation == "5 * 3"
        assert outcome.value == "15"

    def test_calculate_is_speech_input(self, calculator):
        equation, outcome = calculator.calculate("seven")
        assert equation == "7"
        assert outcome.value == MATH_ERROR

    def test_evaluate_defaults_to_keypad(self, calculator):
        assert calculator.evaluate("7") == "7"
        assert calculator.evaluate("7", EvaluationSource.SPEECH) == MATH_ERROR

    def test_shares_one_pattern_cache(self, calculator):
        calculator.normalize("two plus two", "en")
        calculator.normalize("three plus three", "en-GB")
        info = calculator.compiler.cache_info()
        assert info.size == 1
        assert info.hits >= 1

    def test_default_language(self):
        calculator = CalculatorService(default_language="it")
        assert calculator.resolve_language("xx") == "it"
        assert calculator.normalize("due più tre") == "2 + 3"


class TestLivePreview:
    """Tests for debounced keypad evaluation."""

    def test_burst_costs_one_evaluation(self, calculator, scheduler):
        previews = []
        preview = calculator.create_preview(scheduler, previews.append)

        preview.update("1")
        preview.update("1+")
        preview.update("1+2")
        assert preview.pending
        scheduler.advance(0.1)

        assert preview.evaluations == 1
        assert previews == ["3"]
        assert not preview.pending

    def test_incomplete_expression_not_evaluated(self, calculator, scheduler):
        previews = []
        preview = calculator.create_preview(scheduler, previews.append)

        preview.update("12 *")
        scheduler.advance(0.1)

        assert preview.evaluations == 0
        assert previews == [None]

    def test_plain_number_has_no_preview(self, calculator, scheduler):
        previews = []
        preview = calculator.create_preview(scheduler, previews.append)

        preview.update("42")
        scheduler.advance(0.1)

        assert previews == [None]

    def test_error_has_no_preview(self, calculator, scheduler):
        previews = []
        preview = calculator.create_preview(scheduler, previews.append)

        preview.update("1/0")
        scheduler.advance(0.1)

        assert previews == [None]

    def test_locale_display(self, calculator, scheduler):
        previews = []
        preview = calculator.create_preview(scheduler, previews.append, language="fr")

        preview.update("1000 + 234.5")
        scheduler.advance(0.1)

        assert previews == ["1 234,5"]

    def test_cancel(self, calculator, scheduler):
        previews = []
        preview = calculator.create_preview(scheduler, previews.append)

        preview.update("1+1")
        preview.cancel()
        scheduler.advance(1)

        assert previews == []

    def test_callback_error_is_contained(self, calculator, scheduler):
        def broken(display):
            raise RuntimeError("ui gone")

        preview = calculator.create_preview(scheduler, broken)
        preview.update("1+1")
        scheduler.advance(0.1)

        assert preview.evaluations == 1


class TestPeriodicTask:
    """Tests for the re-arming timer."""

    def test_runs_every_interval(self, scheduler):
        ticks = []
        task = PeriodicTask(scheduler, 0.5, lambda: ticks.append(scheduler.time()))

        task.start()
        scheduler.advance(1.6)

        assert len(ticks) == 3
        assert task.running

    def test_stop(self, scheduler):
        ticks = []
        task = PeriodicTask(scheduler, 0.5, lambda: ticks.append(1))

        task.start()
        scheduler.advance(0.5)
        task.stop()
        scheduler.advance(2)

        assert len(ticks) == 1
        assert scheduler.pending == 0

    def test_failing_callback_keeps_running(self, scheduler):
        calls = []

        def flaky():
            calls.append(1)
            raise ValueError("boom")

        task = PeriodicTask(scheduler, 0.5, flaky)
        task.start()
        scheduler.advance(1.0)

        assert len(calls) == 2
