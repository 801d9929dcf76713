"""
Unit Tests for Expression Evaluation

Tests for sanitization, the arithmetic engine and result formatting.
"""

import math
from unittest.mock import MagicMock

import pytest

from services.math.evaluator import (
    MATH_ERROR,
    EvaluationSource,
    ExpressionEvaluator,
    SafeArithmetic,
)
from services.math.formatting import format_display, format_value, group_digits
from utils.exceptions import ErrorKind


@pytest.fixture
def evaluator():
    return ExpressionEvaluator()


# ============================================================================
# Evaluation
# ============================================================================

class TestEvaluate:
    """Tests for successful evaluation."""

    @pytest.mark.parametrize("expression,expected", [
        ("20 + 5", "25"),
        ("(200 * 15 / 100)", "30"),
        ("0.1 + 0.2", "0.3"),
        ("10 / 4", "2.5"),
        ("2 ^ 10", "1024"),
        ("sqrt 16", "4"),
        ("sqrt(2) * sqrt(2)", "2"),
        ("-5 + 2", "-3"),
        ("(2 + 3)4", "20"),
        ("2(3 + 1)", "8"),
        ("007 + 1", "8"),
        ("1 / 3", "0.3333333333"),
    ])
    def test_keypad(self, evaluator, expression, expected):
        assert evaluator.evaluate(expression, EvaluationSource.KEYPAD) == expected

    def test_glyphs(self, evaluator):
        assert evaluator.evaluate("6 × 7") == "42"
        assert evaluator.evaluate("8 ÷ 2") == "4"
        assert evaluator.evaluate("8 − 2") == "6"

    def test_decimal_comma(self, evaluator):
        assert evaluator.evaluate("3,5 + 1") == "4.5"

    def test_percent_sign(self, evaluator):
        assert evaluator.evaluate("50%") == "0.5"
        assert evaluator.evaluate("200 * 15%") == "30"

    def test_bare_number_from_keypad(self, evaluator):
        assert evaluator.evaluate("3", EvaluationSource.KEYPAD) == "3"

    def test_source_as_string(self, evaluator):
        assert evaluator.evaluate("2 + 2", "speech") == "4"

    def test_percent_plus_rewrite(self, evaluator):
        assert evaluator.evaluate("(10 * (1 + 20 / 100))", EvaluationSource.SPEECH) == "12"


class TestEvaluationErrors:
    """Every failure collapses to MATH_ERROR with an error kind."""

    @pytest.mark.parametrize("expression,source,kind", [
        ("", EvaluationSource.KEYPAD, ErrorKind.EMPTY_INPUT),
        ("   ", EvaluationSource.SPEECH, ErrorKind.EMPTY_INPUT),
        ("5 +", EvaluationSource.SPEECH, ErrorKind.INCOMPLETE_EXPRESSION),
        ("5 *", EvaluationSource.KEYPAD, ErrorKind.INCOMPLETE_EXPRESSION),
        ("3", EvaluationSource.SPEECH, ErrorKind.AMBIGUOUS_VOICE_NUMBER),
        ("2.5", EvaluationSource.SPEECH, ErrorKind.AMBIGUOUS_VOICE_NUMBER),
        ("10 / 0", EvaluationSource.KEYPAD, ErrorKind.EVALUATION_FAILURE),
        ("2 ^ 20000", EvaluationSource.KEYPAD, ErrorKind.EVALUATION_FAILURE),
        ("10 ^ 400", EvaluationSource.KEYPAD, ErrorKind.EVALUATION_FAILURE),
        ("sqrt(0 - 4)", EvaluationSource.KEYPAD, ErrorKind.EVALUATION_FAILURE),
        ("(1 + 2", EvaluationSource.KEYPAD, ErrorKind.EVALUATION_FAILURE),
        ("__import__('os')", EvaluationSource.KEYPAD, ErrorKind.INVALID_CHARACTERS),
        ("2 + abc", EvaluationSource.KEYPAD, ErrorKind.INVALID_CHARACTERS),
    ])
    def test_error_kinds(self, evaluator, expression, source, kind):
        outcome = evaluator.evaluate_detailed(expression, source)
        assert outcome.value == MATH_ERROR
        assert not outcome.ok
        assert outcome.error_kind == kind
        assert outcome.display is None

    def test_none_expression(self, evaluator):
        assert evaluator.evaluate(None) == MATH_ERROR

    def test_overlong_expression(self, evaluator):
        outcome = evaluator.evaluate_detailed(" + ".join(["1"] * 1500))
        assert outcome.error_kind == ErrorKind.INVALID_CHARACTERS

    def test_disallowed_input_never_reaches_engine(self):
        engine = MagicMock()
        evaluator = ExpressionEvaluator(engine=engine)

        for expression in ("__import__('os').system('ls')", "2 ** 2; exit()", "[1, 2]", "x + 1"):
            assert evaluator.evaluate(expression) == MATH_ERROR

        engine.evaluate.assert_not_called()

    def test_engine_exception_is_contained(self):
        engine = MagicMock()
        engine.evaluate.side_effect = RuntimeError("engine exploded")
        evaluator = ExpressionEvaluator(engine=engine)

        outcome = evaluator.evaluate_detailed("1 + 1")
        assert outcome.value == MATH_ERROR
        assert outcome.error_kind == ErrorKind.EVALUATION_FAILURE

    def test_non_finite_result(self):
        engine = MagicMock()
        engine.evaluate.return_value = math.inf
        evaluator = ExpressionEvaluator(engine=engine)

        assert evaluator.evaluate_detailed("1 + 1").error_kind == ErrorKind.EVALUATION_FAILURE

    def test_complex_result(self):
        engine = MagicMock()
        engine.evaluate.return_value = complex(0, 1)
        evaluator = ExpressionEvaluator(engine=engine)

        assert evaluator.evaluate("1 + 1") == MATH_ERROR


class TestSafeArithmetic:
    """Tests for the restricted engine itself."""

    def test_rejects_names(self):
        with pytest.raises(ValueError):
            SafeArithmetic().evaluate("pi")

    def test_rejects_other_calls(self):
        with pytest.raises(ValueError):
            SafeArithmetic().evaluate("abs(1)")

    def test_sqrt_arity(self):
        with pytest.raises(ValueError):
            SafeArithmetic().evaluate("sqrt(1, 2)")

    def test_prepare(self):
        assert SafeArithmetic.prepare("2^3") == "2**3"
        assert SafeArithmetic.prepare("sqrt 9") == "sqrt(9)"
        assert SafeArithmetic.prepare("2sqrt 9") == "2*sqrt(9)"


# ============================================================================
# Formatting
# ============================================================================

class TestFormatting:
    """Tests for raw and display renderings."""

    @pytest.mark.parametrize("value,expected", [
        (25, "25"),
        (25.0, "25"),
        (2.5, "2.5"),
        (-0.0, "0"),
        (0.30000000000000004, "0.3"),
        (1 / 3, "0.3333333333"),
        (1e-12, "0"),
        (True, "1"),
    ])
    def test_format_value(self, value, expected):
        assert format_value(value) == expected

    def test_format_value_rejects_non_finite(self):
        with pytest.raises(ValueError):
            format_value(math.nan)

    @pytest.mark.parametrize("language,expected", [
        ("en", "1,234.5"),
        ("de", "1.234,5"),
        ("fr", "1 234,5"),
        ("es", "1234,5"),
        ("it", "1.234,5"),
        ("pt-BR", "1.234,5"),
    ])
    def test_format_display(self, language, expected):
        assert format_display("1234.5", language) == expected

    def test_spanish_groups_five_digits(self):
        assert format_display("12345", "es") == "12.345"

    def test_negative_display(self):
        assert format_display("-1234567", "en") == "-1,234,567"

    def test_non_numeric_passes_through(self):
        assert format_display(MATH_ERROR, "de") == MATH_ERROR

    def test_group_digits(self):
        assert group_digits("1234567", ",") == "1,234,567"
        assert group_digits("123", ",") == "123"

    def test_detailed_outcome_has_display(self, evaluator):
        outcome = evaluator.evaluate_detailed("1000 + 234.5", EvaluationSource.KEYPAD, "de")
        assert outcome.ok
        assert outcome.value == "1234.5"
        assert outcome.display == "1.234,5"
