"""
Expression Evaluator

Sanitizes a canonical expression and evaluates it with a restricted
arithmetic engine. This is the security boundary between user speech and
code execution: nothing outside the allow-list ever reaches the engine.

Every failure is collapsed to MATH_ERROR; no exception leaves evaluate().

Usage:
    evaluator = ExpressionEvaluator()
    evaluator.evaluate("20 + 5", EvaluationSource.SPEECH, "en")   # "25"
    evaluator.evaluate("3", EvaluationSource.SPEECH, "en")        # "MATH_ERROR"
"""

import ast
import math
import operator
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from config.constants import MAX_EXPONENT, MAX_EXPRESSION_LENGTH
from services.math.formatting import Number, format_display, format_value
from utils.exceptions import (
    AmbiguousVoiceNumberError,
    CalculationError,
    EmptyInputError,
    ErrorKind,
    EvaluationFailureError,
    IncompleteExpressionError,
    InvalidCharactersError,
)
from utils.logging import get_logger

logger = get_logger(__name__)


MATH_ERROR = "MATH_ERROR"


class EvaluationSource(str, Enum):
    """Where an expression came from."""
    SPEECH = "speech"
    KEYPAD = "keypad"


# =============================================================================
# Sanitization Patterns
# =============================================================================

GLYPHS = str.maketrans({"×": "*", "÷": "/", "−": "-"})
DECIMAL_COMMA = re.compile(r"(\d+),(\d+)")
BARE_NUMBER = re.compile(r"^\d+(?:\.\d+)?$")
TRAILING_OPERATOR = re.compile(r"[+\-*/^]\s*$")
LEADING_OPERATOR = re.compile(r"^\s*[+\-*/^]")
PERCENT_NUMBER = re.compile(r"(\d+(?:\.\d+)?)%")
ALLOWED = re.compile(r"^[0-9+\-*/.()^\s]*$")

SQRT_ARGUMENT = re.compile(r"sqrt\s*(\d+(?:\.\d+)?)")
IMPLICIT_BEFORE = re.compile(r"(\d|\))\s*(\(|sqrt)")
IMPLICIT_AFTER = re.compile(r"\)\s*(\d)")
LEADING_ZEROS = re.compile(r"(?<![\d.])0+(?=\d)")


# =============================================================================
# Arithmetic Engine
# =============================================================================

_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPS = {
    ast.USub: operator.neg,
    ast.UAdd: operator.pos,
}


class SafeArithmetic(ast.NodeVisitor):
    """
    Evaluates numbers, + - * / ^, unary signs and sqrt(x).

    Anything else in the tree is rejected with ValueError.
    """

    def evaluate(self, expression: str) -> Number:
        tree = ast.parse(self.prepare(expression), mode="eval")
        return self.visit(tree)

    @staticmethod
    def prepare(expression: str) -> str:
        """Rewrite calculator notation into Python expression syntax."""
        text = expression.replace("^", "**")
        text = SQRT_ARGUMENT.sub(r"sqrt(\1)", text)
        text = IMPLICIT_BEFORE.sub(r"\1*\2", text)
        text = IMPLICIT_AFTER.sub(r")*\1", text)
        return LEADING_ZEROS.sub("", text)

    def visit(self, node):
        if isinstance(node, ast.Expression):
            return self.visit(node.body)
        if isinstance(node, ast.Constant) and type(node.value) in (int, float):
            return node.value
        if isinstance(node, ast.BinOp):
            left, right = self.visit(node.left), self.visit(node.right)
            if isinstance(node.op, ast.Pow):
                return self._power(left, right)
            if type(node.op) not in _BINARY_OPS:
                raise ValueError(f"Operator {type(node.op).__name__} is not allowed")
            return _BINARY_OPS[type(node.op)](left, right)
        if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
            return _UNARY_OPS[type(node.op)](self.visit(node.operand))
        if isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name) or node.func.id != "sqrt":
                raise ValueError("Only sqrt() may be called")
            if len(node.args) != 1 or node.keywords:
                raise ValueError("sqrt() takes exactly one argument")
            return math.sqrt(self.visit(node.args[0]))
        raise ValueError(f"Unsupported syntax: {type(node).__name__}")

    @staticmethod
    def _power(base: Number, exponent: Number) -> Number:
        if abs(exponent) > MAX_EXPONENT:
            raise ValueError(f"Exponent {exponent} exceeds {MAX_EXPONENT}")
        return float(base) ** float(exponent)


# =============================================================================
# Evaluator
# =============================================================================

@dataclass(frozen=True)
class EvaluationOutcome:
    """Detailed result of one evaluation."""
    value: str
    display: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None


class ExpressionEvaluator:
    """
    Sanitize-then-evaluate front for the arithmetic engine.

    Args:
        engine: Object with ``evaluate(expression) -> number``;
            defaults to SafeArithmetic
    """

    def __init__(self, engine=None):
        self.engine = engine or SafeArithmetic()

    def evaluate(
        self,
        expression: str,
        source: Union[EvaluationSource, str] = EvaluationSource.KEYPAD,
        language: Optional[str] = None,
    ) -> str:
        """Evaluate to a raw value string, or MATH_ERROR."""
        return self.evaluate_detailed(expression, source, language).value

    def evaluate_detailed(
        self,
        expression: str,
        source: Union[EvaluationSource, str] = EvaluationSource.KEYPAD,
        language: Optional[str] = None,
    ) -> EvaluationOutcome:
        """
        Evaluate and report the error kind on failure.

        Args:
            expression: Canonical arithmetic expression
            source: Input source; speech input rejects bare numbers
            language: Language code used for the display string

        Returns:
            EvaluationOutcome; ``value`` is MATH_ERROR when ``ok`` is False
        """
        try:
            number = self._evaluate(expression, EvaluationSource(source))
            value = format_value(number)
        except CalculationError as e:
            logger.debug(f"Rejected '{expression}': {e.kind.value}")
            return EvaluationOutcome(value=MATH_ERROR, error_kind=e.kind, detail=e.message)
        except Exception as e:
            logger.warning(f"Evaluation failed for '{expression}': {e}")
            return EvaluationOutcome(
                value=MATH_ERROR,
                error_kind=ErrorKind.EVALUATION_FAILURE,
                detail=str(e) or EvaluationFailureError.default_message,
            )

        return EvaluationOutcome(value=value, display=format_display(value, language))

    def _evaluate(self, expression: Optional[str], source: EvaluationSource) -> Number:
        if expression is None or not expression.strip():
            raise EmptyInputError(expression=expression)

        text = expression.strip().translate(GLYPHS)
        text = DECIMAL_COMMA.sub(r"\1.\2", text)

        if source is EvaluationSource.SPEECH and BARE_NUMBER.match(text):
            raise AmbiguousVoiceNumberError(expression=text)

        if TRAILING_OPERATOR.search(text) and not LEADING_OPERATOR.match(text):
            raise IncompleteExpressionError(expression=text)

        text = PERCENT_NUMBER.sub(r"(\1 / 100)", text)
        text = text.replace("%", "/100")

        if len(text) > MAX_EXPRESSION_LENGTH or not ALLOWED.match(text.replace("sqrt", "")):
            raise InvalidCharactersError(expression=text)

        try:
            result = self.engine.evaluate(text)
        except (SyntaxError, ValueError, TypeError, ArithmeticError) as e:
            raise EvaluationFailureError(str(e) or None, expression=text) from e

        if isinstance(result, complex) or not isinstance(result, (int, float)):
            raise EvaluationFailureError("Result is not a real number", expression=text)
        if isinstance(result, float) and not math.isfinite(result):
            raise EvaluationFailureError("Result is not finite", expression=text)
        return result
