"""
Math Package

Spoken-arithmetic normalization and safe expression evaluation.
"""

from services.math.languages import (
    DEFAULT_LANGUAGE,
    LANGUAGE_PATTERNS,
    SUPPORTED_LANGUAGES,
    LanguagePatterns,
    lookup,
    resolve_language,
)
from services.math.compiler import CompiledLanguageRegex, PatternCompiler
from services.math.base_normalizer import BaseNormalizer, NormalizationResult
from services.math.normalizer import SpokenMathNormalizer
from services.math.evaluator import (
    MATH_ERROR,
    EvaluationOutcome,
    EvaluationSource,
    ExpressionEvaluator,
    SafeArithmetic,
)
from services.math.formatting import format_display, format_value

__all__ = [
    'DEFAULT_LANGUAGE',
    'LANGUAGE_PATTERNS',
    'SUPPORTED_LANGUAGES',
    'LanguagePatterns',
    'lookup',
    'resolve_language',
    'CompiledLanguageRegex',
    'PatternCompiler',
    'BaseNormalizer',
    'NormalizationResult',
    'SpokenMathNormalizer',
    'MATH_ERROR',
    'EvaluationOutcome',
    'EvaluationSource',
    'ExpressionEvaluator',
    'SafeArithmetic',
    'format_display',
    'format_value',
]
