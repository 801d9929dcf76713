"""
Pattern Compiler

Compiles a LanguagePatterns lexicon into an immutable set of regular
expressions. Compiled sets are memoized per resolved language code, so a
transcript never pays for compilation.

Usage:
    from services.math.compiler import PatternCompiler

    compiler = PatternCompiler()
    compiled = compiler.compile("es")
    compiled.addition.sub(" + ", "cinco más tres")
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Pattern, Sequence, Tuple

from services.math.languages import (
    DEFAULT_LANGUAGE,
    LANGUAGE_PATTERNS,
    LanguagePatterns,
    resolve_language,
)
from utils.logging import get_logger

logger = get_logger(__name__)


# Connector words shared by every language in the percentage phrases
OF_WORDS = r"(?:of|de|di|von|da)"
TO_WORDS = r"(?:to|à|a|zu)"
FROM_WORDS = r"(?:from|de|von|da)"
ADD_WORDS = r"(?:add|ajouter|ajoute|adicionar|adicione|hinzufügen|addiere|aggiungere|aggiungi|sumar|suma|añadir|añade)"
SUBTRACT_WORDS = r"(?:subtract|soustraire|soustrais|subtrair|subtraia|abziehen|subtrahiere|sottrarre|sottrai|restar|resta)"

# Operand of a percentage phrase; the comma form is a spoken decimal comma
PCT_NUM = r"(\d+(?:[.,]\d+)?)"

# Operator lists in the order the generic pass applies them
OPERATOR_FIELDS = (
    "addition",
    "subtraction",
    "multiplication",
    "division",
    "percent_of",
    "percentage",
    "power",
    "sqrt",
    "open_paren",
    "close_paren",
    "decimal",
)


@dataclass(frozen=True)
class CompiledLanguageRegex:
    """Every matcher the normalizer needs for one language."""

    language: str
    numbers: Mapping[str, str]
    number_words: Optional[Pattern]
    large_numbers: Optional[Pattern]
    magnitudes: Mapping[str, int]
    fraction_words: Mapping[str, int]

    # Step 6
    percent_of_value: Pattern
    percent_add_to: Pattern
    percent_subtract_from: Pattern
    percent_plus: Pattern
    percent_minus: Pattern

    # Step 7
    add_to: Optional[Pattern]
    subtract_from: Optional[Pattern]
    multiply_by: Optional[Pattern]
    divide_by: Optional[Pattern]

    # Step 8
    addition: Optional[Pattern]
    subtraction: Optional[Pattern]
    multiplication: Optional[Pattern]
    division: Optional[Pattern]
    percent_of: Optional[Pattern]
    percentage: Optional[Pattern]
    power: Optional[Pattern]
    sqrt: Optional[Pattern]
    open_paren: Optional[Pattern]
    close_paren: Optional[Pattern]
    decimal: Optional[Pattern]

    # Step 9 and follow-up phrases
    filler_words: Optional[Pattern]
    percent_of_that: Optional[Pattern]


class CacheInfo(NamedTuple):
    hits: int
    misses: int
    size: int


# =============================================================================
# Building Blocks
# =============================================================================

def _phrase_source(phrase: str) -> str:
    """Escape a phrase, letting any run of whitespace separate its words."""
    return r"\s+".join(re.escape(word) for word in phrase.split())


def _ordered(phrases: Iterable[str]) -> List[str]:
    """Unique, non-empty phrases sorted longest first."""
    unique = {" ".join(p.lower().split()) for p in phrases if p and p.strip()}
    return sorted(unique, key=lambda p: (-len(p), p))


def _alternation(phrases: Iterable[str]) -> Optional[str]:
    ordered = _ordered(phrases)
    if not ordered:
        return None
    return "|".join(_phrase_source(p) for p in ordered)


def compile_phrases(
    phrases: Iterable[str],
    shadows: Sequence[str] = (),
) -> Optional[Pattern]:
    """
    Compile a phrase list into one boundary-anchored alternation.

    Args:
        phrases: Surface phrases of one list
        shadows: Longer phrases from other lists that must not be split

    Returns:
        Compiled pattern, or None for an empty list
    """
    ordered = _ordered(phrases)
    if not ordered:
        return None

    alternatives = []
    for phrase in ordered:
        guards = _shadow_guards(phrase, shadows)
        alternatives.append(f"{guards[0]}{_phrase_source(phrase)}{guards[1]}")

    return re.compile(r"(?<!\w)(" + "|".join(alternatives) + r")(?!\w)", re.IGNORECASE)


def _shadow_guards(phrase: str, shadows: Sequence[str]) -> Tuple[str, str]:
    """
    Look-behind / look-ahead guards that keep ``phrase`` from matching
    inside a longer phrase of another list.

    "por" must not eat the head of "por ciento" nor the tail of
    "dividido por".
    """
    behind, ahead = [], []
    for shadow in shadows:
        if shadow == phrase:
            continue
        if shadow.startswith(phrase + " "):
            rest = shadow[len(phrase) + 1:]
            ahead.append(rf"(?!\s+{_phrase_source(rest)}(?!\w))")
        if shadow.endswith(" " + phrase):
            head = shadow[: -(len(phrase) + 1)]
            # look-behind must be fixed width
            behind.append(f"(?<!{re.escape(head + ' ')})")
    return "".join(behind), "".join(ahead)


def _compile_template(template: Optional[str]) -> Optional[Pattern]:
    if not template:
        return None
    return re.compile(template, re.IGNORECASE)


# =============================================================================
# Compilation
# =============================================================================

def compile_language(patterns: LanguagePatterns) -> CompiledLanguageRegex:
    """Compile one lexicon. Pure; callers memoize."""
    ops = patterns.operations
    lists: Dict[str, Tuple[str, ...]] = {
        "addition": ops.addition,
        "subtraction": ops.subtraction,
        "multiplication": ops.multiplication,
        "division": ops.division,
        "percent_of": ops.percent_of,
        "percentage": ops.percentage,
        "power": ops.power,
        "sqrt": ops.sqrt,
        "open_paren": ops.parentheses.open,
        "close_paren": ops.parentheses.close,
        "decimal": ops.decimal,
    }

    operators = {}
    for name in OPERATOR_FIELDS:
        shadows = _ordered(
            phrase
            for other, phrases in lists.items() if other != name
            for phrase in phrases
        )
        operators[name] = compile_phrases(lists[name], shadows)

    percent_marker = _alternation(ops.percentage)
    marker = rf"(?:\s*%|\s+(?:{percent_marker})(?!\w))" if percent_marker else r"\s*%"
    plus = _alternation(ops.addition)
    minus = _alternation(ops.subtraction)
    plus_connector = rf"(?:\+|(?<!\w)(?:{plus})(?!\w))" if plus else r"\+"
    minus_connector = rf"(?:-|(?<!\w)(?:{minus})(?!\w))" if minus else r"-"

    # "ciento" in "por ciento" is a percent sign, not a hundred
    number_words = compile_phrases(
        patterns.numbers.keys(),
        _ordered(phrase for phrases in lists.values() for phrase in phrases),
    )
    large_numbers = None
    magnitude_words = _alternation(patterns.large_numbers.keys())
    if magnitude_words:
        large_numbers = re.compile(
            rf"(\d+(?:[.,]\d+)?)\s+({magnitude_words})(?!\w)",
            re.IGNORECASE,
        )

    that_phrases = _alternation(patterns.percent_of_that)
    percent_of_that = None
    if that_phrases:
        percent_of_that = re.compile(
            rf"(\d+(?:[.,]\d+)?){marker}\s+(?:{that_phrases})(?!\w)",
            re.IGNORECASE,
        )

    specific = patterns.specific_phrases
    return CompiledLanguageRegex(
        language=patterns.code,
        numbers=patterns.numbers,
        number_words=number_words,
        large_numbers=large_numbers,
        magnitudes={" ".join(k.split()): v for k, v in patterns.large_numbers.items()},
        fraction_words=patterns.fraction_words,
        percent_of_value=re.compile(
            rf"{PCT_NUM}{marker}\s+{OF_WORDS}\s+{PCT_NUM}(?:\s*%)?", re.IGNORECASE
        ),
        percent_add_to=re.compile(
            rf"(?<!\w){ADD_WORDS}\s+{PCT_NUM}{marker}\s+{TO_WORDS}\s+{PCT_NUM}",
            re.IGNORECASE,
        ),
        percent_subtract_from=re.compile(
            rf"(?<!\w){SUBTRACT_WORDS}\s+{PCT_NUM}{marker}\s+{FROM_WORDS}\s+{PCT_NUM}",
            re.IGNORECASE,
        ),
        percent_plus=re.compile(
            rf"{PCT_NUM}\s*{plus_connector}\s*{PCT_NUM}{marker}", re.IGNORECASE
        ),
        percent_minus=re.compile(
            rf"{PCT_NUM}\s*{minus_connector}\s*{PCT_NUM}{marker}", re.IGNORECASE
        ),
        add_to=_compile_template(specific.add_to),
        subtract_from=_compile_template(specific.subtract_from),
        multiply_by=_compile_template(specific.multiply_by),
        divide_by=_compile_template(specific.divide_by),
        filler_words=compile_phrases(patterns.filler_words),
        percent_of_that=percent_of_that,
        **operators,
    )


class PatternCompiler:
    """
    Memoizing front for compile_language().

    The cache is keyed by the resolved code, so "es", "ES" and "es-MX" share
    one entry and its size is bounded by the number of supported languages.
    """

    def __init__(self, default_language: str = DEFAULT_LANGUAGE):
        self.default_language = default_language
        self._cache: Dict[str, CompiledLanguageRegex] = {}
        self._hits = 0
        self._misses = 0

    def compile(self, language_code: Optional[str]) -> CompiledLanguageRegex:
        code = resolve_language(language_code, self.default_language)

        cached = self._cache.get(code)
        if cached is not None:
            self._hits += 1
            return cached

        self._misses += 1
        compiled = compile_language(LANGUAGE_PATTERNS[code])
        self._cache[code] = compiled
        logger.debug(f"Compiled pattern set for '{code}'")
        return compiled

    def cache_info(self) -> CacheInfo:
        return CacheInfo(hits=self._hits, misses=self._misses, size=len(self._cache))

    def clear(self) -> None:
        self._cache.clear()
        self._hits = 0
        self._misses = 0
