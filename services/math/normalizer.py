"""
Spoken Math Normalizer

Rewrites a spoken transcript into a canonical arithmetic expression using
a language's compiled matcher set.

Handles:
- Number words: "twenty five" → "25", "veintiuno" → "21"
- Grouped digits: "1,000,000" → "1000000", "1 000" → "1000"
- Magnitudes: "2.5 million" → "2500000"
- Fractions: "two thirds of 90" → "((2/3) * 90)"
- Percentages: "15% of 200" → "(200 * 15 / 100)"
- Phrases: "sumar 10 a 20" → "10 + 20"
- Operator words: "five times three" → "5 * 3"

Usage:
    compiled = PatternCompiler().compile("en")
    SpokenMathNormalizer().normalize("twenty plus five", compiled)  # "20 + 5"
"""

import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence, Tuple

from config.settings import settings
from services.math.base_normalizer import BaseNormalizer, RewritePass
from services.math.compiler import OF_WORDS, CompiledLanguageRegex


# =============================================================================
# Fixed Patterns
# =============================================================================

HYPHENATED_WORD = re.compile(r"(?<=[^\W\d_])-(?=[^\W\d_])")
SPECIAL_SPACES = re.compile(r"[\u00a0\u202f\u2007\u2009\t]")
DIGIT_GROUPS = re.compile(r"(?<![\d.,])(\d{1,3})((?:[, ]\d{3})+)(?![\d])(?!,\d)")

NUMERIC_FRACTION = re.compile(
    rf"(\d+)\s*/\s*(\d+)\s+{OF_WORDS}\s+(\d+(?:[.,]\d+)?)", re.IGNORECASE
)
WORD_FRACTION = re.compile(
    rf"(\d+)\s+([^\W\d_]{{2,20}})\s+{OF_WORDS}\s+(\d+(?:[.,]\d+)?)", re.IGNORECASE
)

QUOTES = re.compile(r"[\"'`´‘’“”«»]+")
LETTERS = re.compile(r"[^\W\d_]+")
SENTENCE_PUNCTUATION = re.compile(r"[?!¿¡;:]+")
SPLIT_DECIMAL = re.compile(r"(\d)\s*\.\s*(\d)")
DOUBLED_PLUS = re.compile(r"\+\s*\+")
WHITESPACE = re.compile(r"\s+")
CANONICAL = re.compile(r"^[0-9+\-*/.,()^%\s]*$")

SQRT_TOKEN = "sqrt"
# Placeholder must survive the letter strip
SQRT_PLACEHOLDER = "\x00"


def clean_number(value: str) -> str:
    """Strip spaces from a captured operand and turn a decimal comma into a dot."""
    return value.replace(" ", "").replace(",", ".")


class SpokenMathNormalizer(BaseNormalizer):
    """
    Nine-pass rewrite from speech to canonical arithmetic.

    Stateless; one instance may serve every language and session.
    """

    def __init__(self, max_length: Optional[int] = None):
        self.max_length = max_length if max_length is not None else settings.MAX_TRANSCRIPT_LENGTH

    def passes(self) -> Sequence[Tuple[str, RewritePass]]:
        return (
            ("De-hyphenate", self.dehyphenate),
            ("Digit groups", self.collapse_digit_groups),
            ("Large numbers", self.expand_large_numbers),
            ("Number words", self.substitute_number_words),
            ("Fractions", self.rewrite_fractions),
            ("Percentages", self.rewrite_percentages),
            ("Phrases", self.rewrite_phrases),
            ("Operators", self.replace_operator_words),
            ("Cleanup", self.cleanup),
        )

    def validate(self, text: str) -> Tuple[bool, List[str]]:
        errors = []
        if not text:
            errors.append("Nothing left after normalization")
        elif not CANONICAL.match(text.replace(SQRT_TOKEN, "")):
            errors.append(f"Unexpected characters in '{text}'")
        return not errors, errors

    # =========================================================================
    # Passes
    # =========================================================================

    def dehyphenate(self, text: str, compiled: CompiledLanguageRegex) -> str:
        """Step 1: "twenty-five" → "twentyfive"; "5-3" stays."""
        return HYPHENATED_WORD.sub("", text)

    def collapse_digit_groups(self, text: str, compiled: CompiledLanguageRegex) -> str:
        """Step 2: "1,000,000" → "1000000", "1 000" → "1000"."""
        text = SPECIAL_SPACES.sub(" ", text)
        return DIGIT_GROUPS.sub(lambda m: m.group(1) + re.sub(r"[, ]", "", m.group(2)), text)

    def expand_large_numbers(self, text: str, compiled: CompiledLanguageRegex) -> str:
        """Step 3: "2.5 million" → "2500000"."""
        if compiled.large_numbers is None:
            return text

        def expand(match: re.Match) -> str:
            word = " ".join(match.group(2).lower().split())
            magnitude = compiled.magnitudes.get(word)
            if magnitude is None:
                return match.group(0)
            try:
                value = Decimal(clean_number(match.group(1))) * magnitude
            except InvalidOperation:
                return match.group(0)
            return format(value.normalize(), "f")

        return compiled.large_numbers.sub(expand, text)

    def substitute_number_words(self, text: str, compiled: CompiledLanguageRegex) -> str:
        """Step 4: spelled numbers to digits, longest phrase first."""
        if compiled.number_words is None:
            return text
        return compiled.number_words.sub(
            lambda m: compiled.numbers.get(" ".join(m.group(0).lower().split()), m.group(0)),
            text,
        )

    def rewrite_fractions(self, text: str, compiled: CompiledLanguageRegex) -> str:
        """Step 5: "2/3 of 90" and "2 thirds of 90" → "((2/3) * 90)"."""
        text = NUMERIC_FRACTION.sub(
            lambda m: f"(({m.group(1)}/{m.group(2)}) * {clean_number(m.group(3))})", text
        )

        def by_word(match: re.Match) -> str:
            denominator = compiled.fraction_words.get(match.group(2).lower())
            if denominator is None:
                return match.group(0)
            return f"(({match.group(1)}/{denominator}) * {clean_number(match.group(3))})"

        return WORD_FRACTION.sub(by_word, text)

    def rewrite_percentages(self, text: str, compiled: CompiledLanguageRegex) -> str:
        """
        Step 6: percentage phrases.

        The verb forms run first so "subtract 10% from 50" is not read as
        "10% of 50" in languages whose "from" and "of" share a word.
        """
        text = compiled.percent_add_to.sub(
            lambda m: f"({clean_number(m.group(2))} * (1 + {clean_number(m.group(1))} / 100))",
            text,
        )
        text = compiled.percent_subtract_from.sub(
            lambda m: f"({clean_number(m.group(2))} * (1 - {clean_number(m.group(1))} / 100))",
            text,
        )
        text = compiled.percent_of_value.sub(
            lambda m: f"({clean_number(m.group(2))} * {clean_number(m.group(1))} / 100)",
            text,
        )
        text = compiled.percent_plus.sub(
            lambda m: f"({clean_number(m.group(1))} * (1 + {clean_number(m.group(2))} / 100))",
            text,
        )
        return compiled.percent_minus.sub(
            lambda m: f"({clean_number(m.group(1))} * (1 - {clean_number(m.group(2))} / 100))",
            text,
        )

    def rewrite_phrases(self, text: str, compiled: CompiledLanguageRegex) -> str:
        """Step 7: whole-phrase templates such as "add 5 to 3"."""
        if compiled.add_to is not None:
            text = compiled.add_to.sub(r"\1 + \2", text)
        if compiled.subtract_from is not None:
            text = compiled.subtract_from.sub(r"\2 - \1", text)
        if compiled.multiply_by is not None:
            text = compiled.multiply_by.sub(r"\2 * \3", text)
        if compiled.divide_by is not None:
            text = compiled.divide_by.sub(r"\2 / \3", text)
        return text

    def replace_operator_words(self, text: str, compiled: CompiledLanguageRegex) -> str:
        """Step 8: generic operator words, in fixed order."""
        replacements = (
            (compiled.addition, " + "),
            (compiled.subtraction, " - "),
            (compiled.multiplication, " * "),
            (compiled.division, " / "),
        )
        for pattern, symbol in replacements:
            if pattern is not None:
                text = pattern.sub(symbol, text)

        if compiled.percent_of is not None and "%" not in text:
            text = compiled.percent_of.sub(" * 0.01 * ", text)

        replacements = (
            (compiled.percentage, " % "),
            (compiled.power, " ^ "),
            (compiled.sqrt, f" {SQRT_TOKEN} "),
            (compiled.open_paren, " ( "),
            (compiled.close_paren, " ) "),
            (compiled.decimal, " . "),
        )
        for pattern, symbol in replacements:
            if pattern is not None:
                text = pattern.sub(symbol, text)
        return text

    def cleanup(self, text: str, compiled: CompiledLanguageRegex) -> str:
        """Step 9: drop everything that is not arithmetic."""
        text = re.sub(rf"(?<![^\W\d_]){SQRT_TOKEN}(?![^\W\d_])", SQRT_PLACEHOLDER, text)
        if compiled.filler_words is not None:
            text = compiled.filler_words.sub(" ", text)
        text = QUOTES.sub(" ", text)
        text = LETTERS.sub(" ", text)
        text = SENTENCE_PUNCTUATION.sub(" ", text)
        text = text.replace(SQRT_PLACEHOLDER, f" {SQRT_TOKEN} ")
        text = SPLIT_DECIMAL.sub(r"\1.\2", text)
        text = DOUBLED_PLUS.sub("+", text)
        return WHITESPACE.sub(" ", text).strip()

    # =========================================================================
    # Follow-up Phrases
    # =========================================================================

    def match_percent_of_that(self, text: str, compiled: CompiledLanguageRegex) -> Optional[str]:
        """
        Find "N percent of that" in a transcript.

        Returns:
            The percentage N as a plain number string, or None
        """
        if compiled.percent_of_that is None or not text:
            return None
        prepared = self.clean_input(text)
        for rewrite in (self.dehyphenate, self.collapse_digit_groups, self.substitute_number_words):
            prepared = rewrite(prepared, compiled)
        match = compiled.percent_of_that.search(prepared)
        return clean_number(match.group(1)) if match else None
