"""
Unit Tests for the Spoken Math Normalizer

Run: pytest tests/test_normalizer.py -v
"""

import pytest

from services.math.compiler import PatternCompiler
from services.math.normalizer import SpokenMathNormalizer, clean_number


@pytest.fixture(scope="module")
def compiler():
    return PatternCompiler()


@pytest.fixture(scope="module")
def normalizer():
    return SpokenMathNormalizer()


def normalize(normalizer, compiler, text, language="en"):
    return normalizer.normalize(text, compiler.compile(language))


# ============================================================================
# Number Words and Operators
# ============================================================================

class TestOperatorWords:
    """Tests for number words and generic operator words."""

    @pytest.mark.parametrize("language,text,expected", [
        ("en", "twenty plus five", "20 + 5"),
        ("en", "twenty-five minus three", "25 - 3"),
        ("en", "five times three", "5 * 3"),
        ("en", "ten divided by two", "10 / 2"),
        ("es", "cinco por tres", "5 * 3"),
        ("es", "diez dividido por dos", "10 / 2"),
        ("fr", "deux fois trois", "2 * 3"),
        ("de", "fünf mal drei", "5 * 3"),
        ("de", "einundzwanzig plus eins", "21 + 1"),
        ("pt", "três vezes quatro", "3 * 4"),
        ("it", "dieci diviso per due", "10 / 2"),
        ("it", "sei per sette", "6 * 7"),
    ])
    def test_languages(self, normalizer, compiler, language, text, expected):
        assert normalize(normalizer, compiler, text, language) == expected

    def test_filler_words_dropped(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "What is five plus three?") == "5 + 3"

    def test_power_and_parentheses(self, normalizer, compiler):
        result = normalize(normalizer, compiler, "open parenthesis two plus three close parenthesis to the power of two")
        assert result == "( 2 + 3 ) ^ 2"

    def test_square_root(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "square root of 16") == "sqrt 16"

    def test_spoken_decimal_point(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "three point five times two") == "3.5 * 2"


# ============================================================================
# Numbers
# ============================================================================

class TestNumbers:
    """Tests for grouped digits, magnitudes and fractions."""

    def test_grouped_digits(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "1,000,000 plus 1") == "1000000 + 1"

    def test_space_grouped_digits(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "1 000 plus 5", "fr") == "1000 + 5"

    def test_non_breaking_space_groups(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "12\u00a0345 moins 5", "fr") == "12345 - 5"

    def test_magnitude(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "2.5 million plus 1") == "2500000 + 1"

    def test_word_fraction(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "two thirds of ninety") == "((2/3) * 90)"

    def test_numeric_fraction(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "3/4 of 200") == "((3/4) * 200)"

    def test_unknown_fraction_word_left_alone(self, normalizer, compiler):
        result = normalize(normalizer, compiler, "2 apples of 90")
        assert "/" not in result


# ============================================================================
# Percentages and Phrases
# ============================================================================

class TestPercentages:
    """Tests for percentage phrases."""

    def test_percent_of_value(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "15% of 200") == "(200 * 15 / 100)"

    def test_spoken_percent_of_value(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "fifty percent of eighty") == "(80 * 50 / 100)"

    def test_spanish_percent_of_value(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "cinco por ciento de 200", "es") == "(200 * 5 / 100)"

    def test_plus_percent(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "10 plus 20%") == "(10 * (1 + 20 / 100))"

    def test_minus_percent(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "80 - 25%") == "(80 * (1 - 25 / 100))"

    def test_add_percent_to(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "add 10% to 50") == "(50 * (1 + 10 / 100))"

    def test_french_subtract_percent_from(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "soustraire 10% de 50", "fr") == "(50 * (1 - 10 / 100))"


class TestPhrases:
    """Tests for whole-phrase templates."""

    @pytest.mark.parametrize("language,text,expected", [
        ("en", "add 5 to 3", "5 + 3"),
        ("en", "subtract 5 from 20", "20 - 5"),
        ("en", "multiply 6 by 7", "6 * 7"),
        ("en", "divide 20 by 4", "20 / 4"),
        ("es", "sumar 10 a 20", "10 + 20"),
        ("de", "multipliziere 6 mit 7", "6 * 7"),
    ])
    def test_templates(self, normalizer, compiler, language, text, expected):
        assert normalize(normalizer, compiler, text, language) == expected


# ============================================================================
# Pipeline Behavior
# ============================================================================

class TestPipeline:
    """Tests for the pass pipeline as a whole."""

    @pytest.mark.parametrize("expression", [
        "20 + 5",
        "(200 * 15 / 100)",
        "3.5 * 2",
        "( 2 + 3 ) ^ 2",
        "sqrt 16",
    ])
    def test_canonical_input_is_a_fixed_point(self, normalizer, compiler, expression):
        once = normalize(normalizer, compiler, expression)
        assert once == expression
        assert normalize(normalizer, compiler, once) == once

    def test_empty_input(self, normalizer, compiler):
        assert normalize(normalizer, compiler, "") == ""
        assert normalize(normalizer, compiler, "   ") == ""

    def test_truncates_long_input(self, compiler):
        short = SpokenMathNormalizer(max_length=5)
        assert short.normalize("12345678", compiler.compile("en")) == "12345"

    def test_process_traces_changed_passes(self, normalizer, compiler):
        result = normalizer.process("Twenty plus five", compiler.compile("en"))
        assert result.value == "20 + 5"
        assert result.is_valid
        assert any(step.startswith("Number words") for step in result.steps)
        assert not any(step.startswith("Fractions") for step in result.steps)

    def test_process_flags_empty_result(self, normalizer, compiler):
        result = normalizer.process("hello there", compiler.compile("en"))
        assert result.value == ""
        assert not result.is_valid
        assert result.errors


class TestPercentOfThat:
    """Tests for the follow-up percentage phrase."""

    def test_spoken(self, normalizer, compiler):
        assert normalizer.match_percent_of_that("ten percent of that", compiler.compile("en")) == "10"

    def test_symbol(self, normalizer, compiler):
        assert normalizer.match_percent_of_that("20% of that", compiler.compile("en")) == "20"

    def test_german(self, normalizer, compiler):
        assert normalizer.match_percent_of_that("zehn prozent davon", compiler.compile("de")) == "10"

    def test_no_match(self, normalizer, compiler):
        assert normalizer.match_percent_of_that("ten plus five", compiler.compile("en")) is None


def test_clean_number():
    assert clean_number("3,5") == "3.5"
    assert clean_number("1 000") == "1000"
