"""
Unit Tests for Language Lexicons

Tests for language resolution and the per-language word tables.
"""

import pytest

from services.math.languages import (
    DEFAULT_LANGUAGE,
    LANGUAGE_PATTERNS,
    SUPPORTED_LANGUAGES,
    lookup,
    resolve_language,
)


class TestResolveLanguage:
    """Tests for mapping language codes onto supported ones."""

    @pytest.mark.parametrize("code,expected", [
        ("en", "en"),
        ("ES", "es"),
        ("es-MX", "es"),
        ("pt_BR", "pt"),
        (" fr ", "fr"),
        ("de-AT", "de"),
    ])
    def test_known_codes(self, code, expected):
        assert resolve_language(code) == expected

    def test_unknown_code_falls_back_to_default(self):
        assert resolve_language("xx") == DEFAULT_LANGUAGE

    def test_missing_code_uses_given_default(self):
        assert resolve_language(None, "it") == "it"
        assert resolve_language("", "de") == "de"

    def test_unknown_default_falls_back_to_english(self):
        assert resolve_language("zz", "yy") == "en"

    def test_lookup_never_fails(self):
        assert lookup("klingon").code == "en"
        assert lookup("pt-PT").name == "Português"


class TestLexicons:
    """Tests for the language tables."""

    def test_six_languages(self):
        assert SUPPORTED_LANGUAGES == ("en", "es", "fr", "de", "pt", "it")

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            LANGUAGE_PATTERNS["en"].numbers["eleventy"] = "110"

    def test_english_compound_numbers(self):
        numbers = lookup("en").numbers
        assert numbers["twenty five"] == "25"
        assert numbers["twentyfive"] == "25"
        assert numbers["ninety nine"] == "99"

    def test_spanish_numbers(self):
        numbers = lookup("es").numbers
        assert numbers["veintiuno"] == "21"
        assert numbers["treinta y dos"] == "32"

    def test_german_joined_numbers(self):
        numbers = lookup("de").numbers
        assert numbers["einundzwanzig"] == "21"
        assert numbers["zweiunddreißig"] == "32"

    def test_italian_elision(self):
        numbers = lookup("it").numbers
        assert numbers["ventuno"] == "21"
        assert numbers["ventotto"] == "28"
        assert numbers["ventitré"] == "23"

    def test_french_seventy(self):
        assert lookup("fr").numbers["soixante dix"] == "70"

    def test_fraction_words(self):
        assert lookup("en").fraction_words["thirds"] == 3
        assert lookup("de").fraction_words["viertel"] == 4

    def test_every_language_has_operator_words(self):
        for patterns in LANGUAGE_PATTERNS.values():
            ops = patterns.operations
            assert ops.addition and ops.subtraction
            assert ops.multiplication and ops.division
            assert ops.percentage
