"""
Application Constants

Centralizes locale tables and engine limits used by the calculator core.
Avoids hardcoded values scattered throughout the codebase.

Usage:
    from config.constants import LOCALE_MAP, SPEECH_RECOGNITION_LANG_MAP
"""

# =============================================================================
# Locales
# =============================================================================

# Locale used for display formatting, per language code
LOCALE_MAP = {
    "en": "en-US",
    "es": "es-ES",
    "fr": "fr-FR",
    "de": "de-DE",
    "pt": "pt-BR",
    "it": "it-IT",
}

# BCP-47 tag handed to recognition and synthesis engines
SPEECH_RECOGNITION_LANG_MAP = {
    "en": "en-US",
    "es": "es-ES",
    "fr": "fr-FR",
    "de": "de-DE",
    "pt": "pt-BR",
    "it": "it-IT",
}

DEFAULT_SPEECH_TAG = "en-US"

# (group separator, decimal separator, minimum digits before grouping kicks in)
# Spanish does not group four-digit integers ("1234" but "12.345").
LOCALE_SEPARATORS = {
    "en-US": (",", ".", 4),
    "es-ES": (".", ",", 5),
    "fr-FR": (" ", ",", 4),
    "de-DE": (".", ",", 4),
    "pt-BR": (".", ",", 4),
    "it-IT": (".", ",", 4),
}


# =============================================================================
# Text-to-Speech Voices
# =============================================================================

# Preferred synthesis voices, fastest to render first
PREFERRED_VOICE_NAMES = {
    "en-US": ["Google US English Female"],
    "en-GB": ["Google UK English Female"],
    "es-ES": ["Google español Female"],
    "es-MX": ["Google español de Estados Unidos Female"],
    "fr-FR": ["Google français Female"],
    "de-DE": ["Google Deutsch Female"],
    "pt-BR": ["Google português do Brasil Female"],
    "it-IT": ["Google italiano Female"],
}


# =============================================================================
# Arithmetic Engine Limits
# =============================================================================

# Results are rendered with at most this many fraction digits
MAX_FRACTION_DIGITS = 10

# Largest exponent magnitude accepted by the power operator
MAX_EXPONENT = 10000

# Expressions longer than this are rejected before parsing
MAX_EXPRESSION_LENGTH = 2000
