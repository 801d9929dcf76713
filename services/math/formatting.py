"""
Result Formatting

Two renderings of a numeric result:

- format_value(): raw, ungrouped, "."-decimal string used for chaining,
  history and sinks ("1234.5").
- format_display(): locale-grouped string for UI and speech
  ("1,234.5" en, "1.234,5" de, "1 234,5" fr).
"""

import math
from typing import Optional, Union

from config.constants import LOCALE_MAP, LOCALE_SEPARATORS, MAX_FRACTION_DIGITS
from services.math.languages import resolve_language

Number = Union[int, float]


def format_value(value: Number) -> str:
    """
    Render a finite number with at most MAX_FRACTION_DIGITS fraction digits.

    Raises:
        ValueError: If the value is not finite
    """
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, int):
        return str(value)

    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite value {value!r}")

    if value.is_integer():
        text = str(int(value))
    else:
        text = f"{value:.{MAX_FRACTION_DIGITS}f}".rstrip("0").rstrip(".")

    return "0" if text in ("-0", "") else text


def group_digits(digits: str, separator: str, min_grouping: int = 4) -> str:
    """Insert ``separator`` every three digits from the right."""
    if len(digits) < min_grouping:
        return digits
    head = len(digits) % 3 or 3
    groups = [digits[:head]] + [digits[i:i + 3] for i in range(head, len(digits), 3)]
    return separator.join(groups)


def format_display(value: str, language: Optional[str] = None) -> str:
    """
    Locale rendering of a raw value string.

    Non-numeric strings are passed through unchanged.
    """
    locale = LOCALE_MAP[resolve_language(language)]
    group, decimal, min_grouping = LOCALE_SEPARATORS[locale]

    sign = ""
    body = value
    if body.startswith("-"):
        sign, body = "-", body[1:]

    integer, _, fraction = body.partition(".")
    if not integer.isdigit() or (fraction and not fraction.isdigit()):
        return value

    text = sign + group_digits(integer, group, min_grouping)
    if fraction:
        text += decimal + fraction
    return text
