"""
Phone number normalisation and display formatting.
"""

import re

DEFAULT_COUNTRY_PREFIX = "+48"

_WHITESPACE = re.compile(r"\s+")


def normalize_phone(raw: str, default_prefix: str = DEFAULT_COUNTRY_PREFIX) -> str:
    """
    Strip whitespace and add the country prefix when the number has none.

    Example: "123 456 789" -> "+48123456789"
    """
    cleaned = _WHITESPACE.sub("", raw or "")
    if not cleaned:
        return ""
    if not cleaned.startswith("+"):
        cleaned = default_prefix + cleaned
    return cleaned


def _group_digits(digits: str, size: int = 3) -> str:
    return " ".join(digits[i:i + size] for i in range(0, len(digits), size))


def format_phone_display(phone: str) -> str:
    """
    Format a phone number for display.

    Example: "+48123456789" -> "+48 123 456 789"
    """
    if not phone:
        return ""

    cleaned = _WHITESPACE.sub("", phone)

    if cleaned.startswith(DEFAULT_COUNTRY_PREFIX):
        return f"{DEFAULT_COUNTRY_PREFIX} {_group_digits(cleaned[len(DEFAULT_COUNTRY_PREFIX):])}"

    if cleaned.startswith("+"):
        return "+" + _group_digits(cleaned[1:])
    return _group_digits(cleaned)
