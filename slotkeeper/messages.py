"""
User-facing texts for throttle feedback.
"""

DEFAULT_LOCALE = "en"

_WAIT_MESSAGES = {
    "en": "Too many attempts. Please try again in {seconds} seconds.",
    "pl": "Zbyt wiele prób. Spróbuj ponownie za {seconds} sekund.",
}


def throttle_wait_message(remaining_seconds: int, locale: str = DEFAULT_LOCALE) -> str:
    """Render the wait message; unknown locales fall back to English."""
    template = _WAIT_MESSAGES.get(locale, _WAIT_MESSAGES[DEFAULT_LOCALE])
    return template.format(seconds=max(0, remaining_seconds))
