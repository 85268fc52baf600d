"""
Small formatting helpers shared by services and the CLI.
"""

from .phone import format_phone_display, normalize_phone

__all__ = ["format_phone_display", "normalize_phone"]
