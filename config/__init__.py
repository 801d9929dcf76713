"""
Configuration Module

Environment-driven settings plus the static locale and engine tables.
"""

from .settings import settings, get_settings, Settings
from .constants import LOCALE_MAP, SPEECH_RECOGNITION_LANG_MAP

__all__ = ["settings", "get_settings", "Settings", "LOCALE_MAP", "SPEECH_RECOGNITION_LANG_MAP"]
