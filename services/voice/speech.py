"""
Speech Helpers

Language-to-engine mapping shared by recognition and text-to-speech.

Usage:
    from services.voice.speech import speech_tag, select_best_voice

    tag = speech_tag("pt")                         # "pt-BR"
    voice = select_best_voice(synth.available_voices(), "pt")
"""

from typing import Optional, Sequence

from config.constants import DEFAULT_SPEECH_TAG, PREFERRED_VOICE_NAMES, SPEECH_RECOGNITION_LANG_MAP
from config.settings import settings
from services.math.languages import resolve_language
from services.voice.contracts import SpeechOptions, Voice


def speech_tag(language: Optional[str]) -> str:
    """BCP-47 tag for a language code, e.g. "es" → "es-ES"."""
    return SPEECH_RECOGNITION_LANG_MAP.get(resolve_language(language), DEFAULT_SPEECH_TAG)


def select_best_voice(voices: Sequence[Voice], language: Optional[str]) -> Optional[Voice]:
    """
    Pick the fastest-rendering voice for a language.

    Tries the preferred voice names for the tag first, then any Google
    voice speaking the base language. Returns None when voices have not
    loaded or none match; the engine default is used then.
    """
    if not voices:
        return None

    tag = speech_tag(language)
    base = tag.split("-")[0]
    preferred = (
        PREFERRED_VOICE_NAMES.get(tag)
        or PREFERRED_VOICE_NAMES.get(f"{base}-{base.upper()}")
        or []
    )

    for name in preferred:
        for voice in voices:
            if voice.name == name or name in voice.name:
                return voice

    for voice in voices:
        if "google" in voice.name.lower() and voice.lang.startswith(base):
            return voice

    return None


def build_speech_options(language: Optional[str], voice: Optional[Voice] = None) -> SpeechOptions:
    return SpeechOptions(
        language=speech_tag(language),
        rate=settings.TTS_RATE,
        pitch=settings.TTS_PITCH,
        voice=voice.name if voice else None,
    )
