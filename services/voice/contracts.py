"""
Voice Contracts

Interfaces the voice session consumes (recognition, synthesis, event
sinks) and the events it emits.

Recognition and synthesis engines live outside this package; anything
that implements these protocols can drive a VoiceSessionController.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Protocol, Sequence, Union

from services.voice.session import SessionState
from utils.exceptions import ErrorKind


class TranscriptSource(str, Enum):
    """Which recognition path produced a transcript."""
    WEB = "web"
    NATIVE = "native"


@dataclass(frozen=True)
class RecognitionOptions:
    """Options handed to RecognitionProvider.start()."""
    language: str
    continuous: bool = False
    interim_results: bool = True


@dataclass(frozen=True)
class SpeechOptions:
    """Options handed to SpeechSynthesis.speak()."""
    language: str
    rate: float = 1.0
    pitch: float = 1.0
    voice: Optional[str] = None


@dataclass(frozen=True)
class Voice:
    name: str
    lang: str


# =============================================================================
# Consumed Interfaces
# =============================================================================

class RecognitionListener(Protocol):
    def on_interim(self, text: str, source: TranscriptSource = TranscriptSource.WEB) -> None: ...

    def on_final(self, text: str, source: TranscriptSource = TranscriptSource.WEB) -> None: ...

    def on_recognition_error(self, cause: str) -> None: ...

    def on_recognition_end(self) -> None: ...


class RecognitionProvider(Protocol):
    """
    Speech-recognition capability.

    ``supports_finality`` is False for engines that only stream interim
    text; the controller then detects utterance boundaries itself.
    """

    supports_finality: bool

    def is_available(self) -> bool: ...

    def start(self, options: RecognitionOptions, listener: RecognitionListener) -> None:
        """May raise PermissionDeniedError or UnsupportedPlatformError."""
        ...

    def stop(self) -> None: ...


class SpeechListener(Protocol):
    def on_speech_done(self) -> None: ...

    def on_speech_stopped(self) -> None: ...

    def on_speech_error(self, cause: str) -> None: ...


class SpeechSynthesis(Protocol):
    """Text-to-speech capability."""

    def speak(self, text: str, options: SpeechOptions, listener: SpeechListener) -> None: ...

    def cancel(self) -> None: ...

    def available_voices(self) -> Sequence[Voice]: ...


# =============================================================================
# Emitted Events
# =============================================================================

@dataclass(frozen=True)
class ResultEvent:
    """A transcript evaluated successfully."""
    type: ClassVar[str] = "result"

    equation: str
    result: str
    display: str
    transcript: str
    language: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, **asdict(self)}


@dataclass(frozen=True)
class ErrorEvent:
    type: ClassVar[str] = "error"

    kind: ErrorKind
    detail: Optional[str] = None
    transcript: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "kind": self.kind.value,
            "detail": self.detail,
            "transcript": self.transcript,
        }


@dataclass(frozen=True)
class InterimEvent:
    type: ClassVar[str] = "interim"

    text: str
    source: TranscriptSource

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "text": self.text, "source": self.source.value}


@dataclass(frozen=True)
class StateEvent:
    type: ClassVar[str] = "state"

    state: SessionState
    previous: SessionState

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "state": self.state.value, "previous": self.previous.value}


SessionEvent = Union[ResultEvent, ErrorEvent, InterimEvent, StateEvent]


class EventSink(Protocol):
    """Receives session events; must not block."""

    def emit(self, event: SessionEvent) -> None: ...
