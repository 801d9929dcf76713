"""
Voice Session State

Mutable state of one voice session. Owned by VoiceSessionController and
changed only through its transition methods.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class SessionState(str, Enum):
    """Voice session states."""
    IDLE = "idle"                # Not listening
    LISTENING = "listening"      # Recognition running
    SPEAKING = "speaking"        # Recognition running, result being spoken


@dataclass
class VoiceSession:
    """
    Voice session data container.

    ``is_speaking`` is tracked separately from ``state`` so the feedback
    guard holds from the moment speech is requested. stop() clears it.
    """
    language: str
    continuous_mode: bool = False
    muted: bool = False

    state: SessionState = SessionState.IDLE
    is_speaking: bool = False

    # Transcript state
    interim_transcript: str = ""
    interim_source: Optional[str] = None
    last_processed_transcript: str = ""

    # Result chaining
    last_result: Optional[str] = None
    last_spoken_result: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.state is not SessionState.IDLE

    def clear_transcripts(self) -> None:
        """Drop buffered interim text and the dedup key."""
        self.interim_transcript = ""
        self.interim_source = None
        self.last_processed_transcript = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "language": self.language,
            "continuous_mode": self.continuous_mode,
            "muted": self.muted,
            "is_speaking": self.is_speaking,
            "interim_transcript": self.interim_transcript,
            "last_result": self.last_result,
        }
