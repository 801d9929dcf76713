"""
Remote Voice Session

Runs a VoiceSessionController for a client that owns the microphone and
the speaker (browser or mobile app). The client relays recognition and
speech events as JSON messages; commands and session events go back
through an outbound queue.

Inbound message types:
    start, stop, interim, final, recognition.end, recognition.error,
    speech.done, speech.stopped, speech.error, mute, language,
    continuous, voices, keypad

Outbound message types:
    result, error, interim, state, recognition.start, recognition.stop,
    speak, speech.cancel, preview
"""

import asyncio
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from services.calculator import CalculatorService
from services.voice.contracts import (
    EventSink,
    RecognitionListener,
    RecognitionOptions,
    SessionEvent,
    SpeechListener,
    SpeechOptions,
    TranscriptSource,
    Voice,
)
from services.voice.controller import VoiceSessionController
from services.voice.scheduler import Scheduler
from utils.exceptions import VoiceCalcError
from utils.logging import get_logger

logger = get_logger(__name__)


class RemoteVoiceBridge:
    """
    Recognition provider, speech synthesis and event sink in one, backed
    by an outbound message queue.
    """

    def __init__(self, supports_finality: bool = True):
        self.supports_finality = supports_finality
        self.voices: List[Voice] = []
        self.closed = False
        self._queue: "asyncio.Queue[Optional[Dict[str, Any]]]" = asyncio.Queue()

    def send(self, message: Dict[str, Any]) -> None:
        if self.closed:
            return
        self._queue.put_nowait(message)

    async def outbound(self) -> AsyncIterator[Dict[str, Any]]:
        """Yield queued messages until the bridge is closed."""
        while True:
            message = await self._queue.get()
            if message is None:
                return
            yield message

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(None)

    # RecognitionProvider

    def is_available(self) -> bool:
        return not self.closed

    def start(self, options: RecognitionOptions, listener: RecognitionListener) -> None:
        self.send({
            "type": "recognition.start",
            "language": options.language,
            "continuous": options.continuous,
            "interim_results": options.interim_results,
        })

    def stop(self) -> None:
        self.send({"type": "recognition.stop"})

    # SpeechSynthesis

    def speak(self, text: str, options: SpeechOptions, listener: SpeechListener) -> None:
        self.send({
            "type": "speak",
            "text": text,
            "language": options.language,
            "rate": options.rate,
            "pitch": options.pitch,
            "voice": options.voice,
        })

    def cancel(self) -> None:
        self.send({"type": "speech.cancel"})

    def available_voices(self) -> Sequence[Voice]:
        return self.voices

    # EventSink

    def emit(self, event: SessionEvent) -> None:
        self.send(event.to_dict())


class RemoteVoiceSession:
    """
    One client connection: bridge, controller and keypad preview.

    Usage:
        session = RemoteVoiceSession(calculator, scheduler, language="es")
        session.handle({"type": "start"})
        async for message in session.bridge.outbound():
            await websocket.send_json(message)
    """

    def __init__(
        self,
        calculator: CalculatorService,
        scheduler: Scheduler,
        sinks: Sequence[EventSink] = (),
        language: Optional[str] = None,
        continuous_mode: bool = False,
        muted: Optional[bool] = None,
        supports_finality: bool = True,
    ):
        self.bridge = RemoteVoiceBridge(supports_finality=supports_finality)
        self.controller = VoiceSessionController(
            calculator=calculator,
            recognizer=self.bridge,
            synthesizer=self.bridge,
            scheduler=scheduler,
            sinks=[self.bridge, *sinks],
            language=language,
            continuous_mode=continuous_mode,
            muted=muted,
        )
        self.preview = calculator.create_preview(
            scheduler, self._send_preview, language=self.controller.session.language
        )

    def handle(self, message: Dict[str, Any]) -> None:
        """Dispatch one inbound message. Malformed messages are logged and ignored."""
        if not isinstance(message, dict):
            logger.warning(f"Ignored non-object message: {message!r}")
            return

        kind = message.get("type")
        controller = self.controller
        try:
            if kind == "start":
                self._start()
            elif kind == "stop":
                controller.stop()
            elif kind == "interim":
                controller.on_interim(self._text(message), self._source(message))
            elif kind == "final":
                controller.on_final(self._text(message), self._source(message))
            elif kind == "recognition.end":
                controller.on_recognition_end()
            elif kind == "recognition.error":
                controller.on_recognition_error(str(message.get("cause") or "unknown"))
            elif kind == "speech.done":
                controller.on_speech_done()
            elif kind == "speech.stopped":
                controller.on_speech_stopped()
            elif kind == "speech.error":
                controller.on_speech_error(str(message.get("cause") or "unknown"))
            elif kind == "mute":
                controller.set_muted(bool(message.get("muted", True)))
            elif kind == "language":
                controller.set_language(message.get("language"))
                self.preview.language = controller.session.language
            elif kind == "continuous":
                controller.set_continuous_mode(bool(message.get("enabled", True)))
            elif kind == "voices":
                voices = message.get("voices") or []
                if not isinstance(voices, list):
                    raise TypeError(f"voices must be a list, got {type(voices).__name__}")
                self.bridge.voices = [
                    Voice(name=str(v.get("name", "")), lang=str(v.get("lang", "")))
                    for v in voices
                    if isinstance(v, dict)
                ]
            elif kind == "keypad":
                self.preview.update(str(message.get("expression", "")))
            else:
                logger.warning(f"Ignored unknown message type: {kind!r}")
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignored malformed '{kind}' message: {e}")

    def close(self) -> None:
        self.preview.cancel()
        self.controller.stop()
        self.bridge.close()

    def _start(self) -> None:
        try:
            self.controller.start()
        except VoiceCalcError as e:
            logger.warning(f"Voice session could not start: {e.message}")
            self.bridge.send({
                "type": "error",
                "kind": e.kind.value if e.kind else None,
                "detail": e.message,
                "transcript": None,
            })

    @staticmethod
    def _text(message: Dict[str, Any]) -> str:
        text = message.get("text")
        return text if isinstance(text, str) else ""

    @staticmethod
    def _source(message: Dict[str, Any]) -> TranscriptSource:
        return TranscriptSource(message.get("source") or TranscriptSource.WEB.value)

    def _send_preview(self, display: Optional[str]) -> None:
        self.bridge.send({"type": "preview", "display": display})
