"""
Voice Session Controller

State machine that drives normalization and evaluation from recognition
events and gates text-to-speech playback.

States:
    IDLE → start() → LISTENING
    LISTENING → result spoken → SPEAKING → speech done → LISTENING
    any → stop() / recognition error / recognition end → IDLE

Two guards keep the session from feeding on itself:
- Feedback guard: every transcript that arrives while a result is being
  spoken is dropped, so the engine never evaluates its own voice.
- Dedup: a web transcript identical to the last processed one is dropped.

Usage:
    controller = VoiceSessionController(
        calculator=calculator,
        recognizer=provider,
        synthesizer=tts,
        scheduler=AsyncioScheduler(),
        sinks=[ui_sink, history],
    )
    controller.start()
"""

import re
from typing import List, Optional, Sequence, Union

from config.settings import settings
from services.calculator import CalculatorService
from services.math.evaluator import EvaluationSource
from services.voice.contracts import (
    ErrorEvent,
    EventSink,
    InterimEvent,
    RecognitionOptions,
    RecognitionProvider,
    ResultEvent,
    SessionEvent,
    SpeechSynthesis,
    StateEvent,
    TranscriptSource,
    Voice,
)
from services.voice.scheduler import PeriodicTask, Scheduler, TimerHandle
from services.voice.session import SessionState, VoiceSession
from services.voice.speech import build_speech_options, select_best_voice, speech_tag
from utils.exceptions import ErrorKind, UnsupportedPlatformError
from utils.logging import get_logger, log_calculation

logger = get_logger(__name__)


# Trailing operators and punctuation left by a cut-off utterance
TRAILING_NOISE = re.compile(r"[+\-*/%=.,\s]+$")
LEADING_OPERATOR = re.compile(r"^\s*[+\-*/%]")

# Recognition error causes reported by browser and native engines
RECOGNITION_ERROR_KINDS = {
    "not-allowed": ErrorKind.PERMISSION_DENIED,
    "service-not-allowed": ErrorKind.PERMISSION_DENIED,
    "permission-denied": ErrorKind.PERMISSION_DENIED,
    "unsupported": ErrorKind.UNSUPPORTED_PLATFORM,
    "language-not-supported": ErrorKind.UNSUPPORTED_PLATFORM,
}


class VoiceSessionController:
    """
    Owns one VoiceSession and every resource it acquires.

    The recognition session and the continuous-mode poll are acquired by
    start() and released exactly once by stop().

    Args:
        calculator: Normalization and evaluation service
        recognizer: Speech-recognition capability
        synthesizer: Text-to-speech capability (None disables speech)
        scheduler: Timer source for polling and interim throttling
        sinks: Receivers of session events
        language: Initial language code
        continuous_mode: Keep listening across utterances
        muted: Do not speak results
    """

    def __init__(
        self,
        calculator: CalculatorService,
        recognizer: RecognitionProvider,
        synthesizer: Optional[SpeechSynthesis],
        scheduler: Scheduler,
        sinks: Sequence[EventSink] = (),
        language: Optional[str] = None,
        continuous_mode: bool = False,
        muted: Optional[bool] = None,
        poll_interval_ms: Optional[int] = None,
        frame_interval_ms: Optional[int] = None,
    ):
        self.calculator = calculator
        self.recognizer = recognizer
        self.synthesizer = synthesizer
        self.scheduler = scheduler
        self.sinks: List[EventSink] = list(sinks)

        self.session = VoiceSession(
            language=calculator.resolve_language(language),
            continuous_mode=continuous_mode,
            muted=settings.SPEECH_MUTED if muted is None else muted,
        )

        poll_ms = poll_interval_ms if poll_interval_ms is not None else settings.CONTINUOUS_POLL_INTERVAL_MS
        frame_ms = frame_interval_ms if frame_interval_ms is not None else settings.INTERIM_FRAME_INTERVAL_MS
        self.frame_interval = frame_ms / 1000
        self._poll = PeriodicTask(scheduler, poll_ms / 1000, self._poll_interim)

        self._recognition_active = False
        self._frame_handle: Optional[TimerHandle] = None
        self._last_emitted_interim = ""
        self._last_observed = ""
        self._voice: Optional[Voice] = None

    @property
    def state(self) -> SessionState:
        return self.session.state

    def add_sink(self, sink: EventSink) -> None:
        self.sinks.append(sink)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """
        Begin listening.

        Raises:
            UnsupportedPlatformError: No recognition capability
            PermissionDeniedError: Microphone or recognition refused
        """
        if self.session.active:
            logger.debug("start() ignored, session already active")
            return

        if not self.recognizer.is_available():
            raise UnsupportedPlatformError()

        options = RecognitionOptions(
            language=speech_tag(self.session.language),
            continuous=self.session.continuous_mode,
        )
        self.recognizer.start(options, self)
        self._recognition_active = True

        self.session.clear_transcripts()
        self._reset_interim_tracking()
        self._set_state(SessionState.LISTENING)
        self._sync_poll()
        logger.info(f"Voice session started ({self.session.language}, continuous={self.session.continuous_mode})")

    def stop(self) -> None:
        """Return to IDLE, cancel speech and release recognition and timers. Safe to call twice."""
        if self.session.is_speaking and self.synthesizer is not None:
            try:
                self.synthesizer.cancel()
            except Exception as e:
                logger.warning(f"Speech synthesis failed to cancel: {e}")
        self.session.is_speaking = False
        self.session.last_spoken_result = None
        self._release()

    def _release(self) -> None:
        if self._recognition_active:
            self._recognition_active = False
            try:
                self.recognizer.stop()
            except Exception as e:
                logger.warning(f"Recognition provider failed to stop: {e}")

        self._poll.stop()
        self._reset_interim_tracking()
        self.session.clear_transcripts()
        self._set_state(SessionState.IDLE)

    # =========================================================================
    # Recognition Events
    # =========================================================================

    def on_interim(self, text: str, source: Union[TranscriptSource, str] = TranscriptSource.WEB) -> None:
        if not self.session.active:
            return
        if self.session.is_speaking:
            logger.debug("Interim transcript dropped while speaking")
            return

        self.session.interim_transcript = text or ""
        self.session.interim_source = TranscriptSource(source)
        if self._frame_handle is None:
            self._frame_handle = self.scheduler.call_later(self.frame_interval, self._flush_interim)

    def on_final(self, text: str, source: Union[TranscriptSource, str] = TranscriptSource.WEB) -> None:
        if not self.session.active:
            logger.debug("Final transcript dropped, session idle")
            return
        self.process_final_transcript(text, source)

    def on_recognition_error(self, cause: str) -> None:
        kind = RECOGNITION_ERROR_KINDS.get(cause, ErrorKind.RECOGNITION_FAILURE)
        logger.warning(f"Recognition error: {cause}")
        self._emit(ErrorEvent(kind=kind, detail=cause))
        self.stop()

    def on_recognition_end(self) -> None:
        if not self.session.active:
            return

        if not self.session.continuous_mode:
            pending = self.session.interim_transcript.strip()
            if (
                pending
                and self.session.interim_source is TranscriptSource.NATIVE
                and not self.session.is_speaking
            ):
                self.process_final_transcript(pending, TranscriptSource.NATIVE)

        # The engine ended on its own; a result being spoken plays to the end
        self._release()

    # =========================================================================
    # Transcript Processing
    # =========================================================================

    def process_final_transcript(
        self,
        text: str,
        source: Union[TranscriptSource, str] = TranscriptSource.WEB,
    ) -> None:
        """
        Normalize, evaluate and publish one final transcript.

        Emits exactly one ResultEvent or ErrorEvent unless the transcript is
        empty, arrives while speaking, or duplicates the last web transcript.
        """
        if self.session.is_speaking:
            logger.debug(f"Feedback guard dropped '{text}'")
            return

        transcript = (text or "").strip()
        if not transcript:
            return

        source = TranscriptSource(source)
        if source is TranscriptSource.WEB and transcript == self.session.last_processed_transcript:
            logger.debug(f"Duplicate transcript dropped: '{transcript}'")
            return

        self.session.last_processed_transcript = transcript
        language = self.session.language

        equation = self._build_equation(transcript)
        outcome = self.calculator.evaluate_detailed(equation, EvaluationSource.SPEECH, language)

        self.session.interim_transcript = ""
        self._last_observed = ""
        log_calculation(equation, outcome.value, EvaluationSource.SPEECH.value, language)

        if not outcome.ok:
            self._emit(ErrorEvent(kind=outcome.error_kind, detail=outcome.detail, transcript=transcript))
            return

        self.session.last_result = outcome.value
        self._emit(ResultEvent(
            equation=equation,
            result=outcome.value,
            display=outcome.display,
            transcript=transcript,
            language=language,
        ))
        self._speak(outcome.display)

    def _build_equation(self, transcript: str) -> str:
        language = self.session.language
        equation = TRAILING_NOISE.sub("", self.calculator.normalize(transcript, language))

        last_result = self.session.last_result
        if last_result is None:
            return equation

        percent = self.calculator.match_percent_of_that(transcript, language)
        if percent is not None:
            return f"{last_result} * {percent} / 100"

        if LEADING_OPERATOR.match(equation):
            return f"{last_result} {equation}"
        return equation

    # =========================================================================
    # Speech
    # =========================================================================

    def _speak(self, text: str) -> None:
        if self.synthesizer is None or self.session.muted:
            return
        if text == self.session.last_spoken_result:
            logger.debug(f"Result '{text}' already spoken")
            return

        if self.session.is_speaking:
            self.synthesizer.cancel()

        self.session.last_spoken_result = text
        self.session.is_speaking = True
        if self.session.state is SessionState.LISTENING:
            self._set_state(SessionState.SPEAKING)

        try:
            options = build_speech_options(self.session.language, self._select_voice())
            self.synthesizer.speak(text, options, self)
        except Exception as e:
            logger.error(f"Speech synthesis failed to start: {e}")
            self.on_speech_error(str(e))

    def _select_voice(self) -> Optional[Voice]:
        if self._voice is None and self.synthesizer is not None:
            self._voice = select_best_voice(self.synthesizer.available_voices(), self.session.language)
        return self._voice

    def on_speech_done(self) -> None:
        self._finish_speech()

    def on_speech_stopped(self) -> None:
        self._finish_speech()

    def on_speech_error(self, cause: str) -> None:
        logger.warning(f"Speech synthesis error: {cause}")
        self._finish_speech()
        self._emit(ErrorEvent(kind=ErrorKind.SPEECH_SYNTHESIS_FAILURE, detail=cause))

    def cancel_speech(self) -> None:
        if self.session.is_speaking and self.synthesizer is not None:
            self.synthesizer.cancel()
        self._finish_speech()

    def _finish_speech(self) -> None:
        self.session.is_speaking = False
        self.session.clear_transcripts()
        self._last_observed = ""
        if self.session.state is SessionState.SPEAKING:
            self._set_state(SessionState.LISTENING)

    # =========================================================================
    # Settings
    # =========================================================================

    def set_language(self, language: Optional[str]) -> None:
        """Switch language; an active session restarts recognition."""
        resolved = self.calculator.resolve_language(language)
        if resolved == self.session.language:
            return

        was_active = self.session.active
        if was_active:
            self.stop()
        self.session.language = resolved
        self.session.last_spoken_result = None
        self._voice = None
        logger.info(f"Voice session language set to '{resolved}'")
        if was_active:
            self.start()

    def set_muted(self, muted: bool) -> None:
        self.session.muted = bool(muted)
        if self.session.muted and self.session.is_speaking:
            self.cancel_speech()

    def set_continuous_mode(self, enabled: bool) -> None:
        self.session.continuous_mode = bool(enabled)
        self._sync_poll()

    # =========================================================================
    # Internals
    # =========================================================================

    def _sync_poll(self) -> None:
        wants_poll = (
            self.session.active
            and self.session.continuous_mode
            and not self.recognizer.supports_finality
        )
        if wants_poll:
            self._poll.start()
        else:
            self._poll.stop()

    def _poll_interim(self) -> None:
        """Two identical non-empty observations in a row end an utterance."""
        current = self.session.interim_transcript.strip()
        if not current:
            self._last_observed = ""
            return
        if self.session.is_speaking:
            return

        if current == self._last_observed:
            self._last_observed = ""
            self.session.interim_transcript = ""
            self.process_final_transcript(current, TranscriptSource.NATIVE)
        else:
            self._last_observed = current

    def _flush_interim(self) -> None:
        self._frame_handle = None
        text = self.session.interim_transcript
        if text == self._last_emitted_interim or self.session.is_speaking:
            return
        self._last_emitted_interim = text
        self._emit(InterimEvent(text=text, source=self.session.interim_source or TranscriptSource.WEB))

    def _reset_interim_tracking(self) -> None:
        if self._frame_handle is not None:
            self._frame_handle.cancel()
            self._frame_handle = None
        self._last_emitted_interim = ""
        self._last_observed = ""

    def _set_state(self, state: SessionState) -> None:
        previous = self.session.state
        if state is previous:
            return
        self.session.state = state
        logger.debug(f"Session {previous.value} → {state.value}")
        self._emit(StateEvent(state=state, previous=previous))

    def _emit(self, event: SessionEvent) -> None:
        for sink in list(self.sinks):
            try:
                sink.emit(event)
            except Exception as e:
                logger.error(f"Event sink {type(sink).__name__} failed: {e}", exc_info=True)
