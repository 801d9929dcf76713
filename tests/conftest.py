"""
Pytest Configuration and Fixtures

Shared fixtures for testing the Voice Calc backend.
"""

import pytest
from typing import AsyncGenerator, Callable, List, Optional
from httpx import AsyncClient, ASGITransport

from services.calculator import CalculatorService
from services.voice.contracts import RecognitionOptions, SpeechOptions, Voice


# =============================================================================
# Timers
# =============================================================================

class ManualTimer:
    def __init__(self, when: float, seq: int, callback: Callable[[], None]):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when a test calls advance()."""

    def __init__(self):
        self.now = 0.0
        self._seq = 0
        self._timers: List[ManualTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        self._seq += 1
        timer = ManualTimer(self.now + delay, self._seq, callback)
        self._timers.append(timer)
        return timer

    def time(self) -> float:
        return self.now

    @property
    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    def advance(self, seconds: float) -> None:
        """Run every timer due within ``seconds``, in firing order."""
        target = self.now + seconds + 1e-9
        while True:
            due = [t for t in self._timers if not t.cancelled and t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.when, t.seq))
            self._timers.remove(timer)
            self.now = max(self.now, timer.when)
            timer.callback()
        self.now = target


# =============================================================================
# Voice Capabilities
# =============================================================================

class FakeRecognitionProvider:
    def __init__(
        self,
        available: bool = True,
        supports_finality: bool = True,
        start_error: Optional[Exception] = None,
    ):
        self.available = available
        self.supports_finality = supports_finality
        self.start_error = start_error
        self.start_calls = 0
        self.stop_calls = 0
        self.options: Optional[RecognitionOptions] = None
        self.listener = None

    def is_available(self) -> bool:
        return self.available

    def start(self, options, listener) -> None:
        if self.start_error is not None:
            raise self.start_error
        self.start_calls += 1
        self.options = options
        self.listener = listener

    def stop(self) -> None:
        self.stop_calls += 1


class FakeSpeechSynthesis:
    def __init__(self, voices: Optional[List[Voice]] = None):
        self.spoken: List[str] = []
        self.options: List[SpeechOptions] = []
        self.cancel_calls = 0
        self.voices = voices or []

    def speak(self, text, options, listener) -> None:
        self.spoken.append(text)
        self.options.append(options)

    def cancel(self) -> None:
        self.cancel_calls += 1

    def available_voices(self):
        return self.voices


class RecordingSink:
    def __init__(self):
        self.events = []

    def emit(self, event) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list:
        return [e for e in self.events if isinstance(e, event_type)]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def calculator() -> CalculatorService:
    return CalculatorService(default_language="en")


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def recognizer() -> FakeRecognitionProvider:
    return FakeRecognitionProvider()


@pytest.fixture
def synthesizer() -> FakeSpeechSynthesis:
    return FakeSpeechSynthesis()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def fresh_services():
    """Rebuild the service singletons around a test."""
    from core.dependencies import reset_services
    from utils.rate_limit import limiter

    reset_services()
    limiter.enabled = False
    yield
    limiter.enabled = True
    reset_services()


@pytest.fixture
async def client(fresh_services) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
