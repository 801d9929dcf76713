"""
Calculation History Tests
"""

from services.sinks.history import CalculationHistory
from services.voice.contracts import ErrorEvent, ResultEvent
from utils.exceptions import ErrorKind


def record(history, equation, result):
    return history.record(
        equation=equation,
        result=result,
        display=result,
        source="keypad",
        language="en",
    )


class TestCalculationHistory:
    """Tests for the in-memory history."""

    def test_newest_first(self):
        history = CalculationHistory(max_entries=10, enabled=True)
        record(history, "1 + 1", "2")
        record(history, "2 + 2", "4")

        assert [e.result for e in history.entries()] == ["4", "2"]
        assert len(history) == 2

    def test_capped(self):
        history = CalculationHistory(max_entries=2, enabled=True)
        for n in range(5):
            record(history, f"{n} + 0", str(n))

        assert [e.result for e in history.entries()] == ["4", "3"]

    def test_limit(self):
        history = CalculationHistory(max_entries=10, enabled=True)
        for n in range(5):
            record(history, f"{n} + 0", str(n))

        assert len(history.entries(limit=3)) == 3

    def test_disabled(self):
        history = CalculationHistory(enabled=False)
        assert record(history, "1 + 1", "2") is None
        assert history.entries() == []

    def test_records_result_events(self):
        history = CalculationHistory(max_entries=10, enabled=True)
        history.emit(ResultEvent(
            equation="20 + 5",
            result="25",
            display="25",
            transcript="twenty plus five",
            language="en",
        ))
        history.emit(ErrorEvent(kind=ErrorKind.EMPTY_INPUT))

        entries = history.entries()
        assert len(entries) == 1
        assert entries[0].source == "speech"
        assert entries[0].transcript == "twenty plus five"

    def test_clear(self):
        history = CalculationHistory(max_entries=10, enabled=True)
        record(history, "1 + 1", "2")

        assert history.clear() == 1
        assert history.entries() == []

    def test_to_dict(self):
        history = CalculationHistory(max_entries=10, enabled=True)
        entry = record(history, "1 + 1", "2")

        data = entry.to_dict()
        assert data["equation"] == "1 + 1"
        assert isinstance(data["timestamp"], str)
