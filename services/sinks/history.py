"""
Calculation History

Bounded in-memory record of successful calculations. Acts as an EventSink
for voice sessions and is fed directly by the HTTP endpoints.
"""

from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

from config.settings import settings
from services.voice.contracts import ResultEvent, SessionEvent
from utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class HistoryEntry:
    equation: str
    result: str
    display: str
    source: str
    language: str
    transcript: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


class CalculationHistory:
    """
    Newest-first history capped at ``max_entries``.

    When disabled, every write is ignored.
    """

    def __init__(self, max_entries: Optional[int] = None, enabled: Optional[bool] = None):
        self.max_entries = max_entries if max_entries is not None else settings.HISTORY_MAX_ENTRIES
        self.enabled = settings.HISTORY_ENABLED if enabled is None else enabled
        self._entries: Deque[HistoryEntry] = deque(maxlen=max(self.max_entries, 1))

    def __len__(self) -> int:
        return len(self._entries)

    def emit(self, event: SessionEvent) -> None:
        if isinstance(event, ResultEvent):
            self.record(
                equation=event.equation,
                result=event.result,
                display=event.display,
                source="speech",
                language=event.language,
                transcript=event.transcript,
            )

    def record(
        self,
        equation: str,
        result: str,
        display: str,
        source: str,
        language: str,
        transcript: Optional[str] = None,
    ) -> Optional[HistoryEntry]:
        if not self.enabled:
            return None
        entry = HistoryEntry(
            equation=equation,
            result=result,
            display=display,
            source=source,
            language=language,
            transcript=transcript,
        )
        self._entries.appendleft(entry)
        return entry

    def entries(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        items = list(self._entries)
        return items[:limit] if limit is not None else items

    def clear(self) -> int:
        """Drop every entry; returns how many were removed."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared {count} history entries")
        return count
