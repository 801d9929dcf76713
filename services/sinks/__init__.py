"""
Result Sinks

Fire-and-forget consumers of calculation results.
"""

from services.sinks.history import CalculationHistory, HistoryEntry
from services.sinks.webhook import WebhookConfig, WebhookDelivery, WebhookSink

__all__ = [
    'CalculationHistory',
    'HistoryEntry',
    'WebhookConfig',
    'WebhookDelivery',
    'WebhookSink',
]
