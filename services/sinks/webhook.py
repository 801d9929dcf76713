"""
Webhook Sink

Notifies an external endpoint about every successful calculation.
Features:
- HMAC signature for security
- Retry with exponential backoff
- Fire-and-forget delivery on the running event loop
"""

import asyncio
import hashlib
import hmac
import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, Set

import httpx

from config.settings import settings
from services.voice.contracts import ResultEvent, SessionEvent
from utils.logging import get_logger, log_api_call

logger = get_logger(__name__)


@dataclass
class WebhookConfig:
    """Webhook endpoint configuration."""
    url: str
    secret: Optional[str] = None
    timeout_seconds: float = 10.0
    max_retries: int = 3

    @classmethod
    def from_settings(cls) -> Optional["WebhookConfig"]:
        if not settings.WEBHOOK_URL:
            return None
        return cls(
            url=settings.WEBHOOK_URL,
            secret=settings.WEBHOOK_SECRET,
            timeout_seconds=settings.WEBHOOK_TIMEOUT_SECONDS,
            max_retries=settings.WEBHOOK_MAX_RETRIES,
        )


@dataclass
class WebhookDelivery:
    """Record of a webhook delivery attempt."""
    payload: Dict[str, Any]
    status_code: Optional[int] = None
    error: Optional[str] = None
    attempts: int = 0
    succeeded: bool = False
    duration_ms: int = 0


class WebhookSink:
    """
    Calculation webhook delivery.

    Sends {equation, result, source, timestamp} with:
    - HMAC-SHA256 signature when a secret is configured
    - Retry with exponential backoff on network errors and 5xx responses

    Usage:
        sink = WebhookSink(WebhookConfig(url="https://hooks.example.com/calc"))
        controller.add_sink(sink)
    """

    SIGNATURE_HEADER = "X-VoiceCalc-Signature"
    TIMESTAMP_HEADER = "X-VoiceCalc-Timestamp"

    # Retry backoff (seconds): 1, 4, 16
    RETRY_BASE = 1
    RETRY_MULTIPLIER = 4

    def __init__(
        self,
        config: WebhookConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self._client = http_client
        self._sleep = sleep
        self._tasks: Set[asyncio.Task] = set()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(30.0), follow_redirects=True)
        return self._client

    @staticmethod
    def sign_payload(payload: str, secret: str, timestamp: str) -> str:
        """
        Create HMAC-SHA256 signature.

        Signature format: sha256=HMAC(secret, timestamp.payload)
        """
        message = f"{timestamp}.{payload}"
        signature = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()
        return f"sha256={signature}"

    @staticmethod
    def verify_signature(payload: str, secret: str, timestamp: str, signature: str) -> bool:
        expected = WebhookSink.sign_payload(payload, secret, timestamp)
        return hmac.compare_digest(signature, expected)

    # =========================================================================
    # EventSink
    # =========================================================================

    def emit(self, event: SessionEvent) -> None:
        if isinstance(event, ResultEvent):
            self.notify(event.equation, event.result, source="speech")

    def notify(self, equation: str, result: str, source: str) -> None:
        """Schedule delivery and return immediately."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, webhook skipped")
            return

        payload = {
            "equation": equation,
            "result": result,
            "source": source,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        task = loop.create_task(self._send_with_logging(payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for in-flight deliveries."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # =========================================================================
    # Delivery
    # =========================================================================

    async def send(self, payload: Dict[str, Any]) -> WebhookDelivery:
        """
        Deliver one payload, retrying with backoff.

        Returns:
            WebhookDelivery with result
        """
        delivery = WebhookDelivery(payload=payload)
        payload_json = json.dumps(payload, default=str)

        headers = {"Content-Type": "application/json"}
        if self.config.secret:
            timestamp = str(int(time.time()))
            headers[self.TIMESTAMP_HEADER] = timestamp
            headers[self.SIGNATURE_HEADER] = self.sign_payload(payload_json, self.config.secret, timestamp)

        start_time = time.perf_counter()
        client = await self._get_client()
        attempts = max(self.config.max_retries, 1)

        for attempt in range(attempts):
            delivery.attempts = attempt + 1
            try:
                response = await client.post(
                    self.config.url,
                    content=payload_json,
                    headers=headers,
                    timeout=self.config.timeout_seconds,
                )
                delivery.status_code = response.status_code
                delivery.succeeded = 200 <= response.status_code < 300
                delivery.error = None if delivery.succeeded else f"HTTP {response.status_code}"
                if response.status_code < 500:
                    break
            except httpx.HTTPError as e:
                delivery.error = str(e) or type(e).__name__

            if attempt < attempts - 1:
                await self._sleep(self.RETRY_BASE * self.RETRY_MULTIPLIER ** attempt)

        delivery.duration_ms = int((time.perf_counter() - start_time) * 1000)
        log_api_call("Webhook", self.config.url, delivery.succeeded, delivery.duration_ms, delivery.error)
        return delivery

    async def _send_with_logging(self, payload: Dict[str, Any]) -> None:
        """Helper for fire-and-forget with logging."""
        try:
            delivery = await self.send(payload)
            if not delivery.succeeded:
                logger.warning(f"Webhook dropped after {delivery.attempts} attempts: {delivery.error}")
        except Exception as e:
            logger.error(f"Background webhook exception: {e}")

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
