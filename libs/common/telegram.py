"""Async client for the Telegram Bot API, used for admin notifications.

Delivery is best-effort: transport and API errors are logged and reported as
``False``, never raised to the caller.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Sequence

import httpx
from libs.common.config import get_settings
from libs.common.logging import get_logger, get_request_id

logger = get_logger(__name__)


class TelegramNotifier:
    """Sends text messages to a fixed list of admin chats."""

    def __init__(
        self,
        *,
        bot_token: str,
        chat_ids: Sequence[str],
        api_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.bot_token = bot_token
        self.chat_ids = list(chat_ids)
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_ids)

    async def send_message(self, chat_id: str, text: str) -> bool:
        """Send one message. Returns True on success."""
        url = f"{self.api_url}/bot{self.bot_token}/sendMessage"
        headers = {}
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    url,
                    json={"chat_id": chat_id, "text": text},
                    headers=headers,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Telegram notification to chat %s failed: %s", chat_id, e)
            return False
        return True

    async def notify_admins(self, text: str) -> int:
        """Broadcast ``text`` to every admin chat. Returns the delivered count."""
        if not self.enabled:
            logger.info("Telegram notifications disabled, skipping: %s", text[:80])
            return 0

        results = await asyncio.gather(
            *(self.send_message(chat_id, text) for chat_id in self.chat_ids)
        )
        return sum(1 for ok in results if ok)


def get_notifier() -> TelegramNotifier:
    """FastAPI dependency returning a notifier built from settings."""
    settings = get_settings()
    return TelegramNotifier(
        bot_token=settings.BOT_TOKEN,
        chat_ids=settings.admin_ids,
        api_url=settings.TELEGRAM_API_URL,
        timeout=settings.NOTIFICATION_TIMEOUT,
    )
