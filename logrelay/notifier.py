# logrelay/notifier.py
import logging
from typing import Optional

import httpx

from logrelay.config import Settings
from logrelay.models import TelegramMessage

logger = logging.getLogger("logrelay.notifier")

PARSE_MODE = "Markdown"
UNKNOWN_ERROR = "Unknown error"


# ---------- Errors (never fatal to a request) ----------
class NotifyError(Exception):
    pass


class NotifierConfigError(NotifyError):
    pass


class NotifierResponseError(NotifyError):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"Telegram API returned {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class NotifierTransportError(NotifyError):
    pass


def format_notification(message: str) -> str:
    return f"🔔 **Log Entry**\n```\n{message}\n```"


class TelegramNotifier:
    """Ships a copy of a persisted log entry to a Telegram chat."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._client = client

    def build_message(self, message: str) -> TelegramMessage:
        if not self.settings.telegram_bot_token:
            raise NotifierConfigError("TELEGRAM_BOT_TOKEN environment variable not set")
        if not self.settings.telegram_chat_id:
            raise NotifierConfigError("TELEGRAM_CHAT_ID environment variable not set")

        return TelegramMessage(
            chat_id=self.settings.telegram_chat_id,
            text=format_notification(message),
            parse_mode=PARSE_MODE,
        )

    async def notify(self, message: str) -> None:
        payload = self.build_message(message)
        body = payload.model_dump(exclude_none=True)

        # InvalidURL is not an HTTPError; a bad token or api base raises it
        try:
            if self._client is not None:
                response = await self._client.post(self.settings.send_message_url, json=body)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(self.settings.send_message_url, json=body)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NotifierTransportError(f"Telegram request failed: {e}") from e

        if not response.is_success:
            # the body is already read and decoded with replacement; only an empty one is unusable
            error_text = response.text.strip() or UNKNOWN_ERROR
            raise NotifierResponseError(response.status_code, error_text)

        logger.debug("telegram_sent chat_id=%s status=%d", payload.chat_id, response.status_code)
