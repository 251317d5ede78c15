# logrelay/config.py
import os
from typing import List, Mapping, Optional

from pydantic import BaseModel

# ---------- fixed listening address ----------
HOST = "0.0.0.0"
PORT = 8080

DEFAULT_LOG_PATH = "server.log"
DEFAULT_LOG_FILTER = "logrelay=debug,info"
DEFAULT_TELEGRAM_API_BASE = "https://api.telegram.org"
# ---------------------------------------------


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class Settings(BaseModel):
    log_path: str = DEFAULT_LOG_PATH
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    telegram_api_base: str = DEFAULT_TELEGRAM_API_BASE
    log_filter: str = DEFAULT_LOG_FILTER
    cors_allow_origins: List[str] = ["*"]
    host: str = HOST
    port: int = PORT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read the process environment once. Later env changes are not seen."""
        env = os.environ if environ is None else environ

        origins = [
            o.strip()
            for o in env.get("CORS_ALLOW_ORIGINS", "*").split(",")
            if o.strip()
        ]

        return cls(
            log_path=env.get("LOG_PATH") or DEFAULT_LOG_PATH,
            telegram_bot_token=_optional(env.get("TELEGRAM_BOT_TOKEN")),
            telegram_chat_id=_optional(env.get("TELEGRAM_CHAT_ID")),
            telegram_api_base=(
                env.get("TELEGRAM_API_BASE") or DEFAULT_TELEGRAM_API_BASE
            ).rstrip("/"),
            log_filter=env.get("LOG_LEVEL") or DEFAULT_LOG_FILTER,
            cors_allow_origins=origins or ["*"],
        )

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)

    @property
    def send_message_url(self) -> str:
        return f"{self.telegram_api_base}/bot{self.telegram_bot_token}/sendMessage"
