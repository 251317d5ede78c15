# logrelay/pipeline.py
import logging
from datetime import datetime, timezone
from typing import Callable, NamedTuple, Optional

from logrelay.models import LogRequest, LogResponse
from logrelay.notifier import NotifyError, TelegramNotifier
from logrelay.writer import LogFileWriter, PersistenceError

logger = logging.getLogger("logrelay.pipeline")

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    # naive datetimes are taken to be UTC already
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime(TIMESTAMP_FORMAT)


def render_entry(data: str, dt: datetime) -> str:
    return f"[{format_timestamp(dt)}] {data}\n"


class HandledLog(NamedTuple):
    response: LogResponse
    entry: str  # rendered entry without the trailing newline


class IngestionHandler:
    """
    Turns one LogRequest into a persisted entry plus a response.

    Only PersistenceError escapes handle(). Notification runs separately via
    notify(), whose failures are logged and dropped.
    """

    def __init__(
        self,
        writer: LogFileWriter,
        notifier: Optional[TelegramNotifier] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.writer = writer
        self.notifier = notifier
        self.clock = clock

    def handle(self, request: LogRequest) -> HandledLog:
        entry = render_entry(request.data, self.clock())
        logger.info("log_received data=%s", request.data)

        try:
            self.writer.append(entry)
        except PersistenceError as e:
            logger.error("log_write_failed path=%s error=%s", e.path, e.__cause__)
            raise

        logger.info("log_written data=%s", request.data)
        return HandledLog(response=LogResponse.success(), entry=entry.strip())

    async def notify(self, entry: str) -> None:
        if self.notifier is None:
            logger.debug("notify_skipped reason=telegram_not_configured")
            return

        try:
            await self.notifier.notify(entry)
        except NotifyError as e:
            logger.error("notify_failed error=%s", e)
            return

        logger.info("notify_sent entry=%s", entry)
