import asyncio
import json

import httpx
import pytest

from logrelay.notifier import (
    NotifierConfigError,
    NotifierResponseError,
    NotifierTransportError,
    TelegramNotifier,
    format_notification,
)


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_format_notification_wraps_in_code_block():
    assert format_notification("[2024-01-02 03:04:05 UTC] hi") == (
        "🔔 **Log Entry**\n```\n[2024-01-02 03:04:05 UTC] hi\n```"
    )


def test_notify_posts_markdown_message(telegram_settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    notifier = TelegramNotifier(telegram_settings, client=mock_client(handler))
    asyncio.run(notifier.notify("[2024-01-02 03:04:05 UTC] disk at 91%"))

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://telegram.test/bot123:abc/sendMessage"
    assert json.loads(request.content) == {
        "chat_id": "-1001",
        "text": "🔔 **Log Entry**\n```\n[2024-01-02 03:04:05 UTC] disk at 91%\n```",
        "parse_mode": "Markdown",
    }


@pytest.mark.parametrize(
    "missing, name",
    [("telegram_bot_token", "TELEGRAM_BOT_TOKEN"), ("telegram_chat_id", "TELEGRAM_CHAT_ID")],
)
def test_missing_credentials_fail_before_any_request(telegram_settings, missing, name):
    calls = []
    settings = telegram_settings.model_copy(update={missing: None})
    notifier = TelegramNotifier(settings, client=mock_client(lambda r: calls.append(r)))

    with pytest.raises(NotifierConfigError, match=name):
        asyncio.run(notifier.notify("hi"))
    assert calls == []


def test_non_success_status_carries_body(telegram_settings):
    def handler(request):
        return httpx.Response(400, text='{"ok":false,"description":"Bad Request: chat not found"}')

    notifier = TelegramNotifier(telegram_settings, client=mock_client(handler))

    with pytest.raises(NotifierResponseError) as exc_info:
        asyncio.run(notifier.notify("hi"))
    assert exc_info.value.status_code == 400
    assert "chat not found" in exc_info.value.body


def test_transport_failure_is_wrapped(telegram_settings):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    notifier = TelegramNotifier(telegram_settings, client=mock_client(handler))

    with pytest.raises(NotifierTransportError) as exc_info:
        asyncio.run(notifier.notify("hi"))
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_empty_error_body_falls_back_to_placeholder(telegram_settings):
    notifier = TelegramNotifier(telegram_settings, client=mock_client(lambda r: httpx.Response(500)))

    with pytest.raises(NotifierResponseError) as exc_info:
        asyncio.run(notifier.notify("hi"))
    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "Unknown error"


def test_unusable_token_is_a_transport_error(telegram_settings):
    calls = []
    settings = telegram_settings.model_copy(update={"telegram_bot_token": "123\x01abc"})
    notifier = TelegramNotifier(settings, client=mock_client(lambda r: calls.append(r)))

    with pytest.raises(NotifierTransportError) as exc_info:
        asyncio.run(notifier.notify("hi"))
    assert isinstance(exc_info.value.__cause__, httpx.InvalidURL)
    assert calls == []
