from datetime import datetime, timezone

import pytest

from logrelay.config import Settings

FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "server.log"


@pytest.fixture
def settings(log_file):
    return Settings(log_path=str(log_file))


@pytest.fixture
def telegram_settings(log_file):
    return Settings(
        log_path=str(log_file),
        telegram_bot_token="123:abc",
        telegram_chat_id="-1001",
        telegram_api_base="https://telegram.test",
    )
