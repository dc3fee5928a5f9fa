import sys

import pytest
from loguru import logger

from catalog.config import Settings, get_settings
from catalog.logger import setup_logger


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "http://catalog.internal:9000")
    monkeypatch.setenv("REQUEST_TIMEOUT", "2.5")

    settings = Settings()

    assert settings.api_base_url == "http://catalog.internal:9000"
    assert settings.request_timeout == 2.5


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_setup_logger_level(capsys, restore_logger):
    log = setup_logger("WARNING")
    log.info("hidden")
    log.warning("shown")

    err = capsys.readouterr().err
    assert "shown" in err
    assert "hidden" not in err
