import dataclasses
from pathlib import Path

import pytest

from hriq_calendar.config import DEFAULT_OUTPUT_DIR, DEFAULT_PORT, load_settings


def test_defaults_without_environment():
    settings = load_settings({}, env_file=None)

    assert settings.user_id is None
    assert not settings.has_credentials
    assert settings.headless is True
    assert settings.output_dir == DEFAULT_OUTPUT_DIR
    assert settings.aggregate_path == DEFAULT_OUTPUT_DIR / "leaves.json"
    assert settings.debug_dir is None
    assert settings.port == DEFAULT_PORT


def test_environment_values():
    settings = load_settings({
        "HRIQ_USER_ID": " user01 ",
        "HRIQ_PASSWORD": "p@ss",
        "HRIQ_WEBHOOK_TOKEN": "token",
        "HRIQ_WEBHOOK_URL": "https://scraper.example.com/",
        "HRIQ_HEADLESS": "false",
        "HRIQ_OUTPUT_DIR": "/tmp/hriq",
        "HRIQ_DEBUG_DIR": "/tmp/hriq-debug",
        "PORT": "8080",
    }, env_file=None)

    assert settings.user_id == "user01"
    assert settings.has_credentials
    assert settings.webhook_url == "https://scraper.example.com"
    assert settings.headless is False
    assert settings.output_dir == Path("/tmp/hriq")
    assert settings.debug_dir == Path("/tmp/hriq-debug")
    assert settings.port == 8080


def test_invalid_port_falls_back_to_default():
    assert load_settings({"PORT": "http"}, env_file=None).port == DEFAULT_PORT


def test_env_file_is_overridden_by_environment(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("HRIQ_USER_ID=from-file\nHRIQ_PASSWORD=secret\n", encoding="utf-8")

    settings = load_settings({"HRIQ_USER_ID": "from-env"}, env_file=env_file)
    assert settings.user_id == "from-env"
    assert settings.password == "secret"


def test_missing_env_file_is_ignored(tmp_path):
    settings = load_settings({}, env_file=tmp_path / "absent.env")
    assert not settings.has_credentials


def test_settings_are_immutable():
    settings = load_settings({}, env_file=None)
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.headless = False
