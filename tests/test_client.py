import requests

from hriq_calendar.config import Settings
from hriq_calendar.server import client as client_module
from hriq_calendar.server import trigger_remote_scrape


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400


def test_no_webhook_url_uses_cached_data(monkeypatch):
    def unexpected(*args, **kwargs):
        raise AssertionError("aucun appel attendu")

    monkeypatch.setattr(client_module.requests, "post", unexpected)
    assert trigger_remote_scrape(Settings()) is False


def test_successful_remote_scrape(monkeypatch):
    sent = {}

    def fake_post(url, headers=None, timeout=None):
        sent.update(url=url, headers=headers, timeout=timeout)
        return FakeResponse(200, '{"success": true}')

    monkeypatch.setattr(client_module.requests, "post", fake_post)
    settings = Settings(webhook_url="http://localhost:3847", webhook_token="abc")

    assert trigger_remote_scrape(settings, timeout=10) is True
    assert sent == {
        "url": "http://localhost:3847/scrape",
        "headers": {"Authorization": "Bearer abc"},
        "timeout": 10,
    }


def test_remote_error_is_not_fatal(monkeypatch):
    monkeypatch.setattr(client_module.requests, "post", lambda *a, **kw: FakeResponse(409, "busy"))
    assert trigger_remote_scrape(Settings(webhook_url="http://localhost:3847")) is False


def test_unreachable_webhook_is_not_fatal(monkeypatch):
    def refused(*args, **kwargs):
        raise requests.ConnectionError("Connection refused")

    monkeypatch.setattr(client_module.requests, "post", refused)
    assert trigger_remote_scrape(Settings(webhook_url="http://localhost:3847")) is False
