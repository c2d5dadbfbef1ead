import pytest
from playwright.sync_api import Error as PlaywrightError

from fakes import FakeElement, FakePage
from hriq_calendar.scraper.browser import locate, wait_until


def test_locate_returns_first_matching_strategy():
    wanted = FakeElement("wanted")
    page = FakePage(children={
        "#second": [wanted],
        "#third": [FakeElement("later")],
    })

    def broken(page):
        raise PlaywrightError("Unsupported selector")

    assert locate(page, ["#first", broken, "#second", "#third"]) is wanted


def test_locate_accepts_callables():
    target = FakeElement("by role")
    page = FakePage(children={"button": [target]})
    assert locate(page, [lambda p: p.locator("button")]) is target


def test_locate_returns_none_when_nothing_matches():
    assert locate(FakePage(), ["#a", "#b"]) is None


def test_wait_until_returns_first_truthy_value():
    values = iter([0, [], ["ready"]])
    assert wait_until(lambda: next(values), timeout=1000, interval=0) == ["ready"]


def test_wait_until_is_bounded():
    with pytest.raises(TimeoutError):
        wait_until(lambda: None, timeout=30, interval=0.01)
