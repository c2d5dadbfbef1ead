import time

from playwright.sync_api import Error as PlaywrightError

from fakes import FakeContext, FakeElement, FakePage
from hriq_calendar.config import OVERFLOW_ROW_SELECTOR
from hriq_calendar.scraper.overflow import overflow_url, read_detail_lines, resolve_overflow
from hriq_calendar.scraper.parser import RawEntry


class UnreachablePage(FakePage):
    def goto(self, url, **kwargs):
        raise PlaywrightError("net::ERR_CONNECTION_RESET")


def detail_page(*rows):
    # Seules les lignes de congé sont dans OVERFLOW_ROW_SELECTOR ; l'en-tête et
    # le pied de page sont ailleurs dans le document
    return FakePage(children={
        "body": [FakeElement("HRIQ - Leave Calendar Detail\nCopyright 2026 - Goldbell Group")],
        OVERFLOW_ROW_SELECTOR: [FakeElement(text) for text in rows],
    })


def test_overflow_url():
    assert overflow_url("2026-01-15").endswith("ViewLeaveCalendarDetail.aspx?date=2026-01-15")
    assert overflow_url("Detail.aspx?d=15").endswith("/Detail.aspx?d=15")
    assert overflow_url("https://example.com/detail?d=1") == "https://example.com/detail?d=1"


def test_detail_lines_join_row_cells():
    page = detail_page("CHUA SIN HAI\t - ANNU", "JOHN YANG JIA HAN\n- SL (PM)")
    assert read_detail_lines(page) == ["CHUA SIN HAI - ANNU", "JOHN YANG JIA HAN - SL (PM)"]


def test_resolve_overflow_reads_only_leave_rows():
    page = detail_page("CHUA SIN HAI\t - ANNU", "JOHN YANG JIA HAN\t - SL (PM)")
    entries = resolve_overflow(FakeContext(page), 15, "2026-01-15", timeout=1000)

    assert entries == [RawEntry("CHUA SIN HAI", "ANNU"), RawEntry("JOHN YANG JIA HAN", "SL", "PM")]
    assert page.visited == [overflow_url("2026-01-15")]
    assert page.closed


def test_resolve_overflow_failure_returns_none_and_closes_page():
    page = UnreachablePage()
    assert resolve_overflow(FakeContext(page), 15, "2026-01-15", timeout=100) is None
    assert page.closed


def test_resolve_overflow_without_rows_times_out():
    page = detail_page()
    started = time.monotonic()
    assert resolve_overflow(FakeContext(page), 15, "2026-01-15", timeout=50) is None
    # Une seule attente bornée : au plus une scrutation après le délai
    assert time.monotonic() - started < 1.0
    assert page.closed


def test_resolve_overflow_with_unreadable_rows_keeps_partial_entries():
    page = detail_page("Approved", "Pending")
    assert resolve_overflow(FakeContext(page), 15, "2026-01-15", timeout=1000) is None
    assert page.closed
