import pytest
from playwright.sync_api import Error as PlaywrightError

from fakes import FakeElement, FakePage
from hriq_calendar.config import (
    CALENDAR_GRID_SELECTOR, DEPARTMENT_CHECKBOX_SELECTORS, MONTH_SELECT, SHOW_BUTTON_SELECTORS, YEAR_SELECT
)
from hriq_calendar.scraper import month as month_module
from hriq_calendar.scraper.month import (
    apply_department_filter, assemble_month, extract_month, merge_company_holidays,
    resolve_overflow_cells, select_month
)
from hriq_calendar.scraper.parser import ParsedCell, RawEntry
from hriq_calendar.utils import build_holiday


def _entries(count):
    return [RawEntry(f"EMPLOYEE {i}", "ANNU") for i in range(count)]


def test_overflow_entries_replace_grid_entries():
    cells = [
        ParsedCell(day=15, holiday_name=None, entries=_entries(2), has_overflow=True, overflow_token="15"),
        ParsedCell(day=16, holiday_name=None, entries=[RawEntry("CHUA SIN HAI", "SL", "AM")]),
    ]
    record = assemble_month(1, 2026, cells, resolved={15: _entries(5)}, company_holidays=[])

    day_15 = [l for l in record["leaves"] if l["date"] == 15]
    assert len(day_15) == 5
    assert [l["employee"] for l in day_15] == [f"EMPLOYEE {i}" for i in range(5)]
    assert len(record["leaves"]) == 6


def test_failed_overflow_keeps_partial_entries():
    cells = [ParsedCell(day=15, holiday_name=None, entries=_entries(2), has_overflow=True, overflow_token="15")]
    record = assemble_month(1, 2026, cells, resolved={}, company_holidays=[])
    assert len(record["leaves"]) == 2


def test_assemble_month_builds_complete_records():
    cells = [
        ParsedCell(day=5, holiday_name=None, entries=[RawEntry("TAN WEN XIAN (ALLEN)", "WFH 2", "AM")]),
        ParsedCell(day=1, holiday_name="New Year's Day(SG)", entries=[]),
    ]
    record = assemble_month(1, 2026, cells, company_holidays=[])

    assert record["monthName"] == "January"
    assert record["holidays"] == [build_holiday(1, 1, 2026, "New Year's Day(SG)")]
    leave = record["leaves"][0]
    assert leave["fullDate"] == "2026-01-05"
    assert leave["displayName"] == "Allen"
    assert leave["leaveTypeName"] == "Work From Home"
    assert set(leave) == {
        "date", "fullDate", "month", "year", "employee", "leaveType",
        "period", "displayName", "leaveTypeName", "color",
    }


def test_assemble_month_uses_portal_month_name():
    record = assemble_month(3, 2026, [], name="Mar", company_holidays=[])
    assert record["monthName"] == "Mar"
    assert record["leaves"] == []
    assert record["holidays"] == []


def test_company_holidays_are_merged_without_duplicates():
    cells = [
        ParsedCell(day=17, holiday_name="Chinese New Year(SG)", entries=[]),
        ParsedCell(day=16, holiday_name="Chinese New Year Eve", entries=[]),
    ]
    record = assemble_month(2, 2026, cells)

    assert [(h["date"], h["name"]) for h in record["holidays"]] == [
        (16, "Chinese New Year Eve"),
        (17, "Chinese New Year(SG)"),
        (19, "CNY (Company Holiday)"),
    ]


def test_company_holidays_of_other_months_are_ignored():
    static = [{"date": 16, "month": 2, "year": 2026, "name": "CNY Eve (Company Holiday)"}]
    assert merge_company_holidays([], 1, 2026, static) == []
    assert merge_company_holidays([], 2, 2027, static) == []
    assert merge_company_holidays([], 2, 2026, static) == [
        build_holiday(16, 2, 2026, "CNY Eve (Company Holiday)")
    ]


def test_resolve_overflow_cells_skips_unreadable_links(monkeypatch):
    calls = []

    def fake_resolve(context, day, token):
        calls.append((day, token))
        return None if day == 20 else _entries(3)

    monkeypatch.setattr(month_module, "resolve_overflow", fake_resolve)
    cells = [
        ParsedCell(day=10, holiday_name=None, entries=[]),
        ParsedCell(day=12, holiday_name=None, entries=[], has_overflow=True, overflow_token=None),
        ParsedCell(day=15, holiday_name=None, entries=[], has_overflow=True, overflow_token="15"),
        ParsedCell(day=20, holiday_name=None, entries=[], has_overflow=True, overflow_token="20"),
    ]

    resolved = resolve_overflow_cells(FakePage(context=object()), cells)

    assert calls == [(15, "15"), (20, "20")]
    assert list(resolved) == [15]
    assert len(resolved[15]) == 3



# ============================================================
# CONTRÔLES DU PORTAIL
# ============================================================

@pytest.fixture
def no_settle_delay(monkeypatch):
    monkeypatch.setattr(month_module, "SETTLE_DELAY", 0)


def test_select_month_sets_both_dropdowns(no_settle_delay):
    page = FakePage(selectable={MONTH_SELECT, YEAR_SELECT})
    assert select_month(page, 2, 2026) is True
    assert page.selected == {MONTH_SELECT: "2", YEAR_SELECT: "2026"}


def test_select_month_failure_is_not_fatal(no_settle_delay):
    page = FakePage(selectable={YEAR_SELECT})
    assert select_month(page, 2, 2026) is False


def test_department_filter_checks_box_and_refreshes(no_settle_delay):
    checkbox = FakeElement()
    show = FakeElement()
    page = FakePage(children={
        DEPARTMENT_CHECKBOX_SELECTORS[0]: [checkbox],
        SHOW_BUTTON_SELECTORS[0]: [show],
        CALENDAR_GRID_SELECTOR: [FakeElement()],
    })

    assert apply_department_filter(page) is True
    assert checkbox.checked
    assert show.clicks == 1


def test_department_filter_missing_controls_keeps_default_view(no_settle_delay):
    assert apply_department_filter(FakePage()) is False


def test_department_filter_click_error_keeps_default_view(no_settle_delay):
    def broken():
        raise PlaywrightError("Element is not attached to the DOM")

    page = FakePage(children={SHOW_BUTTON_SELECTORS[1]: [FakeElement(on_click=broken)]})
    assert apply_department_filter(page) is False


# ============================================================
# MOIS RÉELLEMENT AFFICHÉ
# ============================================================

@pytest.fixture
def portal_showing(monkeypatch):
    """Portail figé : les contrôles répondent comme demandé, la grille est fixe."""

    def configure(shown, selected=True):
        monkeypatch.setattr(month_module, "select_month", lambda page, month, year: selected)
        monkeypatch.setattr(month_module, "apply_department_filter", lambda page: True)
        monkeypatch.setattr(month_module, "read_displayed_month", lambda page: shown)
        monkeypatch.setattr(month_module, "save_debug_artifacts", lambda *args: None)
        monkeypatch.setattr(month_module, "read_calendar_cells", lambda page: [
            ParsedCell(day=1, holiday_name="New Year's Day(SG)", entries=[]),
            ParsedCell(day=5, holiday_name=None, entries=[RawEntry("CHUA SIN HAI", "ANNU")]),
        ])
        monkeypatch.setattr(month_module, "resolve_overflow_cells", lambda page, cells: {})

    return configure


@pytest.mark.parametrize("selected", [True, False])
def test_record_is_filed_under_displayed_month(portal_showing, selected):
    portal_showing((1, 2026, "January"), selected=selected)

    record = extract_month(None, 12, 2025)

    assert (record["month"], record["year"], record["monthName"]) == (1, 2026, "January")
    assert record["leaves"][0]["fullDate"] == "2026-01-05"
    assert record["holidays"][0]["fullDate"] == "2026-01-01"


def test_unreadable_dropdowns_keep_requested_month(portal_showing):
    portal_showing((None, None, None), selected=True)

    record = extract_month(None, 3, 2026)

    assert (record["month"], record["year"], record["monthName"]) == (3, 2026, "March")
