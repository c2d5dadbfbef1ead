import pytest

from hriq_calendar.scraper.parser import RawEntry
from hriq_calendar.utils import build_holiday, build_leave_record


@pytest.fixture
def january_record():
    return {
        "month": 1,
        "year": 2026,
        "monthName": "January",
        "holidays": [build_holiday(1, 1, 2026, "New Year's Day(SG)")],
        "leaves": [
            build_leave_record(20, 1, 2026, RawEntry("CHUA SIN HAI", "ANNU")),
            build_leave_record(5, 1, 2026, RawEntry("TAN WEN XIAN (ALLEN)", "WFH 2", "AM")),
            build_leave_record(5, 1, 2026, RawEntry("LIM YI HWEE (JOEY)", "SL")),
        ],
    }


@pytest.fixture
def december_record():
    return {
        "month": 12,
        "year": 2025,
        "monthName": "December",
        "holidays": [build_holiday(25, 12, 2025, "Christmas Day(SG)")],
        "leaves": [
            build_leave_record(31, 12, 2025, RawEntry("JOHN YANG JIA HAN", "ANNU")),
            build_leave_record(2, 12, 2025, RawEntry("JOHN YANG JIA HAN", "XYZ", "PM")),
        ],
    }


@pytest.fixture
def february_record():
    return {
        "month": 2,
        "year": 2026,
        "monthName": "February",
        "holidays": [
            build_holiday(17, 2, 2026, "Chinese New Year(SG)"),
            build_holiday(16, 2, 2026, "CNY Eve (Company Holiday)"),
        ],
        "leaves": [
            build_leave_record(3, 2, 2026, RawEntry("LEE CHIN HAI (EDDY)", "CCL")),
        ],
    }


@pytest.fixture
def aggregate(december_record, january_record, february_record):
    from hriq_calendar.store import build_aggregate

    return build_aggregate(
        [december_record, january_record, february_record],
        "2026-01-15T08:00:00.000Z",
    )
