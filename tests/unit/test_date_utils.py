"""Unit tests for calendar-month helpers"""

from datetime import date
from cardfund_gateway.utils.date_utils import (
    format_month_key,
    format_month_label,
    generate_month_range,
    month_start,
    months_between,
    shift_month,
)


def test_month_start():
    assert month_start((2024, 2)) == date(2024, 2, 1)


def test_shift_month_wraps_years():
    assert shift_month((2025, 12), 1) == (2026, 1)
    assert shift_month((2025, 1), -1) == (2024, 12)


def test_months_between():
    assert months_between((2025, 11), (2026, 2)) == 3
    assert months_between((2025, 5), (2025, 3)) == -2


def test_generate_month_range():
    assert generate_month_range((2025, 11), 3) == [(2025, 11), (2025, 12), (2026, 1)]


def test_month_formatting():
    assert format_month_key((2025, 5)) == "2025-05"
    assert format_month_label((2025, 5)) == "May 2025"
