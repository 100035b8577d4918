from datetime import date, datetime
from decimal import Decimal

import pytest

from congregation_reports.utils.common import (
    auth_headers,
    capitalize_label,
    day_label,
    month_label,
    parse_amount,
    parse_count,
    parse_record_date,
    to_cents,
    whole_percent,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-03-15", date(2024, 3, 15)),
        ("2024-03-15T08:00:00Z", date(2024, 3, 15)),
        ("2024-03-15 23:59:59+05:00", date(2024, 3, 15)),
        (datetime(2024, 3, 15, 22, 0), date(2024, 3, 15)),
        (date(2024, 3, 15), date(2024, 3, 15)),
        ("2024-02-30", None),
        ("", None),
        (None, None),
        (20240315, None),
    ],
)
def test_parse_record_date(raw, expected):
    assert parse_record_date(raw) == expected


def test_labels():
    assert month_label(date(2024, 1, 2)) == "Jan 2024"
    assert day_label(date(2024, 1, 2)) == "Jan 2"
    assert month_label(None) == "Unknown"
    assert day_label(None) == "Unknown"


@pytest.mark.parametrize(
    "raw, expected",
    [("100", Decimal("100")), (" 12.5 ", Decimal("12.5")), (7, Decimal("7")), (1.25, Decimal("1.25")),
     ("abc", None), (None, None), (False, None), ("nan", None)],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_parse_count():
    assert parse_count(None) == 0
    assert parse_count(12) == 12
    assert parse_count("12") == 12
    assert parse_count("twelve") == 0
    assert parse_count("12.0") == 12
    assert parse_count("12.5") == 0
    assert parse_count("1e999999999") == 0


def test_parse_amount_rejects_absurd_magnitudes():
    assert parse_amount("999999999999999999.99") is None
    assert parse_amount("-1e30") is None
    assert parse_amount("999999999999999.99") == Decimal("999999999999999.99")


def test_to_cents_keeps_every_integer_digit():
    assert to_cents(Decimal("12.345")) == Decimal("12.34")
    assert to_cents(Decimal("1e30")) == Decimal("1e30")
    assert str(to_cents(Decimal("1e30"))).endswith(".00")


def test_whole_percent():
    assert whole_percent(1, 0) == 0
    assert whole_percent(2, 3) == 67
    assert whole_percent(1, 8) == 13
    assert whole_percent(Decimal("49.5"), Decimal("300")) == 17


def test_capitalize_label():
    assert capitalize_label("building_fund") == "Building_fund"
    assert capitalize_label("tithe") == "Tithe"
    assert capitalize_label("") == ""


def test_auth_headers_prefers_user_token():
    assert auth_headers("anon", "tok")["Authorization"] == "Bearer tok"
    assert auth_headers("anon")["Authorization"] == "Bearer anon"
    assert auth_headers("anon")["apikey"] == "anon"
