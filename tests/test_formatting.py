import pytest

from detail_pricing.utils.formatting import (
    format_currency,
    format_minutes_hhmm,
    parse_decimal_input,
    parse_hhmm_to_minutes,
)


def test_format_currency():
    assert format_currency(1234.56) == "R$ 1.234,56"
    assert format_currency(0) == "R$ 0,00"
    assert format_currency(-12.5) == "-R$ 12,50"
    assert format_currency(1000000, symbol="$") == "$ 1.000.000,00"


@pytest.mark.parametrize("text, expected", [
    ("12,50", 12.5),
    ("1.234,56", 1234.56),
    ("R$ 99,90", 99.9),
    ("42", 42.0),
    ("", 0.0),
    ("abc", 0.0),
    (None, 0.0),
    (7, 7.0),
])
def test_parse_decimal_input(text, expected):
    assert parse_decimal_input(text) == pytest.approx(expected)


def test_minutes_round_trip_text():
    assert format_minutes_hhmm(150) == "02:30"
    assert format_minutes_hhmm(-5) == "00:00"
    assert parse_hhmm_to_minutes("02:30") == 150
    assert parse_hhmm_to_minutes("2h30") == 0
    assert parse_hhmm_to_minutes("01:75") == 0
    assert parse_hhmm_to_minutes("") == 0
