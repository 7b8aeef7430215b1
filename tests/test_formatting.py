from fxwidget.services.formatting import (
    format_amount,
    format_number,
    format_rate,
    invalid_amount_display,
)


def test_amount_uses_two_to_four_fraction_digits():
    assert format_amount(20.0) == "20,00"
    assert format_amount(0.2) == "0,20"
    assert format_amount(1.23456) == "1,2346"


def test_thousands_are_grouped():
    assert format_amount(1234567.5) == "1.234.567,50"
    assert format_amount(999) == "999,00"


def test_rate_uses_up_to_six_fraction_digits():
    assert format_rate(0.1234567) == "0,123457"
    assert format_rate(31.25) == "31,25"


def test_half_rounds_away_from_zero():
    assert format_number(0.125, max_digits=2) == "0,13"
    assert format_number(-0.125, max_digits=2) == "-0,13"


def test_custom_separators():
    assert format_amount(1234.5, decimal_sep=".", group_sep=",") == "1,234.50"
    assert invalid_amount_display(".") == "0.00"


def test_values_beyond_default_decimal_precision():
    assert format_amount(2e24) == "2.000.000.000.000.000.000.000.000,00"
    assert format_rate(1e30) == "1.000.000.000.000.000.000.000.000.000.000,00"
    assert format_amount(1.7976931348623157e308).endswith(",00")
