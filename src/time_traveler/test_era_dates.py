from __future__ import annotations

from .era_dates import extract_year_range, first_year, format_period, format_year


def test_bc_marker_negates_year():
    years = extract_year_range("Rome was founded in 753 BC.")
    assert years.start == -753
    assert years.end == -753


def test_bare_number_is_treated_as_ad():
    years = extract_year_range("Columbus sailed in 1492")
    assert (years.start, years.end) == (1492, 1492)


def test_ad_and_ce_markers_keep_year_positive():
    assert extract_year_range("around 100 AD").start == 100
    assert extract_year_range("in 64 CE the city burned").start == 64


def test_bce_marker_is_recognised():
    assert extract_year_range("Athens in 480 BCE").start == -480


def test_range_spans_minimum_to_maximum():
    text = "From 27 BC, through the crisis of 235, until the fall in 476 AD."
    years = extract_year_range(text)
    assert years.start == -27
    assert years.end == 476
    assert not years.is_empty


def test_text_without_years_gives_empty_range():
    years = extract_year_range("A story with no dates at all.")
    assert years.is_empty
    assert years.start is None
    assert extract_year_range("").is_empty


def test_numbers_longer_than_four_digits_are_ignored():
    assert extract_year_range("population of 12345 people").is_empty


def test_first_year_returns_reading_order_match():
    assert first_year("Founded 500 BC, renamed 1204") == -500
    assert first_year("nothing here") is None


def test_format_year_and_period():
    assert format_year(-753) == "753 BC"
    assert format_year(476) == "476 AD"
    assert format_period(-753, 476) == "753 BC - 476 AD"
    assert format_period(1500, 1500) == "1500 AD"
