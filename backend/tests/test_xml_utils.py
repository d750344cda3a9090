from datetime import date, datetime, timedelta, timezone

import pytest

from shopshout.xml_utils import escape_xml, format_price, format_rfc822, format_sitemap_date, strip_html

FROZEN_NOW = datetime(2024, 3, 15, 9, 30, 0, tzinfo=timezone.utc)


def frozen():
    return FROZEN_NOW


def test_escape_reserved_characters():
    assert escape_xml("<a&b>\"c'") == "&lt;a&amp;b&gt;&quot;c&apos;"


def test_escape_does_not_double_escape_in_one_pass():
    assert escape_xml("&lt;") == "&amp;lt;"


@pytest.mark.parametrize("value,expected", [(None, ""), ("", ""), (0, "0"), (12.5, "12.5")])
def test_escape_non_strings(value, expected):
    assert escape_xml(value) == expected


def test_strip_html_removes_markup_and_collapses_whitespace():
    assert strip_html("<p>Great\n\n  <b>sound</b></p>\t<br/>quality ") == "Great sound quality"


def test_strip_html_truncates_to_exactly_500():
    chunk = "<div><span>lorem   ipsum</span>\n</div>"
    html = chunk * 60
    text = strip_html(html)
    assert len(text) == 500
    assert "<" not in text
    assert "  " not in text


def test_strip_html_without_limit():
    assert strip_html("<i>x</i>" * 600, limit=None) == "x" * 600


@pytest.mark.parametrize(
    "amount,currency,expected",
    [
        (80, "EUR", "80.00 EUR"),
        ("19.9", "USD", "19.90 USD"),
        (5, None, "5.00 EUR"),
        (None, "EUR", None),
        (0, "EUR", None),
        ("abc", "EUR", None),
        (float("nan"), "EUR", None),
    ],
)
def test_format_price(amount, currency, expected):
    assert format_price(amount, currency) == expected


def test_sitemap_date_from_iso_string():
    assert format_sitemap_date("2024-02-01T23:30:00-02:00", frozen) == "2024-02-02"


def test_sitemap_date_from_date_and_datetime():
    assert format_sitemap_date(date(2023, 12, 31), frozen) == "2023-12-31"
    assert format_sitemap_date(datetime(2023, 1, 2, 3, 4), frozen) == "2023-01-02"


@pytest.mark.parametrize("value", [None, "", "not a date", "2024-13-45"])
def test_sitemap_date_falls_back_to_clock(value):
    assert format_sitemap_date(value, frozen) == "2024-03-15"


def test_rfc822_format():
    assert format_rfc822("2024-02-01T10:00:00+00:00", frozen) == "Thu, 01 Feb 2024 10:00:00 GMT"


def test_rfc822_converts_to_utc():
    value = datetime(2024, 2, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_rfc822(value, frozen) == "Thu, 01 Feb 2024 10:00:00 GMT"


def test_rfc822_falls_back_to_clock():
    assert format_rfc822("garbage", frozen) == "Fri, 15 Mar 2024 09:30:00 GMT"


def test_strip_html_plain_url_is_quiet():
    import warnings

    from bs4 import MarkupResemblesLocatorWarning

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        assert strip_html("https://example.com/x") == "https://example.com/x"
        assert strip_html("manual.pdf") == "manual.pdf"
    assert not [w for w in caught if issubclass(w.category, MarkupResemblesLocatorWarning)]


def test_strip_html_decodes_entities_in_plain_text():
    assert strip_html("Salt &amp; Pepper") == "Salt & Pepper"
