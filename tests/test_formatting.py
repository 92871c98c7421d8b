"""Unit tests for formatting.py - relative times and URL domains."""

import pytest

from hackerreader.core.formatting import domain_from_url, relative_time

NOW = 1_700_000_000


@pytest.mark.parametrize("age, expected", [
    (0, "0 seconds ago"),
    (59, "59 seconds ago"),
    (60, "1 minutes ago"),
    (3 * 3600, "3 hours ago"),
    (86400, "a day ago"),
    (3 * 86400, "3 days ago"),
    (21 * 86400, "3 weeks ago"),
    (35 * 86400, "a month ago"),
    (200 * 86400, "6 months ago"),
    (400 * 86400, "a year ago"),
    (3 * 365 * 86400, "3 years ago"),
])
def test_relative_time(age, expected):
    assert relative_time(NOW - age, now=NOW) == expected


def test_relative_time_future_clamps_to_zero():
    assert relative_time(NOW + 100, now=NOW) == "0 seconds ago"


@pytest.mark.parametrize("url, expected", [
    ("https://www.example.com/path?q=1", "example.com"),
    ("http://github.com", "github.com"),
    ("https://localhost:8080/x", "localhost"),
    ("", ""),
    ("not a url", ""),
])
def test_domain_from_url(url, expected):
    assert domain_from_url(url) == expected
