"""
Unit tests for route distance/duration formatting
"""
import pytest

from app.services.formatting import format_distance, format_duration


@pytest.mark.parametrize("meters,expected", [
    (0, "0 m"),
    (950, "950 m"),
    (999.4, "999 m"),
    (1000, "1.0 km"),
    (1500, "1.5 km"),
    (12345, "12.3 km"),
])
def test_format_distance(meters, expected):
    assert format_distance(meters) == expected


@pytest.mark.parametrize("seconds,expected", [
    (45, "1 min"),
    (29, "0 min"),
    (600, "10 min"),
    (3570, "1h 0m"),
    (5400, "1h 30m"),
    (7260, "2h 1m"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected
