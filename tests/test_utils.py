# tests/test_utils.py

import pytest

from a2s_core.models import DurationBreakdown
from a2s_core.utils import format_duration, hex_bytes


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (3725.0, (1, 2, 5)),
        (59.9, (0, 0, 59)),  # 向下取整，而非四舍五入
        (0.0, (0, 0, 0)),
        (3600.0, (1, 0, 0)),
        (90061.5, (25, 1, 1)),
    ],
)
def test_format_duration(seconds, expected):
    clean = format_duration(seconds)
    assert (clean.hours, clean.minutes, clean.seconds) == expected


def test_duration_str():
    assert str(format_duration(3725.0)) == "1h 2m 5s"
    assert format_duration(3725.0) == DurationBreakdown(hours=1, minutes=2, seconds=5)


def test_negative_duration_is_programmer_error():
    with pytest.raises(AssertionError):
        format_duration(-1.0)


def test_hex_bytes():
    assert hex_bytes(b"\xff\xff\xff\xff\x41") == "FF FF FF FF 41"
    assert hex_bytes(b"") == ""
