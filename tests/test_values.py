"""Tests for betty.values."""

from datetime import datetime, timezone

import pytest

from betty.values import coerce_scalar


@pytest.mark.parametrize("raw,expected", [
    ("true", True),
    ("false", False),
    ("42", 42),
    ("-5", -5),
    ("3.14", 3.14),
    ("hello", "hello"),
    ("12abc", "12abc"),
    ("True", "True"),
    ("", ""),
])
def test_coerce(raw, expected):
    assert coerce_scalar(raw) == expected


def test_timestamp():
    assert coerce_scalar("2020-02-10T15:00:00.000Z", "timestamp") == datetime(
        2020, 2, 10, 15, 0, tzinfo=timezone.utc
    )


def test_date_only_is_text():
    assert coerce_scalar("2024-01-15") == "2024-01-15"


@pytest.mark.parametrize("raw", [
    "2020-13-10T15:00:00Z",
    "2020-02-30T10:00:00Z",
    "2021-04-01T25:00:00Z",
])
def test_impossible_timestamp_is_text(raw):
    assert coerce_scalar(raw, "timestamp") == raw
