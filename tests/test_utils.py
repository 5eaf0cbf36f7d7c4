"""Tests for amount parsing and description normalization."""

import pytest

from bankimport.utils.amount_parser import parse_amount
from bankimport.utils.description import normalize_description


@pytest.mark.parametrize(
    "value, expected",
    [
        ("150,000", 150000.0),
        ("₩150,000", 150000.0),
        ("150,000원", 150000.0),
        (" 1 500 ", 1500.0),
        ("-3000", 3000.0),
        ("12.50", 12.5),
        (1234, 1234.0),
        (-99.5, 99.5),
    ],
)
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


@pytest.mark.parametrize("value", [None, "", "   ", "abc", "-", True, float("nan")])
def test_parse_amount_unparsable_is_zero(value):
    assert parse_amount(value) == 0.0


def test_parse_amount_uses_leading_number():
    assert parse_amount("1000 (수수료 포함)") == 1000.0


def test_normalize_description():
    assert normalize_description("국민연금 납부 (3월)") == "국민연금납부3월"
    assert normalize_description("  KT  통신요금!! ") == "kt통신요금"


def test_normalize_description_drops_other_scripts():
    assert normalize_description("カフェ ☕ Café 7") == "caf7"


def test_normalize_description_empty():
    assert normalize_description("") == ""
    assert normalize_description("!!! ---") == ""


def test_normalize_description_is_idempotent():
    for text in ["국민연금 납부 (3월)", "Netflix.com", "스타벅스 강남점 #123"]:
        once = normalize_description(text)
        assert normalize_description(once) == once
