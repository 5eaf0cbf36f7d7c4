"""Tests for bank template detection and column mapping."""

import pytest

from bankimport.domain.entities import MAPPING_FIELDS
from bankimport.domain.errors import NotFoundError
from bankimport.domain.templates import (
    BANK_TEMPLATES,
    GENERIC_TEMPLATE_ID,
    count_required_matches,
    detect_column_mapping,
    find_bank_template,
    get_generic_template,
    get_template,
    list_templates,
)


def test_catalog_order():
    """Templates are tried in catalog order with the generic one last."""
    ids = [t.id for t in BANK_TEMPLATES]
    assert ids == ["kb", "shinhan", "woori", "nh", "hana", "ibk", "sc", "kakao", "toss", "generic"]


def test_generic_template_has_synonyms_for_every_field():
    template = get_generic_template()
    assert template.id == GENERIC_TEMPLATE_ID
    for field_name in MAPPING_FIELDS:
        assert template.columns[field_name], field_name


def test_list_templates_excludes_generic():
    ids = [t.id for t in list_templates()]
    assert GENERIC_TEMPLATE_ID not in ids
    assert len(ids) == 9
    assert GENERIC_TEMPLATE_ID in [t.id for t in list_templates(include_generic=True)]


def test_get_template_unknown():
    with pytest.raises(NotFoundError, match="not found"):
        get_template("nonexistent")


def test_kb_headers_detected():
    headers = ["거래일자", "적요", "입금액", "출금액", "잔액"]
    template = find_bank_template(headers)
    assert template.id == "kb"
    assert template.name_ko == "국민은행"


def test_first_matching_template_wins():
    """Headers shared by many banks resolve to the earliest catalog entry."""
    headers = ["거래일", "내용", "입금", "출금"]
    assert find_bank_template(headers).id == "kb"


def test_header_matching_is_case_insensitive_and_trimmed():
    headers = [" Date ", "DESCRIPTION", "Deposit", "withdrawal"]
    assert count_required_matches(headers, get_template("kb")) == 4
    assert find_bank_template(headers).id == "kb"


def test_fewer_than_three_required_matches_falls_back_to_generic():
    headers = ["거래일자", "적요", "메모란", "기타"]
    template = find_bank_template(headers)
    assert template.id == GENERIC_TEMPLATE_ID


def test_unrelated_headers_use_generic():
    template = find_bank_template(["foo", "bar", "baz"])
    assert template.id == GENERIC_TEMPLATE_ID


def test_detect_column_mapping_kb():
    headers = ["거래일자", "적요", "입금액", "출금액", "잔액"]
    mapping = detect_column_mapping(headers, get_template("kb"))
    assert mapping.date == "거래일자"
    assert mapping.description == "적요"
    assert mapping.deposit == "입금액"
    assert mapping.withdrawal == "출금액"
    assert mapping.balance == "잔액"
    assert mapping.is_usable


def test_detect_column_mapping_keeps_original_header_text():
    headers = ["Date", "Description", "Deposit", "Withdrawal"]
    mapping = detect_column_mapping(headers, get_template("kb"))
    assert mapping.date == "Date"
    assert mapping.balance is None


def test_detect_column_mapping_picks_first_header_in_file_order():
    """When two headers match one field, the leftmost header wins."""
    headers = ["거래일시", "거래일자", "적요", "입금액", "출금액"]
    mapping = detect_column_mapping(headers, get_template("kb"))
    assert mapping.date == "거래일시"


def test_detect_column_mapping_missing_fields():
    headers = ["날짜", "메모", "금액"]
    mapping = detect_column_mapping(headers, get_template(GENERIC_TEMPLATE_ID))
    assert mapping.date == "날짜"
    assert mapping.withdrawal is None
    assert mapping.missing_required_fields() == ["deposit/withdrawal"]
