"""Tests for domain entities."""

import pytest
from datetime import datetime, UTC

from bankimport.domain.entities import (
    AccountType,
    ColumnMapping,
    Confidence,
    LedgerAccount,
    ParsedTransaction,
    TransactionType,
)


class TestColumnMapping:
    """Tests for ColumnMapping entity."""

    def test_complete_mapping(self):
        mapping = ColumnMapping(date="날짜", description="내용", deposit="입금")
        assert mapping.missing_required_fields() == []
        assert mapping.is_usable

    def test_one_amount_column_is_enough(self):
        assert ColumnMapping(date="d", description="x", withdrawal="w").is_usable

    def test_missing_fields(self):
        mapping = ColumnMapping(deposit="입금")
        assert mapping.missing_required_fields() == ["date", "description"]

    def test_empty_mapping(self):
        assert ColumnMapping().missing_required_fields() == [
            "date",
            "description",
            "deposit/withdrawal",
        ]

    def test_as_dict(self):
        mapping = ColumnMapping(date="날짜")
        assert mapping.as_dict() == {
            "date": "날짜",
            "description": None,
            "deposit": None,
            "withdrawal": None,
            "balance": None,
        }

    def test_immutability(self):
        mapping = ColumnMapping()
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            mapping.date = "날짜"


class TestConfidence:
    """Tests for Confidence thresholds."""

    @pytest.mark.parametrize(
        "score, expected",
        [
            (1.0, Confidence.HIGH),
            (0.8, Confidence.HIGH),
            (0.79, Confidence.MEDIUM),
            (0.5, Confidence.MEDIUM),
            (0.49, Confidence.LOW),
            (0.0, Confidence.LOW),
        ],
    )
    def test_from_score(self, score, expected):
        assert Confidence.from_score(score) == expected


class TestAccountType:
    def test_for_transaction_type(self):
        assert AccountType.for_transaction_type(TransactionType.INCOME) == AccountType.REVENUE
        assert AccountType.for_transaction_type(TransactionType.EXPENSE) == AccountType.EXPENSE


class TestLedgerAccount:
    def test_display_name(self):
        account = LedgerAccount(
            id=1,
            tenant_id="t1",
            code="503",
            name="복리후생비",
            account_type=AccountType.EXPENSE,
            is_active=True,
            created_at=datetime.now(UTC),
        )
        assert account.display_name == "503 복리후생비"


class TestParsedTransaction:
    def test_raw_data_is_ignored_in_equality(self):
        """Two parses of the same row compare equal regardless of raw cells."""
        first = ParsedTransaction(1, "2024-03-01", "x", 0.0, 100.0, 0.0, raw_data={"a": 1})
        second = ParsedTransaction(1, "2024-03-01", "x", 0.0, 100.0, 0.0, raw_data={"a": 2})
        assert first == second
