"""Tests for the import workflow."""

import pytest

from bankimport.domain.entities import BatchStatus, Confidence, TransactionType
from bankimport.domain.errors import (
    FormatError,
    InvalidTransitionError,
    MappingValidationError,
    NotFoundError,
    UndoError,
    ValidationError,
)
from bankimport.domain.import_session import ImportSession, ImportState


def test_full_workflow(temp_db, import_session, kb_rows, write_csv, accounts_by_code, tenant_id):
    session = import_session
    assert session.state == ImportState.UPLOAD

    transactions = session.upload(write_csv(kb_rows, name="march.csv"))
    assert session.state == ImportState.MAPPING
    assert session.filename == "march.csv"
    assert session.bank_type == "kb"
    assert session.bank_name == "국민은행"
    assert len(transactions) == 3

    classified = session.classify()
    assert session.state == ImportState.CLASSIFY
    assert session.selected == {1, 2, 3}
    assert classified[0].account_id == accounts_by_code["503"].id
    assert classified[0].confidence == Confidence.MEDIUM
    assert session.summary.total_count == 3

    batch = session.confirm()
    assert session.state == ImportState.RESULT
    assert batch.success_count == 3
    assert batch.filename == "march.csv"
    assert batch.bank_type == "kb"
    assert len(temp_db.list_transactions(tenant_id)) == 3

    deleted = session.undo()
    assert deleted == 3
    assert session.state == ImportState.UNDONE
    assert temp_db.list_transactions(tenant_id) == []


def test_upload_rows_with_bad_input_keeps_state(import_session):
    with pytest.raises(FormatError):
        import_session.upload_rows([["only one row"]])
    assert import_session.state == ImportState.UPLOAD


def test_upload_unsupported_file_keeps_state(import_session, tmp_path):
    path = tmp_path / "statement.pdf"
    path.write_bytes(b"%PDF")
    with pytest.raises(FormatError):
        import_session.upload(str(path))
    assert import_session.state == ImportState.UPLOAD


def test_classify_requires_upload(import_session):
    with pytest.raises(InvalidTransitionError, match="Cannot classify while import is in state 'upload'"):
        import_session.classify()


def test_confirm_requires_classification(import_session, kb_rows):
    import_session.upload_rows(kb_rows)
    with pytest.raises(InvalidTransitionError):
        import_session.confirm()


def test_undo_requires_result(import_session, kb_rows):
    import_session.upload_rows(kb_rows)
    import_session.classify()
    with pytest.raises(InvalidTransitionError):
        import_session.undo()


def test_no_upload_after_confirm(import_session, kb_rows):
    import_session.upload_rows(kb_rows)
    import_session.classify()
    import_session.confirm()
    with pytest.raises(InvalidTransitionError):
        import_session.upload_rows(kb_rows)


def test_missing_mapping_blocks_classification(import_session):
    rows = [
        ["날짜", "메모", "금액"],
        ["2024-01-01", "x", "100"],
    ]
    import_session.upload_rows(rows)
    assert import_session.transactions == []

    with pytest.raises(MappingValidationError) as exc_info:
        import_session.classify()
    assert exc_info.value.missing_fields == ["deposit/withdrawal"]
    assert import_session.state == ImportState.MAPPING


def test_update_mapping_reextracts_rows(import_session):
    rows = [
        ["날짜", "메모", "금액"],
        ["2024-01-01", "교통비", "1,200"],
    ]
    import_session.upload_rows(rows)

    transactions = import_session.update_mapping(withdrawal="금액")
    assert len(transactions) == 1
    assert transactions[0].withdrawal == 1200

    classified = import_session.classify()
    assert classified[0].type == TransactionType.EXPENSE


def test_update_mapping_unmap_field(import_session, kb_rows):
    import_session.upload_rows(kb_rows)
    import_session.update_mapping(deposit=None)
    # Only withdrawal rows survive
    assert [t.row_index for t in import_session.transactions] == [1, 2]


def test_update_mapping_validation(import_session, kb_rows):
    import_session.upload_rows(kb_rows)
    with pytest.raises(ValidationError, match="Unknown mapping field"):
        import_session.update_mapping(amount="입금액")
    with pytest.raises(ValidationError, match="not found in file headers"):
        import_session.update_mapping(date="없는열")


def test_update_mapping_returns_to_mapping(import_session, kb_rows):
    import_session.upload_rows(kb_rows)
    import_session.classify()
    import_session.update_mapping(balance=None)
    assert import_session.state == ImportState.MAPPING
    assert import_session.classified == []


def test_deselect_row_excludes_it(temp_db, import_session, kb_rows, tenant_id):
    import_session.upload_rows(kb_rows)
    import_session.classify()
    import_session.deselect_row(2)

    batch = import_session.confirm()
    assert batch.total_count == 2
    descriptions = {t.description for t in temp_db.list_transactions(tenant_id)}
    assert descriptions == {"국민연금 납부", "3월 급여"}


def test_select_unknown_row(import_session, kb_rows):
    import_session.upload_rows(kb_rows)
    import_session.classify()
    with pytest.raises(NotFoundError):
        import_session.deselect_row(4)
    with pytest.raises(NotFoundError):
        import_session.select_row(99)


def test_confirm_with_nothing_selected(import_session, kb_rows):
    import_session.upload_rows(kb_rows)
    import_session.classify()
    for row_index in (1, 2, 3):
        import_session.deselect_row(row_index)
    with pytest.raises(ValidationError, match="No transactions selected"):
        import_session.confirm()
    assert import_session.state == ImportState.CLASSIFY


def test_edit_row_overrides_suggestion(import_session, kb_rows, accounts_by_code, directory_service):
    project_id = directory_service.create_project("청년사업")
    import_session.upload_rows(kb_rows)
    import_session.classify()

    edited = import_session.edit_row(2, account_id=accounts_by_code["524"].id, project_id=project_id)

    assert edited.account_id == accounts_by_code["524"].id
    assert edited.account_name == "524 회의비"
    assert edited.project_name == "청년사업"
    # The suggestion itself is untouched
    assert import_session.classified[1].account_id == accounts_by_code["525"].id

    edited = import_session.edit_row(2, project_id=None)
    assert edited.project_id is None
    assert edited.account_id == accounts_by_code["524"].id


def test_edit_row_validation(import_session, kb_rows):
    import_session.upload_rows(kb_rows)
    import_session.classify()
    with pytest.raises(ValidationError, match="account is required"):
        import_session.edit_row(1, account_id=None)
    with pytest.raises(ValidationError, match="Cannot edit"):
        import_session.edit_row(1, description="x")
    with pytest.raises(NotFoundError):
        import_session.edit_row(1, account_id=99999)
    with pytest.raises(NotFoundError):
        import_session.edit_row(1, fund_source_id=99999)
    assert import_session.overrides == {}


def test_confirm_commits_edits_and_learns(temp_db, import_session, kb_rows, accounts_by_code, tenant_id):
    salary_expense = accounts_by_code["501"].id
    import_session.upload_rows(kb_rows)
    import_session.classify()
    import_session.edit_row(1, account_id=salary_expense)
    import_session.confirm(save_classifications=True)

    pension = next(
        t for t in temp_db.list_transactions(tenant_id) if t.description == "국민연금 납부"
    )
    assert pension.account_id == salary_expense

    # A later import of the same description uses the learned account
    later = ImportSession(temp_db, tenant_id)
    later.upload_rows(
        [kb_rows[0], ["2024-04-01", "국민연금 납부", "", "150,000", "1,000,000"]]
    )
    result = later.classify()[0]
    assert result.account_id == salary_expense
    assert result.is_learned
    assert result.confidence == Confidence.HIGH


def test_learning_is_tenant_scoped(temp_db, import_session, kb_rows, accounts_by_code):
    import_session.upload_rows(kb_rows)
    import_session.classify()
    import_session.edit_row(1, account_id=accounts_by_code["501"].id)
    import_session.confirm(save_classifications=True)

    other = ImportSession(temp_db, "other-tenant")
    other.directory.seed_default_accounts()
    other.upload_rows(kb_rows)
    assert not any(t.is_learned for t in other.classify())


def test_confirmed_duplicates_are_reported(import_session, temp_db, kb_rows, tenant_id):
    import_session.upload_rows(kb_rows)
    import_session.classify()
    import_session.confirm()

    again = ImportSession(temp_db, tenant_id)
    again.upload_rows(kb_rows)
    again.classify()
    batch = again.confirm()
    assert batch.duplicate_count == 3
    assert batch.success_count == 0
    assert batch.status == BatchStatus.COMPLETED


def test_undo_of_batch_undone_elsewhere(import_session, kb_rows, batch_service, tenant_id):
    import_session.upload_rows(kb_rows)
    import_session.classify()
    batch = import_session.confirm()
    batch_service.undo(tenant_id, batch.id)

    with pytest.raises(UndoError):
        import_session.undo()
    assert import_session.state == ImportState.RESULT


def test_second_undo_raises_undo_error(temp_db, import_session, kb_rows, tenant_id):
    import_session.upload_rows(kb_rows)
    import_session.classify()
    import_session.confirm()
    assert import_session.undo() == 3

    with pytest.raises(UndoError, match="already been undone"):
        import_session.undo()
    assert import_session.state == ImportState.UNDONE
    assert temp_db.list_transactions(tenant_id) == []


def test_learning_failure_leaves_batch_undoable(
    temp_db, import_session, kb_rows, tenant_id, monkeypatch
):
    def fail_save(*args, **kwargs):
        raise RuntimeError("learning store unavailable")

    monkeypatch.setattr(import_session.batch_service.learning_service, "save", fail_save)
    import_session.upload_rows(kb_rows)
    import_session.classify()

    with pytest.raises(RuntimeError):
        import_session.confirm(save_classifications=True)

    assert import_session.state == ImportState.RESULT
    assert import_session.batch.success_count == 3
    assert import_session.undo() == 3
    assert temp_db.list_transactions(tenant_id) == []
