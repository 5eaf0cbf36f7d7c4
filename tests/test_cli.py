"""Tests for the command-line interface."""

import pytest

from bankimport.cli.main import cli
from bankimport.domain.directory import DEFAULT_CHART_OF_ACCOUNTS, DirectoryService


def run(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def batch_id_from(output: str) -> str:
    for line in output.split("\n"):
        if line.strip().startswith("Batch:"):
            return line.split("Batch:")[1].strip()
    raise AssertionError(f"No batch ID in output:\n{output}")


@pytest.fixture
def initialized(cli_runner, temp_db):
    result = run(cli_runner, temp_db, "init-accounts")
    assert result.exit_code == 0
    return temp_db


@pytest.fixture
def kb_file(write_csv, kb_rows):
    return write_csv(kb_rows, name="march.csv")


def test_help_does_not_need_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "import" in result.output


def test_version(cli_runner):
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "bankimport, version" in result.output


def test_templates(cli_runner, temp_db):
    result = run(cli_runner, temp_db, "templates")
    assert result.exit_code == 0
    assert "국민은행" in result.output
    assert "generic" not in result.output

    result = run(cli_runner, temp_db, "templates", "--columns")
    assert "거래일자" in result.output


def test_init_accounts(cli_runner, temp_db):
    result = run(cli_runner, temp_db, "init-accounts")
    assert result.exit_code == 0
    assert f"Successfully created {len(DEFAULT_CHART_OF_ACCOUNTS)} accounts." in result.output

    result = run(cli_runner, temp_db, "init-accounts")
    assert "Accounts already exist" in result.output

    result = run(cli_runner, temp_db, "init-accounts", "--force")
    assert result.exit_code == 0
    assert f"{len(DEFAULT_CHART_OF_ACCOUNTS)} already existed" in result.output


def test_account_list_and_add(cli_runner, initialized):
    result = run(cli_runner, initialized, "account", "add", "601", "잡손실", "--type", "expense")
    assert result.exit_code == 0
    assert "Created account '601 잡손실'" in result.output

    result = run(cli_runner, initialized, "account", "add", "601", "중복")
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = run(cli_runner, initialized, "account", "list")
    assert "601" in result.output
    assert "복리후생비" in result.output


def test_project_and_fund_source(cli_runner, temp_db):
    result = run(cli_runner, temp_db, "project", "add", "청년사업")
    assert result.exit_code == 0
    assert "Created project '청년사업'" in result.output

    result = run(cli_runner, temp_db, "fund-source", "add", "정부지원금")
    assert result.exit_code == 0

    assert "청년사업" in run(cli_runner, temp_db, "project", "list").output
    assert "정부지원금" in run(cli_runner, temp_db, "fund-source", "list").output

    result = run(cli_runner, temp_db, "project", "add", " ")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_import_undo_workflow(cli_runner, initialized, kb_file):
    result = run(cli_runner, initialized, "import", kb_file, "--yes")
    assert result.exit_code == 0, result.output
    assert "Detected format: 국민은행 (kb)" in result.output
    assert "503 복리후생비" in result.output
    assert "Imported: 3 transactions" in result.output
    batch_id = batch_id_from(result.output)

    result = run(cli_runner, initialized, "batches")
    assert result.exit_code == 0
    assert batch_id in result.output
    assert "march.csv" in result.output

    result = run(cli_runner, initialized, "undo", batch_id, "--yes")
    assert result.exit_code == 0
    assert "3 transactions deleted" in result.output
    assert initialized.list_transactions("default") == []

    result = run(cli_runner, initialized, "undo", batch_id, "--yes")
    assert result.exit_code == 1
    assert "already been undone" in result.output


def test_import_twice_reports_duplicates(cli_runner, initialized, kb_file):
    run(cli_runner, initialized, "import", kb_file, "--yes")
    result = run(cli_runner, initialized, "import", kb_file, "--yes")
    assert result.exit_code == 0
    assert "Skipped: 3 duplicates" in result.output


def test_import_dry_run(cli_runner, initialized, kb_file):
    result = run(cli_runner, initialized, "import", kb_file, "--dry-run")
    assert result.exit_code == 0
    assert "Dry run" in result.output
    assert initialized.list_transactions("default") == []


def test_import_declined(cli_runner, initialized, kb_file):
    result = run(cli_runner, initialized, "import", kb_file, input="n\n")
    assert result.exit_code == 0
    assert "Import cancelled." in result.output
    assert initialized.list_transactions("default") == []


def test_import_with_edits_and_learning(cli_runner, initialized, kb_file):
    directory = DirectoryService(initialized, "default")
    salary_expense = directory.find_account_by_code("501")

    result = run(
        cli_runner,
        initialized,
        "import",
        kb_file,
        "--exclude",
        "2",
        "--set-account",
        f"1={salary_expense.id}",
        "--yes",
    )
    assert result.exit_code == 0, result.output
    assert "Imported: 2 transactions" in result.output

    stored = {t.description: t for t in initialized.list_transactions("default")}
    assert set(stored) == {"국민연금 납부", "3월 급여"}
    assert stored["국민연금 납부"].account_id == salary_expense.id

    result = run(cli_runner, initialized, "learned")
    assert result.exit_code == 0
    assert "국민연금납부" in result.output
    assert "501 급여" in result.output


def test_import_without_learning(cli_runner, initialized, kb_file):
    run(cli_runner, initialized, "import", kb_file, "--yes", "--no-learn")
    result = run(cli_runner, initialized, "learned")
    assert "No learned classifications yet." in result.output


def test_import_missing_mapping(cli_runner, initialized, write_csv):
    path = write_csv([["날짜", "메모", "금액"], ["2024-01-01", "교통비", "1,200"]])

    result = run(cli_runner, initialized, "import", path, "--yes")
    assert result.exit_code == 1
    assert "missing required fields: deposit/withdrawal" in result.output
    assert "Available columns: 날짜, 메모, 금액" in result.output

    result = run(cli_runner, initialized, "import", path, "--map", "withdrawal=금액", "--yes")
    assert result.exit_code == 0, result.output
    assert "Imported: 1 transactions" in result.output


def test_import_bad_map_option(cli_runner, initialized, kb_file):
    result = run(cli_runner, initialized, "import", kb_file, "--map", "withdrawal")
    assert result.exit_code == 2

    result = run(cli_runner, initialized, "import", kb_file, "--map", "amount=입금액")
    assert result.exit_code == 1
    assert "Unknown mapping field" in result.output


def test_import_unknown_row(cli_runner, initialized, kb_file):
    result = run(cli_runner, initialized, "import", kb_file, "--exclude", "42", "--yes")
    assert result.exit_code == 1
    assert "Row 42 not found" in result.output


def test_import_unsupported_file(cli_runner, initialized, tmp_path):
    path = tmp_path / "statement.pdf"
    path.write_bytes(b"%PDF")
    result = run(cli_runner, initialized, "import", str(path))
    assert result.exit_code == 1
    assert "Unsupported file type" in result.output


def test_batches_are_tenant_scoped(cli_runner, initialized, kb_file):
    run(cli_runner, initialized, "import", kb_file, "--yes")

    result = run(cli_runner, initialized, "--tenant", "other", "batches")
    assert result.exit_code == 0
    assert "No import batches found." in result.output


def test_batches_since(cli_runner, initialized, kb_file):
    run(cli_runner, initialized, "import", kb_file, "--yes")

    result = run(cli_runner, initialized, "batches", "--since", "yesterday")
    assert "march.csv" in result.output

    result = run(cli_runner, initialized, "batches", "--since", "2999-01-01")
    assert "No import batches found." in result.output

    result = run(cli_runner, initialized, "batches", "--since", "not a date")
    assert result.exit_code == 1
    assert "Invalid date" in result.output


def test_undo_unknown_batch(cli_runner, temp_db):
    result = run(cli_runner, temp_db, "undo", "missing", "--yes")
    assert result.exit_code == 1
    assert "Import batch 'missing' not found" in result.output
