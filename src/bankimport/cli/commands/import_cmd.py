"""Bank export import command."""

import click
from bankimport.cli.error_handling import (
    handle_domain_error,
    parse_assignment,
    parse_row_assignment,
)
from bankimport.domain.entities import MAPPING_FIELDS, ClassifiedTransaction
from bankimport.domain.errors import DomainError, MappingValidationError
from bankimport.domain.import_session import ImportSession


def format_amount(amount: float) -> str:
    return f"{amount:,.0f}"


def print_mapping(session: ImportSession) -> None:
    """Print detected template and column mapping."""
    click.echo(f"\nDetected format: {session.bank_name} ({session.bank_type})")
    click.echo("Column mapping:")
    for field_name, header in session.mapping.as_dict().items():
        click.echo(f"  {field_name:<12} -> {header if header else '(not mapped)'}")


def print_classification(session: ImportSession) -> None:
    """Print classification summary and one line per row."""
    summary = session.summary
    click.echo(
        f"\n{summary.total_count} transactions: "
        f"{summary.income_count} income ({format_amount(summary.total_income)}), "
        f"{summary.expense_count} expense ({format_amount(summary.total_expense)})"
    )
    click.echo(
        f"Confidence: {summary.high_confidence_count} high, "
        f"{summary.medium_confidence_count} medium, "
        f"{summary.low_confidence_count} low "
        f"({summary.learned_count} from learned classifications)"
    )

    click.echo(
        f"\n{'Row':<5} {'':<2} {'Date':<12} {'Type':<8} {'Amount':>14}  "
        f"{'Account':<20} {'Conf.':<7} Description"
    )
    click.echo("-" * 100)
    for txn in session.final_transactions(selected_only=False):
        print_row(txn, selected=txn.row_index in session.selected)


def print_row(txn: ClassifiedTransaction, selected: bool) -> None:
    marker = "x" if selected else "-"
    account = txn.account_name or "(none)"
    learned = "*" if txn.is_learned else ""
    extras = [name for name in (txn.project_name, txn.fund_source_name) if name]
    extra_str = f" [{', '.join(extras)}]" if extras else ""
    click.echo(
        f"{txn.row_index:<5} {marker:<2} {txn.date:<12} {txn.type.value.lower():<8} "
        f"{format_amount(txn.amount):>14}  {account[:20]:<20} "
        f"{txn.confidence.value + learned:<7} {txn.description}{extra_str}"
    )


@click.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--map",
    "mappings",
    multiple=True,
    metavar="FIELD=HEADER",
    help=f"Override the column for a field ({', '.join(MAPPING_FIELDS)}); empty HEADER unmaps it",
)
@click.option("--exclude", multiple=True, type=int, metavar="ROW", help="Leave a row out of the import")
@click.option("--set-account", multiple=True, metavar="ROW=ID", help="Assign a ledger account to a row")
@click.option("--set-project", multiple=True, metavar="ROW=ID", help="Assign a project to a row")
@click.option("--set-fund-source", multiple=True, metavar="ROW=ID", help="Assign a fund source to a row")
@click.option(
    "--learn/--no-learn",
    default=True,
    help="Remember the confirmed classifications for future imports (default: learn)",
)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.option("--dry-run", is_flag=True, help="Show the classification without importing")
@click.pass_context
def import_file(
    ctx,
    file: str,
    mappings: tuple[str, ...],
    exclude: tuple[int, ...],
    set_account: tuple[str, ...],
    set_project: tuple[str, ...],
    set_fund_source: tuple[str, ...],
    learn: bool,
    yes: bool,
    dry_run: bool,
):
    """Import transactions from a bank export (CSV, TSV or XLSX).

    The bank is detected from the header row and every row is classified
    against the tenant's chart of accounts. Rows are listed with their row
    number, which --exclude and the --set-* options refer to.
    """
    session = ImportSession(ctx.obj["db"], ctx.obj["tenant"])

    try:
        session.upload(file)
        click.echo(f"Read {len(session.rows)} rows from {session.filename}")

        if mappings:
            fields = {}
            for value in mappings:
                field_name, header = parse_assignment(value, "--map")
                fields[field_name] = header or None
            session.update_mapping(**fields)
        print_mapping(session)

        try:
            session.classify()
        except MappingValidationError as e:
            click.echo(f"Available columns: {', '.join(session.headers)}", err=True)
            handle_domain_error(ctx, e)

        for row_index in exclude:
            session.deselect_row(row_index)
        for value in set_account:
            row_index, account_id = parse_row_assignment(value, "--set-account")
            session.edit_row(row_index, account_id=account_id)
        for value in set_project:
            row_index, project_id = parse_row_assignment(value, "--set-project")
            session.edit_row(row_index, project_id=project_id)
        for value in set_fund_source:
            row_index, fund_source_id = parse_row_assignment(value, "--set-fund-source")
            session.edit_row(row_index, fund_source_id=fund_source_id)

        print_classification(session)

        if dry_run:
            click.echo("\nDry run: nothing was imported.")
            return

        selected = len(session.selected)
        if not yes and not click.confirm(f"\nImport {selected} transactions?", default=True):
            click.echo("Import cancelled.")
            return

        batch = session.confirm(save_classifications=learn)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Batch: {batch.id}")
    click.echo(f"  Imported: {batch.success_count} transactions")
    click.echo(f"  Skipped: {batch.duplicate_count} duplicates")
    if batch.failed_count:
        click.echo(f"  Failed: {batch.failed_count}")
    for error in batch.errors:
        click.echo(f"    Row {error.row_index}: {error.error}", err=True)
    click.echo(f"\nRun 'bankimport undo {batch.id}' to revert this import.")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_file)
