"""Import batch history and undo commands."""

import click
from bankimport.cli.error_handling import handle_domain_error
from bankimport.domain.batch import ImportBatchService
from bankimport.domain.errors import DomainError
from bankimport.utils.date_parser import parse_date


@click.command("batches")
@click.option("--since", help="Only batches created on or after this date (e.g. 2024-01-01, 'last month')")
@click.pass_context
def list_batches(ctx, since: str):
    """List import batches, newest first."""
    service = ImportBatchService(ctx.obj["db"])

    since_date = None
    if since:
        try:
            since_date = parse_date(since)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    batches = service.list_batches(ctx.obj["tenant"], since=since_date)
    if not batches:
        click.echo("No import batches found.")
        return

    click.echo(
        f"\n{'Batch':<34} {'Created':<17} {'Status':<11} "
        f"{'OK':>5} {'Dup':>5} {'Fail':>5}  File"
    )
    click.echo("-" * 100)
    for batch in batches:
        click.echo(
            f"{batch.id:<34} {batch.created_at:%Y-%m-%d %H:%M} {batch.status.value:<11} "
            f"{batch.success_count:>5} {batch.duplicate_count:>5} {batch.failed_count:>5}  "
            f"{batch.filename or ''}"
        )


@click.command("undo")
@click.argument("batch_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def undo_batch(ctx, batch_id: str, yes: bool):
    """Delete every transaction imported by a batch."""
    service = ImportBatchService(ctx.obj["db"])
    tenant = ctx.obj["tenant"]

    try:
        batch = service.get_batch(tenant, batch_id)
        if not yes and not click.confirm(
            f"Delete {len(batch.transaction_ids)} transactions imported from "
            f"{batch.filename or 'unknown file'}?",
            default=False,
        ):
            click.echo("Undo cancelled.")
            return
        deleted = service.undo(tenant, batch_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Undid batch {batch_id}: {deleted} transactions deleted.")


def register_commands(cli):
    """Register batch commands with main CLI."""
    cli.add_command(list_batches)
    cli.add_command(undo_batch)
