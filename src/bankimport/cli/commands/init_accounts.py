"""Initialize the default chart of accounts."""

import click
from bankimport.domain.directory import DEFAULT_CHART_OF_ACCOUNTS, DirectoryService


@click.command("init-accounts")
@click.option("--force", is_flag=True, help="Add missing default accounts even if accounts exist")
@click.pass_context
def init_accounts(ctx, force: bool):
    """Initialize the tenant with the default chart of accounts."""
    db = ctx.obj["db"]
    service = DirectoryService(db, ctx.obj["tenant"])

    existing = service.list_accounts(active_only=False)
    if existing and not force:
        click.echo("Accounts already exist. Use --force to add missing defaults.")
        return

    click.echo(f"Creating default chart of accounts ({len(DEFAULT_CHART_OF_ACCOUNTS)} accounts)...")
    created, skipped = service.seed_default_accounts()

    if skipped == 0:
        click.echo(f"Successfully created {created} accounts.")
    else:
        click.echo(f"Created {created} accounts, {skipped} already existed.")


def register_commands(cli):
    """Register init-accounts command with main CLI."""
    cli.add_command(init_accounts)
