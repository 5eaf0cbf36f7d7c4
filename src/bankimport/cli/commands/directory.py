"""Account, project and fund source management commands."""

import click
from bankimport.cli.error_handling import handle_domain_error
from bankimport.domain.directory import DirectoryService
from bankimport.domain.entities import AccountType
from bankimport.domain.errors import DomainError


def _service(ctx) -> DirectoryService:
    return DirectoryService(ctx.obj["db"], ctx.obj["tenant"])


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include inactive accounts")
@click.pass_context
def list_accounts(ctx, show_all: bool):
    """List ledger accounts."""
    accounts = _service(ctx).list_accounts(active_only=not show_all)
    if not accounts:
        click.echo("No accounts found. Run 'init-accounts' to create the default chart of accounts.")
        return

    click.echo(f"\n{'ID':<5} {'Code':<6} {'Type':<10} Name")
    click.echo("-" * 50)
    for account in accounts:
        suffix = "" if account.is_active else " (inactive)"
        click.echo(
            f"{account.id:<5} {account.code:<6} {account.account_type.value:<10} {account.name}{suffix}"
        )


@account_group.command("add")
@click.argument("code")
@click.argument("name")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    default=AccountType.EXPENSE.value,
    help="Account type (default: expense)",
)
@click.pass_context
def add_account(ctx, code: str, name: str, account_type: str):
    """Create a ledger account."""
    try:
        account_id = _service(ctx).create_account(code, name, AccountType(account_type.upper()))
        click.echo(f"Created account '{code} {name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@click.group()
def project_group():
    """Manage projects."""
    pass


@project_group.command("list")
@click.pass_context
def list_projects(ctx):
    """List active projects."""
    projects = _service(ctx).list_projects()
    if not projects:
        click.echo("No projects found.")
        return
    for project in projects:
        click.echo(f"{project.id:<5} {project.name}")


@project_group.command("add")
@click.argument("name")
@click.pass_context
def add_project(ctx, name: str):
    """Create a project."""
    try:
        project_id = _service(ctx).create_project(name)
        click.echo(f"Created project '{name}' (ID: {project_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@click.group()
def fund_source_group():
    """Manage fund sources."""
    pass


@fund_source_group.command("list")
@click.pass_context
def list_fund_sources(ctx):
    """List fund sources."""
    fund_sources = _service(ctx).list_fund_sources()
    if not fund_sources:
        click.echo("No fund sources found.")
        return
    for fund_source in fund_sources:
        click.echo(f"{fund_source.id:<5} {fund_source.name}")


@fund_source_group.command("add")
@click.argument("name")
@click.pass_context
def add_fund_source(ctx, name: str):
    """Create a fund source."""
    try:
        fund_source_id = _service(ctx).create_fund_source(name)
        click.echo(f"Created fund source '{name}' (ID: {fund_source_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register directory commands with main CLI."""
    cli.add_command(account_group, name="account")
    cli.add_command(project_group, name="project")
    cli.add_command(fund_source_group, name="fund-source")
