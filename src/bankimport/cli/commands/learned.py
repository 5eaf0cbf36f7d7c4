"""Learned classification listing."""

import click
from bankimport.domain.directory import DirectoryService
from bankimport.domain.learning import LearningService


@click.command("learned")
@click.pass_context
def list_learned(ctx):
    """List descriptions the classifier has learned for this tenant."""
    tenant = ctx.obj["tenant"]
    entries = LearningService(ctx.obj["db"]).list_learned(tenant)
    if not entries:
        click.echo("No learned classifications yet.")
        return

    directory = DirectoryService(ctx.obj["db"], tenant)
    accounts = {a.id: a.display_name for a in directory.list_accounts(active_only=False)}
    projects = {p.id: p.name for p in directory.list_projects(active_only=False)}
    fund_sources = {f.id: f.name for f in directory.list_fund_sources()}

    click.echo(f"\n{'Uses':>5}  {'Account':<24} {'Project':<16} {'Fund source':<16} Description")
    click.echo("-" * 90)
    for entry in entries:
        account = accounts.get(entry.account_id, f"#{entry.account_id}")
        project = projects.get(entry.project_id, "") if entry.project_id else ""
        fund_source = fund_sources.get(entry.fund_source_id, "") if entry.fund_source_id else ""
        click.echo(
            f"{entry.usage_count:>5}  {account[:24]:<24} {project[:16]:<16} "
            f"{fund_source[:16]:<16} {entry.description}"
        )


def register_commands(cli):
    """Register learned command with main CLI."""
    cli.add_command(list_learned)
