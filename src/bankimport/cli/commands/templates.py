"""Bank template listing."""

import click
from bankimport.domain.templates import list_templates


@click.command("templates")
@click.option("--columns", is_flag=True, help="Show the header names recognized for each field")
def show_templates(columns: bool):
    """List the bank export layouts that are recognized automatically."""
    for template in list_templates():
        click.echo(f"{template.id:<10} {template.name_ko} ({template.name})")
        if columns:
            for field_name, synonyms in template.columns.items():
                click.echo(f"    {field_name:<12} {', '.join(synonyms)}")


def register_commands(cli):
    """Register templates command with main CLI."""
    cli.add_command(show_templates)
