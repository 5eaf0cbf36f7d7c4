"""CLI error handling helpers."""

import click

from bankimport.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def parse_assignment(value: str, option: str) -> tuple[str, str]:
    """Split a KEY=VALUE option value.

    Raises:
        click.BadParameter: If the value has no '='
    """
    key, sep, rest = value.partition("=")
    if not sep or not key.strip():
        raise click.BadParameter(f"expected KEY=VALUE, got '{value}'", param_hint=option)
    return key.strip(), rest.strip()


def parse_row_assignment(value: str, option: str) -> tuple[int, int]:
    """Split a ROW=ID option value into integers.

    Raises:
        click.BadParameter: If either side is not an integer
    """
    row, target = parse_assignment(value, option)
    try:
        return int(row), int(target)
    except ValueError:
        raise click.BadParameter(f"expected ROW=ID with integers, got '{value}'", param_hint=option)
