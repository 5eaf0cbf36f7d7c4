"""Main CLI entry point."""

import click
from bankimport import __version__
from bankimport.config import (
    DB_PATH_ENV,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TENANT,
    LOG_LEVEL_ENV,
    TENANT_ENV,
)
from bankimport.database.factories import create_sqlite_database
from bankimport.log_config import setup_logging

# Import and register all commands at module level
from bankimport.cli.commands import (
    batch,
    directory,
    import_cmd,
    init_accounts,
    learned,
    templates,
)


@click.group()
@click.version_option(version=__version__, prog_name="bankimport")
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--tenant",
    default=DEFAULT_TENANT,
    show_default=True,
    help="Tenant (organization) ID",
    envvar=TENANT_ENV,
)
@click.option(
    "--log-level",
    default=DEFAULT_LOG_LEVEL,
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    envvar=LOG_LEVEL_ENV,
)
@click.pass_context
def cli(ctx, db_path: str | None, tenant: str, log_level: str):
    """Bankimport - bank statement import and classification.

    Import transaction exports from any bank, classify them against your
    chart of accounts and learn from the classifications you confirm.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level)
    ctx.obj["tenant"] = tenant

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
batch.register_commands(cli)
directory.register_commands(cli)
import_cmd.register_commands(cli)
init_accounts.register_commands(cli)
learned.register_commands(cli)
templates.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
