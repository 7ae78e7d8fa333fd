"""Main CLI entry point."""

import click
from autobooks.config import DEFAULT_BANK_ACCOUNT_CODE, DEFAULT_LOG_LEVEL, Settings
from autobooks.database.factories import create_sqlite_database
from autobooks.logging_setup import configure_logging

# Import and register all commands at module level
from autobooks.cli.commands import (
    company,
    account,
    add,
    transaction,
    classify,
    rules,
    summary,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides AUTOBOOKS_DB_PATH environment variable)",
    envvar="AUTOBOOKS_DB_PATH",
)
@click.option(
    "--bank-account-code",
    help=f"Ledger code of the bank account postings balance against (default: {DEFAULT_BANK_ACCOUNT_CODE})",
    envvar="AUTOBOOKS_BANK_ACCOUNT_CODE",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help=f"Logging level (default: {DEFAULT_LOG_LEVEL})",
    envvar="AUTOBOOKS_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, bank_account_code: str | None, log_level: str | None):
    """Autobooks - Bank transaction classification and ledger posting.

    Classify bank transactions to ledger accounts, learn matching rules from
    each decision and post a balanced journal entry for every classified
    transaction.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        settings = Settings.from_env(
            database_path=db_path,
            bank_account_code=bank_account_code,
            log_level=log_level,
        )
        configure_logging(settings.log_level)

        db = create_sqlite_database(database_path=settings.database_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["settings"] = settings


# Register all commands
company.register_commands(cli)
account.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
classify.register_commands(cli)
rules.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
