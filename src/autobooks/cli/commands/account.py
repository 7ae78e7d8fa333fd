"""Chart of accounts commands."""

import click
from autobooks.cli.error_handling import handle_domain_error
from autobooks.domain.knowledge_base import StandardKnowledgeBase
from autobooks.domain.ledger_account import LedgerAccountService


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("init")
@click.pass_context
def init_accounts(ctx):
    """Create the standard chart of accounts.

    Accounts whose code already exists are skipped, so this is safe to run
    more than once.

    Examples:
        autobooks account init
    """
    service = LedgerAccountService(ctx.obj["db"])
    try:
        created = service.initialize_from_knowledge_base(StandardKnowledgeBase())
    except ValueError as e:
        handle_domain_error(ctx, e)

    if created == 0:
        click.echo("Chart of accounts already initialized.")
    else:
        click.echo(f"Created {created} standard account{'s' if created != 1 else ''}")


@account_group.command("add")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option("--category", help="Category label (e.g., 'Operating Expenses')")
@click.pass_context
def add_account(ctx, code: str, name: str, category: str | None):
    """Create a ledger account.

    Examples:
        autobooks account add 8810 "Vehicle Insurance" --category "Operating Expenses"
    """
    service = LedgerAccountService(ctx.obj["db"])
    try:
        account_id = service.create_account(code=code, name=name, category=category)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created ledger account {code} - {name} (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List the chart of accounts."""
    service = LedgerAccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No ledger accounts found. Run 'autobooks account init' to create the standard chart.")
        return

    click.echo("\nChart of accounts:")
    click.echo("-" * 80)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        click.echo(f"{acc.code:10s} | {acc.name:35s} | {acc.category or '-'}{status}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
