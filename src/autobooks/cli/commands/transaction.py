"""Transaction listing commands."""

import click
from autobooks.cli.company_resolution import resolve_company_or_exit, resolve_period_or_exit
from autobooks.domain.company import CompanyService
from autobooks.domain.transaction import TransactionService


def format_amount(transaction) -> str:
    """Render the amount with its side, debits negative."""
    if transaction.is_debit:
        return f"{-transaction.amount:>12,.2f}"
    return f"{transaction.amount:>12,.2f}"


@click.group()
def transaction_group():
    """Inspect transactions."""
    pass


@transaction_group.command("list")
@click.option("--company", required=True, help="Company name or ID")
@click.option("--period", help="Fiscal period name or ID")
@click.option("--unclassified", is_flag=True, help="Only show transactions without an account")
@click.option("--limit", type=int, help="Maximum number of transactions to show")
@click.pass_context
def list_transactions(ctx, company: str, period: str | None, unclassified: bool, limit: int | None):
    """List transactions, newest first.

    Examples:
        autobooks transaction list --company 1
        autobooks transaction list --company "Xinghizana Group" --unclassified --limit 20
    """
    db = ctx.obj["db"]
    company_service = CompanyService(db)
    service = TransactionService(db)

    company_id = resolve_company_or_exit(ctx, company_service, company)
    period_id = resolve_period_or_exit(ctx, company_service, company_id, period)

    transactions = service.list_transactions(
        company_id=company_id, fiscal_period_id=period_id, unclassified=unclassified, limit=limit
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':>5s} | {'Date':10s} | {'Amount':>12s} | {'Account':25s} | Description")
    click.echo("-" * 100)
    for txn in transactions:
        account = f"{txn.account_code} - {txn.account_name}" if txn.is_classified else "UNCATEGORIZED"
        click.echo(
            f"{txn.id:5d} | {txn.date} | {format_amount(txn)} | {account[:25]:25s} | {txn.description}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
