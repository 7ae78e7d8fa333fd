"""Add transaction command."""

import click
from autobooks.cli.company_resolution import resolve_company_or_exit, resolve_period_or_exit
from autobooks.cli.error_handling import handle_domain_error
from autobooks.domain.company import CompanyService
from autobooks.domain.transaction import TransactionService
from autobooks.utils.date_parser import parse_date
from autobooks.utils.amount_parser import parse_amount


@click.command("add")
@click.option("--company", required=True, help="Company name or ID")
@click.option("--period", required=True, help="Fiscal period name or ID")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--description", required=True, help="Bank statement description")
@click.option("--debit", help="Amount paid out of the bank account (e.g., 1250.00)")
@click.option("--credit", help="Amount paid into the bank account (e.g., 1250.00)")
@click.option("--reference", help="Bank reference")
@click.pass_context
def add_transaction(
    ctx,
    company: str,
    period: str,
    date: str,
    description: str,
    debit: str | None,
    credit: str | None,
    reference: str | None,
):
    """Add an unclassified bank transaction manually.

    Exactly one of --debit and --credit must be given.

    Examples:
        autobooks add --company 1 --period FY2024 --date 2024-03-05 --description "INSURANCE PREMIUM SANTAM" --debit 850.00
        autobooks add --company 1 --period FY2024 --date 2024-03-06 --description "COROBRIK PAYMENT" --credit 12000
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    company_service = CompanyService(db)

    company_id = resolve_company_or_exit(ctx, company_service, company)
    period_id = resolve_period_or_exit(ctx, company_service, company_id, period)

    if (debit is None) == (credit is None):
        click.echo("Error: Provide exactly one of --debit and --credit", err=True)
        ctx.exit(1)

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        debit_amount = parse_amount(debit) if debit is not None else None
        credit_amount = parse_amount(credit) if credit is not None else None
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        transaction_id = transaction_service.create_transaction(
            company_id=company_id,
            fiscal_period_id=period_id,
            date=txn_date,
            description=description,
            debit_amount=debit_amount,
            credit_amount=credit_amount,
            reference=reference,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Date: {txn_date}")
    click.echo(f"  Description: {description}")
    if debit_amount is not None:
        click.echo(f"  Debit: {debit_amount:,.2f}")
    else:
        click.echo(f"  Credit: {credit_amount:,.2f}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
