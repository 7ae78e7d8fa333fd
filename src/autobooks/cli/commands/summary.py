"""Summary commands."""

import click
from autobooks.cli.company_resolution import resolve_company_or_exit, resolve_period_or_exit
from autobooks.cli.error_handling import handle_domain_error
from autobooks.domain.company import CompanyService
from autobooks.domain.summary import SummaryService


@click.command("summary")
@click.option("--company", required=True, help="Company name or ID")
@click.option("--period", help="Fiscal period name or ID")
@click.option("--accounts", is_flag=True, help="Also show journal activity per ledger account")
@click.pass_context
def show_summary(ctx, company: str, period: str | None, accounts: bool):
    """Show classification progress for a company.

    Examples:
        autobooks summary --company 1
        autobooks summary --company 1 --period FY2024 --accounts
    """
    db = ctx.obj["db"]
    company_service = CompanyService(db)
    service = SummaryService(db)

    company_id = resolve_company_or_exit(ctx, company_service, company)
    period_id = resolve_period_or_exit(ctx, company_service, company_id, period)

    try:
        summary = service.get_classification_summary(company_id, fiscal_period_id=period_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo("\nClassification summary:")
    click.echo("-" * 40)
    click.echo(f"Total transactions:  {summary.total:6d}")
    click.echo(f"Classified:          {summary.classified:6d}")
    click.echo(f"  Posted:            {summary.posted:6d}")
    click.echo(f"Unclassified:        {summary.unclassified:6d}")
    click.echo(f"Progress:            {summary.percentage:5.1f}%")

    if not accounts:
        return

    allocations = service.get_account_allocations(company_id, fiscal_period_id=period_id)
    click.echo("\nAccount allocation:")
    click.echo("-" * 90)
    if not allocations:
        click.echo("No journal entries posted yet.")
        return
    click.echo(f"{'Code':10s} | {'Account':30s} | {'Lines':>5s} | {'Debits':>12s} | {'Credits':>12s}")
    for allocation in allocations:
        click.echo(
            f"{allocation.account_code:10s} | {allocation.account_name[:30]:30s} | "
            f"{allocation.line_count:5d} | {allocation.total_debits:12,.2f} | {allocation.total_credits:12,.2f}"
        )


def register_commands(cli):
    """Register summary commands with main CLI."""
    cli.add_command(show_summary)
