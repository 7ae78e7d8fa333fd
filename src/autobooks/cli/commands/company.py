"""Company and fiscal period commands."""

import click
from autobooks.cli.company_resolution import resolve_company_or_exit
from autobooks.cli.error_handling import handle_domain_error
from autobooks.domain.company import CompanyService
from autobooks.utils.date_parser import parse_date


@click.group()
def company_group():
    """Manage companies."""
    pass


@company_group.command("add")
@click.argument("name", metavar="COMPANY_NAME")
@click.pass_context
def add_company(ctx, name: str):
    """Create a new company.

    Examples:
        autobooks company add "Xinghizana Group"
    """
    service = CompanyService(ctx.obj["db"])
    try:
        company_id = service.create_company(name)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created company '{name.strip()}' (ID: {company_id})")


@company_group.command("list")
@click.pass_context
def list_companies(ctx):
    """List all companies."""
    service = CompanyService(ctx.obj["db"])

    companies = service.list_companies()
    if not companies:
        click.echo("No companies found.")
        return

    click.echo("\nCompanies:")
    click.echo("-" * 60)
    for company in companies:
        click.echo(f"ID: {company.id:3d} | {company.name}")


@click.group()
def period_group():
    """Manage fiscal periods."""
    pass


@period_group.command("add")
@click.argument("name", metavar="PERIOD_NAME")
@click.option("--company", required=True, help="Company name or ID")
@click.option("--start", "start", required=True, help="First day of the period (YYYY-MM-DD)")
@click.option("--end", "end", required=True, help="Last day of the period (YYYY-MM-DD)")
@click.pass_context
def add_period(ctx, name: str, company: str, start: str, end: str):
    """Create a fiscal period for a company.

    Examples:
        autobooks period add FY2024-2025 --company 1 --start 2024-03-01 --end 2025-02-28
    """
    service = CompanyService(ctx.obj["db"])
    company_id = resolve_company_or_exit(ctx, service, company)

    try:
        start_date = parse_date(start)
        end_date = parse_date(end)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        period_id = service.create_fiscal_period(company_id, name, start_date, end_date)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created fiscal period '{name}' (ID: {period_id}) from {start_date} to {end_date}")


@period_group.command("list")
@click.option("--company", required=True, help="Company name or ID")
@click.pass_context
def list_periods(ctx, company: str):
    """List the fiscal periods of a company."""
    service = CompanyService(ctx.obj["db"])
    company_id = resolve_company_or_exit(ctx, service, company)

    periods = service.list_fiscal_periods(company_id)
    if not periods:
        click.echo("No fiscal periods found.")
        return

    click.echo("\nFiscal periods:")
    click.echo("-" * 60)
    for period in periods:
        click.echo(f"ID: {period.id:3d} | {period.name:15s} | {period.start_date} to {period.end_date}")


def register_commands(cli):
    """Register company and period commands with main CLI."""
    cli.add_command(company_group, name="company")
    cli.add_command(period_group, name="period")
