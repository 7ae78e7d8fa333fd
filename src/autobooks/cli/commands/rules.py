"""Learned rule commands."""

import click
from autobooks.cli.company_resolution import resolve_company_or_exit
from autobooks.domain.company import CompanyService


@click.command("rules")
@click.option("--company", required=True, help="Company name or ID")
@click.pass_context
def list_rules(ctx, company: str):
    """List the classification rules learned for a company, most used first."""
    db = ctx.obj["db"]
    company_id = resolve_company_or_exit(ctx, CompanyService(db), company)

    rules = db.list_rules(company_id=company_id)
    if not rules:
        click.echo("No rules learned yet.")
        return

    click.echo(f"\n{'ID':>4s} | {'Uses':>4s} | {'Account':30s} | Keywords")
    click.echo("-" * 90)
    for rule in rules:
        account = f"{rule.account_code} - {rule.account_name}"
        click.echo(f"{rule.id:4d} | {rule.usage_count:4d} | {account[:30]:30s} | {rule.signature}")


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(list_rules)
