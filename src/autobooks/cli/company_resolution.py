"""CLI helpers for company and fiscal period resolution."""

from __future__ import annotations

from typing import Optional

import click
from autobooks.cli.error_handling import handle_domain_error
from autobooks.domain.company import CompanyService
from autobooks.utils.company_resolver import resolve_company


def resolve_company_or_exit(
    ctx: click.Context, company_service: CompanyService, company: str | int
) -> int:
    """Resolve company name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_company(company_service, company)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_period_or_exit(
    ctx: click.Context, company_service: CompanyService, company_id: int, period: Optional[str]
) -> Optional[int]:
    """Resolve an optional fiscal period name or ID, or exit with a CLI error."""
    if period is None:
        return None
    try:
        return company_service.find_fiscal_period(company_id, period).id
    except ValueError as exc:
        handle_domain_error(ctx, exc)
