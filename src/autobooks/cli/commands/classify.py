"""Classification, posting recovery and suggestion commands."""

from typing import Optional, Sequence

import click
from autobooks.cli.company_resolution import resolve_company_or_exit, resolve_period_or_exit
from autobooks.cli.error_handling import handle_domain_error
from autobooks.domain.company import CompanyService
from autobooks.domain.engine import MAX_UNCLASSIFIED, ClassificationEngine
from autobooks.domain.entities import AccountSuggestion, CandidateMatch, Transaction
from autobooks.domain.errors import DomainError
from autobooks.domain.prompts import Prompter
from autobooks.domain.session import LAST_CHANGES_COUNT

SKIP_ANSWERS = ("s", "skip")
QUIT_ANSWERS = ("q", "quit")


class QuitRequested(Exception):
    """The operator asked to end the classification session."""


def _describe(transaction: Transaction) -> str:
    side = "Debit" if transaction.is_debit else "Credit"
    return f"[{transaction.id}] {transaction.date} {side} {transaction.amount:,.2f}  {transaction.description}"


class ClickPrompter(Prompter):
    """Prompter that asks the operator on the terminal."""

    def confirm_match(self, transaction: Transaction, candidate: CandidateMatch) -> bool:
        rule = candidate.rule
        click.echo(
            f"  Suggested: {rule.account_code} - {rule.account_name} "
            f"(confidence {candidate.confidence:.0%}, used {rule.usage_count}x)"
        )
        return click.confirm("  Apply this classification?", default=True)

    def ask_account(
        self, transaction: Transaction, suggestions: Sequence[AccountSuggestion]
    ) -> Optional[tuple[str, str]]:
        if suggestions:
            click.echo("  Suggestions:")
            for suggestion in suggestions:
                click.echo(f"    - {suggestion}")

        code = click.prompt(
            "  Account code (s=skip, q=quit)", default="", show_default=False
        ).strip()
        if code.lower() in QUIT_ANSWERS:
            raise QuitRequested()
        if code.lower() in SKIP_ANSWERS:
            return None
        name = click.prompt("  Account name", default="", show_default=False).strip()
        return code, name

    def confirm_propagation(self, pattern: str, transactions: Sequence[Transaction]) -> bool:
        click.echo(f"\n  {len(transactions)} similar unclassified transaction(s) match '{pattern}':")
        for transaction in transactions:
            click.echo(f"    {_describe(transaction)}")
        return click.confirm("  Classify them the same way?", default=False)

    def notify(self, message: str) -> None:
        click.echo(f"  {message}")


def _build_engine(ctx, prompter: Optional[Prompter] = None) -> ClassificationEngine:
    settings = ctx.obj["settings"]
    return ClassificationEngine(
        ctx.obj["db"],
        prompter=prompter,
        bank_account_code=settings.bank_account_code,
    )


@click.command("classify")
@click.option("--company", required=True, help="Company name or ID")
@click.option("--period", help="Fiscal period name or ID")
@click.option(
    "--limit",
    type=int,
    default=MAX_UNCLASSIFIED,
    show_default=True,
    help="Maximum number of transactions to review",
)
@click.pass_context
def classify_transactions(ctx, company: str, period: str | None, limit: int):
    """Review unclassified transactions interactively.

    Each transaction is matched against the learned rules. Confident matches
    are applied automatically, likely ones are offered for confirmation and
    the rest are classified by entering an account code and name. After each
    classification, similar unclassified transactions are offered the same
    account.

    Examples:
        autobooks classify --company 1
        autobooks classify --company "Xinghizana Group" --period FY2024 --limit 20
    """
    company_service = CompanyService(ctx.obj["db"])
    company_id = resolve_company_or_exit(ctx, company_service, company)
    period_id = resolve_period_or_exit(ctx, company_service, company_id, period)

    engine = _build_engine(ctx, prompter=ClickPrompter())
    pending = engine.list_unclassified(company_id, fiscal_period_id=period_id, limit=limit)
    if not pending:
        click.echo("No unclassified transactions found.")
        return

    click.echo(f"Reviewing {len(pending)} unclassified transaction(s)")
    classified = 0
    skipped = 0
    failed = 0
    try:
        for transaction in pending:
            # Propagation may already have classified this one
            current = engine.get_transaction(transaction.id, company_id)
            if current.is_classified:
                continue

            click.echo(f"\n{_describe(current)}")
            try:
                result = engine.classify_one(current, company_id)
            except DomainError as e:
                click.echo(f"Error: {e}", err=True)
                failed += 1
                continue

            if result is None:
                click.echo("  Skipped")
                skipped += 1
                continue

            classified += 1
            how = "auto-accepted" if result.auto_accepted else "classified"
            click.echo(f"  {how}: {result.account_code} - {result.account_name}")
            if result.journal_entry_id is None:
                click.echo("  Posting deferred; run 'autobooks recover' to post it")

            try:
                propagated = engine.propagate(current, result.account_code, result.account_name, company_id)
            except DomainError as e:
                click.echo(f"Error: {e}", err=True)
                continue
            if propagated:
                classified += propagated
                click.echo(f"  Applied to {propagated} similar transaction(s)")
    except QuitRequested:
        click.echo("\nSession ended by operator.")

    click.echo(f"\nSession summary: {classified} classified, {skipped} skipped, {failed} failed")
    recent = engine.session.last(LAST_CHANGES_COUNT)
    if recent:
        click.echo("Last changes:")
        for change in recent:
            click.echo(
                f"  [{change.transaction_id}] {change.description[:40]:40s} "
                f"{change.old_account} -> {change.new_account}"
            )


@click.command("classify-batch")
@click.argument("transaction_ids", nargs=-1, required=True, type=int)
@click.option("--company", required=True, help="Company name or ID")
@click.option("--code", "account_code", required=True, help="Ledger account code")
@click.option("--name", "account_name", required=True, help="Ledger account name")
@click.pass_context
def classify_batch(ctx, transaction_ids: tuple[int, ...], company: str, account_code: str, account_name: str):
    """Classify several transactions with the same account at once.

    Either all transactions are classified or, if any of them is unknown or
    already classified, none is.

    Examples:
        autobooks classify-batch 12 13 14 --company 1 --code 8200 --name "Rent Expense"
    """
    company_service = CompanyService(ctx.obj["db"])
    company_id = resolve_company_or_exit(ctx, company_service, company)

    engine = _build_engine(ctx)
    try:
        count = engine.classify_batch(list(transaction_ids), account_code, account_name, company_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Classified {count} transaction(s) as {account_code.strip()} - {account_name.strip()}")


@click.command("recover")
@click.option("--company", required=True, help="Company name or ID")
@click.pass_context
def recover_postings(ctx, company: str):
    """Post classified transactions that have no journal entry yet.

    Examples:
        autobooks recover --company 1
    """
    company_service = CompanyService(ctx.obj["db"])
    company_id = resolve_company_or_exit(ctx, company_service, company)

    engine = _build_engine(ctx)
    try:
        count = engine.recover_missing_postings(company_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if count == 0:
        click.echo("No missing postings found.")
    else:
        click.echo(f"Posted {count} missing journal entr{'ies' if count != 1 else 'y'}")


@click.command("suggest")
@click.argument("pattern")
@click.option("--company", help="Only use rules learned for this company (name or ID)")
@click.pass_context
def suggest_accounts(ctx, pattern: str, company: Optional[str]):
    """Suggest ledger accounts for a description pattern.

    Examples:
        autobooks suggest "SERVICE FEE"
        autobooks suggest "SERVICE FEE" --company 1
    """
    company_id = None
    if company is not None:
        company_id = resolve_company_or_exit(ctx, CompanyService(ctx.obj["db"]), company)

    engine = _build_engine(ctx)
    suggestions = engine.suggest(pattern, company_id=company_id)
    click.echo(f"Suggestions for '{pattern}':")
    for suggestion in suggestions:
        click.echo(f"  - {suggestion}")


def register_commands(cli):
    """Register classification commands with main CLI."""
    cli.add_command(classify_transactions)
    cli.add_command(classify_batch)
    cli.add_command(recover_postings)
    cli.add_command(suggest_accounts)
