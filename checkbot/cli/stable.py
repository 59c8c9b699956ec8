"""CLI command maintaining stable promotion request issues."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from ..config import CheckbotSettings
from ..errors import CheckbotConfigError, TrackingStoreError, TransientFetchError
from ..github_client.client import GitHubClient
from ..github_client.store import GitHubIssueStore
from ..promotion.feeds import FeedContext, HttpMetricsFeed
from ..promotion.reconcile import PromotionReport, run_promotion_pass
from .logs import configure_logging
from .options import (
    ADAPTER_OPTION,
    DEBUG_OPTION,
    DELAY_OPTION,
    DRY_RUN_OPTION,
    RECREATE_OPTION,
    TOKEN_OPTION,
)

console = Console()


def check_stable_command(
    adapter: list[str] | None = ADAPTER_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    recreate: bool = RECREATE_OPTION,
    delay: float = DELAY_OPTION,
    token: str | None = TOKEN_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Propose adapter releases for the stable repository.

    Every adapter of the latest channel is evaluated. Request issues are opened
    for new candidates, replaced when the proposed version changes and closed
    once the request is no longer valid.

    Examples:
        checkbot check-stable --dry-run
        checkbot check-stable --adapter weblate-test --recreate
    """
    configure_logging(debug)

    try:
        settings = CheckbotSettings.from_env()
    except ValueError as e:
        console.print(f"❌ [red]Error: invalid configuration: {e}[/red]")
        raise typer.Exit(1)
    if token:
        settings.github_token = token

    if dry_run:
        console.print("⚠️  [yellow]Dry run - no issue will be changed[/yellow]")

    try:
        client = GitHubClient(token=settings.require_token())
        store = GitHubIssueStore(client)
        feeds = FeedContext(HttpMetricsFeed(settings))
        report = asyncio.run(
            run_promotion_pass(
                feeds,
                store,
                adapters=adapter or None,
                recreate=recreate,
                mention=settings.mention,
                delay=delay,
                dry_run=dry_run,
            )
        )
    except (CheckbotConfigError, TransientFetchError, TrackingStoreError) as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    _print_report(report)

    if report.failed:
        console.print(
            f"❌ [red]{len(report.failures)} subject(s) failed, see log for "
            f"details[/red]"
        )
        raise typer.Exit(1)

    console.print("✨ Processing completed")


def _print_report(report: PromotionReport) -> None:
    console.print(f"📊 {report.candidates} candidate(s) found")

    for key, message in report.failures.items():
        console.print(f"❌ [red]{key}: {message}[/red]")

    changed = [outcome for outcome in report.outcomes if outcome.decision.mutates]
    if not changed:
        console.print("No request issue needs changes")
        return

    table = Table(title="Request issues")
    table.add_column("Repository", style="cyan")
    table.add_column("Kind", style="white")
    table.add_column("Action", style="yellow")
    table.add_column("Issue", justify="right")
    table.add_column("Reason", style="green")
    for outcome in changed:
        decision = outcome.decision
        table.add_row(
            outcome.subject.full_name,
            outcome.subject.kind.value,
            decision.kind.value,
            f"#{decision.issue_id}" if decision.issue_id else "-",
            decision.reason,
        )
    console.print(table)
