"""CLI command reconciling the checker issue of one repository."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..checker.repository import check_repository, parse_repository
from ..checker.source import FindingSource, HttpCheckerSource, JsonFileCheckerSource
from ..config import CheckbotSettings
from ..errors import CheckbotConfigError, TrackingStoreError, TransientFetchError
from ..github_client.client import GitHubClient
from ..github_client.store import GitHubIssueStore
from ..storage.statistics import StatisticsStore
from ..tracking.decision import DecisionPolicy
from ..tracking.models import LifecycleState
from ..tracking.reconciler import ReconcileOutcome
from .logs import configure_logging
from .options import (
    CHECKER_URL_OPTION,
    CLEANUP_OPTION,
    DEBUG_OPTION,
    DRY_RUN_OPTION,
    ERRORS_ONLY_OPTION,
    RECHECK_OPTION,
    RECREATE_OPTION,
    RESULTS_FILE_OPTION,
    STATISTICS_DIR_OPTION,
    SUGGESTIONS_OPTION,
    TOKEN_OPTION,
)

console = Console()


def check_repository_command(
    repository: str = typer.Argument(
        ..., help="Repository as owner/repo or GitHub URL"
    ),
    dry_run: bool = DRY_RUN_OPTION,
    recreate: bool = RECREATE_OPTION,
    recheck: bool = RECHECK_OPTION,
    errors_only: bool = ERRORS_ONLY_OPTION,
    suggestions: bool = SUGGESTIONS_OPTION,
    cleanup: bool = CLEANUP_OPTION,
    results_file: Path | None = RESULTS_FILE_OPTION,
    checker_url: str | None = CHECKER_URL_OPTION,
    statistics_dir: str | None = STATISTICS_DIR_OPTION,
    token: str | None = TOKEN_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Check a repository and create, update or close its tracking issue.

    Findings are compared with the checklist of the open tracking issue. New,
    reopened and fixed items are reported in a comment; the issue is closed once
    every finding is fixed.

    Examples:
        checkbot check-repository mcm1957/ioBroker.weblate-test --dry-run
        checkbot check-repository https://github.com/owner/ioBroker.x --recreate
        checkbot check-repository owner/ioBroker.x --results-file result.json
    """
    configure_logging(debug)

    if recheck and recreate:
        console.print(
            "❌ [red]Error: --recheck and --recreate must not be used together[/red]"
        )
        raise typer.Exit(1)

    try:
        subject = parse_repository(repository)
    except ValueError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    try:
        settings = CheckbotSettings.from_env()
    except ValueError as e:
        console.print(f"❌ [red]Error: invalid configuration: {e}[/red]")
        raise typer.Exit(1)
    if token:
        settings.github_token = token
    if checker_url:
        settings.checker_url = checker_url

    source: FindingSource
    if results_file is not None:
        source = JsonFileCheckerSource(results_file)
    elif settings.checker_url:
        source = HttpCheckerSource(settings.checker_url, settings.request_timeout)
    else:
        console.print(
            "❌ [red]Error: --results-file or --checker-url "
            "(CHECKBOT_CHECKER_URL) is required[/red]"
        )
        raise typer.Exit(1)

    if dry_run:
        console.print("⚠️  [yellow]Dry run - no issue will be changed[/yellow]")

    policy = DecisionPolicy(
        errors_only=errors_only,
        include_suggestions=suggestions,
        recreate=recreate,
        recheck=recheck,
    )

    try:
        client = GitHubClient(token=settings.require_token())
        store = GitHubIssueStore(client)
        outcome = asyncio.run(
            check_repository(
                subject,
                source,
                store,
                policy=policy,
                cleanup=cleanup,
                mention=settings.mention,
                statistics=StatisticsStore(statistics_dir) if statistics_dir else None,
                dry_run=dry_run,
            )
        )
    except (
        CheckbotConfigError,
        TransientFetchError,
        TrackingStoreError,
        ValueError,
    ) as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    _print_outcome(outcome)

    if outcome.failed:
        console.print(
            "❌ [red]Check failed to run meaningfully - tracking issue left "
            "untouched[/red]"
        )
        raise typer.Exit(1)

    console.print("✨ Processing completed")


def _print_outcome(outcome: ReconcileOutcome) -> None:
    """Show item states and the chosen action."""
    decision = outcome.decision
    if decision.items:
        items_table = Table(title=f"Items of {outcome.subject.full_name}")
        items_table.add_column("State", style="cyan")
        items_table.add_column("Item", style="white")
        styles = {
            LifecycleState.NEW: "yellow",
            LifecycleState.REOPENED: "red",
            LifecycleState.RESOLVED: "green",
            LifecycleState.OPEN: "white",
        }
        for item in decision.items:
            style = styles[item.state]
            items_table.add_row(f"[{style}]{item.state.value}[/{style}]", item.key)
        console.print(items_table)

    result_table = Table(title="Decision")
    result_table.add_column("Action", style="cyan")
    result_table.add_column("Issue", justify="right", style="yellow")
    result_table.add_column("Reason", style="green")
    issue = f"#{decision.issue_id}" if decision.issue_id else "-"
    result_table.add_row(decision.kind.value, issue, decision.reason)
    console.print(result_table)
