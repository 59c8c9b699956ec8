"""Standardized CLI option definitions for consistent shorthand mappings.

This module provides centralized option definitions to ensure consistent
shorthand options across all commands and prevent future drift.
"""

import typer

# Authentication options
TOKEN_OPTION = typer.Option(
    None,
    "--token",
    "-t",
    help="GitHub API token (defaults to CHECKBOT_GITHUB_TOKEN or GITHUB_TOKEN)",
)

# Behavior options - control command behavior
DRY_RUN_OPTION = typer.Option(
    False,
    "--dry-run",
    "--dry",
    "-d",
    help="Show every decision and rendered issue without changing anything",
)

RECREATE_OPTION = typer.Option(
    False,
    "--recreate",
    help="Close the current tracking issue and open a fresh one",
)

RECHECK_OPTION = typer.Option(
    False,
    "--recheck",
    help="Update the tracking issue and comment even if nothing changed",
)

DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")

# Checker policy options
ERRORS_ONLY_OPTION = typer.Option(
    False,
    "--errors-only",
    "--erroronly",
    help="Only open a new issue when errors are found",
)

SUGGESTIONS_OPTION = typer.Option(
    False,
    "--suggestions",
    help="Also open a new issue when only suggestions are found",
)

CLEANUP_OPTION = typer.Option(
    False,
    "--cleanup",
    help="Drop items fixed in earlier runs from the issue body",
)

# Checker input options
RESULTS_FILE_OPTION = typer.Option(
    None,
    "--results-file",
    help="Read checker results from a JSON file instead of the checker endpoint",
)

CHECKER_URL_OPTION = typer.Option(
    None,
    "--checker-url",
    help="Repository checker endpoint (defaults to CHECKBOT_CHECKER_URL)",
)

STATISTICS_DIR_OPTION = typer.Option(
    None,
    "--statistics-dir",
    help="Directory for per-adapter finding statistics (skipped if not set)",
)

# Promotion options
ADAPTER_OPTION = typer.Option(
    None,
    "--adapter",
    "-a",
    help="Only process this adapter (can be used multiple times)",
)

DELAY_OPTION = typer.Option(
    0.0, "--delay", help="Delay after each changed subject in seconds"
)
