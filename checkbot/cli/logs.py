"""Logging setup for CLI commands."""

import logging

from rich.logging import RichHandler


def configure_logging(debug: bool = False) -> None:
    """Route log records through rich; ``debug`` enables DEBUG level."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, markup=False)],
        force=True,
    )
    # PyGitHub and httpx are chatty at DEBUG
    logging.getLogger("github").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
