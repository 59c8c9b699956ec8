"""Main CLI entry point."""

import typer
from dotenv import load_dotenv
from rich.console import Console

from .check import check_repository_command
from .stable import check_stable_command

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="checkbot",
    help="Track repository checker findings and stable promotion requests as issues",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


app.command(
    name="check-repository", context_settings={"help_option_names": ["-h", "--help"]}
)(check_repository_command)
app.command(
    name="check-stable", context_settings={"help_option_names": ["-h", "--help"]}
)(check_stable_command)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from checkbot import __version__

    console.print(f"checkbot v{__version__}")


if __name__ == "__main__":
    app()
