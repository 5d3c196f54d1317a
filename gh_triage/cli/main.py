"""Main CLI entry point."""

import typer
from dotenv import load_dotenv
from rich.console import Console

from .logs import logs
from .run import close_issues, close_prs, lock_issues, show_settings

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="github-triage",
    help="Close and lock stale GitHub issues and pull requests",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


# All commands including main command support -h shorthand via context_settings


app.command(
    name="close-issues", context_settings={"help_option_names": ["-h", "--help"]}
)(close_issues)
app.command(
    name="close-prs", context_settings={"help_option_names": ["-h", "--help"]}
)(close_prs)
app.command(
    name="lock-issues", context_settings={"help_option_names": ["-h", "--help"]}
)(lock_issues)
app.command(
    name="settings", context_settings={"help_option_names": ["-h", "--help"]}
)(show_settings)
app.command(name="logs", context_settings={"help_option_names": ["-h", "--help"]})(
    logs
)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from gh_triage import __version__

    console.print(f"GitHub Triage v{__version__}")


if __name__ == "__main__":
    app()
