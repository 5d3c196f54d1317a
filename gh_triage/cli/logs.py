"""CLI command listing previous runs."""

from rich.console import Console
from rich.table import Table

from ..config import PolicyKind
from ..storage.manager import RunLogWriter
from .options import LOG_DIR_OPTION, POLICY_FILTER_OPTION, SETTINGS_OPTION
from .run import resolve_settings

console = Console()


def logs(
    settings_path: str | None = SETTINGS_OPTION,
    log_dir: str | None = LOG_DIR_OPTION,
    policy: PolicyKind | None = POLICY_FILTER_OPTION,
) -> None:
    """Show previous runs recorded in the log folder."""
    settings = resolve_settings(settings_path, log_dir=log_dir)
    writer = RunLogWriter(settings.log_folder)
    runs = writer.list_runs(policy)

    if not runs:
        console.print(f"No runs found in {writer.base_path}.")
        return

    runs_table = Table(title="Previous Runs")
    runs_table.add_column("Started", style="cyan")
    runs_table.add_column("Policy", style="magenta")
    runs_table.add_column("Repository", style="white")
    runs_table.add_column("Outcome", style="yellow")
    runs_table.add_column("Processed", justify="right", style="green")
    runs_table.add_column("Acted", justify="right", style="green")
    runs_table.add_column("Path", style="white")

    for run in runs:
        runs_table.add_row(
            str(run.get("started_at", "")),
            str(run.get("kind", "")),
            f"{run.get('org', '')}/{run.get('repo', '')}",
            str(run.get("end_state") or run.get("state", "")),
            str(run.get("processed", 0)),
            str(run.get("acted", 0)),
            run["path"],
        )

    console.print(runs_table)
