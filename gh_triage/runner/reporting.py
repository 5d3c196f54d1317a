"""Console rendering of settings and run summaries."""

from rich.console import Console
from rich.table import Table

from ..config import BotSettings, PolicyKind
from .results import RunResult

console = Console()

ITEM_NOUNS = {
    PolicyKind.CLOSE_ISSUES: ("Issues", "Closed"),
    PolicyKind.CLOSE_PULL_REQUESTS: ("Pull Requests", "Closed"),
    PolicyKind.LOCK_ISSUES: ("Issues", "Locked"),
}


def _cap_text(cap: int | None) -> str:
    return "unbounded" if cap is None else str(cap)


def print_summary(result: RunResult) -> None:
    """Print processed and acted counts, with the per-label breakdown."""
    noun, verb = ITEM_NOUNS[result.kind]
    title = f"Run Summary ({result.org}/{result.repo}, {result.kind.value})"
    if result.dry_run:
        title += " - dry run"

    summary_table = Table(title=title)
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", justify="right", style="green")
    summary_table.add_row(f"Processed {noun}", str(result.processed))
    summary_table.add_row(f"{noun} {verb}", str(result.acted))
    summary_table.add_row("Outcome", (result.end_state or result.state).value)
    console.print()
    console.print(summary_table)

    if result.kind is PolicyKind.CLOSE_ISSUES and result.acted_by_label:
        label_table = Table(title=f"{noun} {verb} by Label")
        label_table.add_column("Label", style="cyan")
        label_table.add_column("Count", justify="right", style="green")
        for label, count in sorted(result.acted_by_label.items()):
            label_table.add_row(label, str(count))
        console.print(label_table)


def print_settings(settings: BotSettings, kind: PolicyKind | None = None) -> None:
    """Print the resolved settings, optionally only one policy."""
    params_table = Table(title="Settings")
    params_table.add_column("Parameter", style="cyan")
    params_table.add_column("Value", style="green")
    params_table.add_row("Repository", f"{settings.owner}/{settings.repo}")
    params_table.add_row("Dry Run", str(settings.dry))
    params_table.add_row("Debug", str(settings.debug))
    params_table.add_row("Log Folder", settings.log_folder)
    console.print(params_table)

    kinds = [kind] if kind else list(PolicyKind)
    for policy_kind in kinds:
        policy = settings.policy_for(policy_kind)
        policy_table = Table(title=f"Policy: {policy_kind.value}")
        policy_table.add_column("Parameter", style="cyan")
        policy_table.add_column("Value", style="green")
        policy_table.add_row("Stale After", f"{policy.stale_after.days} days")
        policy_table.add_row("Max Processed", _cap_text(policy.max_processed))
        policy_table.add_row("Max Acted", _cap_text(policy.max_acted))
        if policy_kind is PolicyKind.LOCK_ISSUES:
            policy_table.add_row("First Issue", str(policy.first_item_number))
            policy_table.add_row("First Page", str(policy.first_page))
            policy_table.add_row("Lock Reason", policy.lock_reason or "(none)")
        else:
            policy_table.add_row("Message", policy.action_message or "(none)")
        if policy_kind is PolicyKind.CLOSE_ISSUES:
            policy_table.add_row(
                "Labels To Close", ", ".join(sorted(policy.labels_to_close))
            )
        console.print(policy_table)
