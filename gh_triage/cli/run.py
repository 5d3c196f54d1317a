"""CLI commands running the triage policies."""

import logging
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..config import BotSettings, PolicyKind, load_settings
from ..github_client.client import GitHubClient
from ..runner.controller import RunController
from ..runner.reporting import print_settings
from ..storage.manager import RunLogWriter
from .options import (
    DEBUG_OPTION,
    DRY_RUN_OPTION,
    LOG_DIR_OPTION,
    ORG_OPTION,
    REPO_OPTION,
    SETTINGS_OPTION,
    TOKEN_OPTION,
)

console = Console()


def configure_logging(debug: bool) -> None:
    """Route diagnostic logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # PyGitHub and urllib3 are chatty at DEBUG.
    logging.getLogger("github").setLevel(logging.INFO)
    logging.getLogger("urllib3").setLevel(logging.INFO)


def resolve_settings(
    settings_path: str | None,
    org: str | None = None,
    repo: str | None = None,
    dry_run: bool | None = None,
    debug: bool = False,
    log_dir: str | None = None,
) -> BotSettings:
    """Load settings and apply command-line overrides.

    Raises:
        typer.Exit: If the settings file is missing or invalid
    """
    try:
        settings = load_settings(settings_path)
    except ValueError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    overrides: dict[str, Any] = {}
    if org:
        overrides["owner"] = org
    if repo:
        overrides["repo"] = repo
    if dry_run is not None:
        overrides["dry"] = dry_run
    if debug:
        overrides["debug"] = True
    if log_dir:
        overrides["log_folder"] = log_dir
    return settings.model_copy(update=overrides)


def run_policy(
    kind: PolicyKind,
    settings_path: str | None,
    org: str | None,
    repo: str | None,
    token: str | None,
    dry_run: bool | None,
    debug: bool,
    log_dir: str | None,
) -> None:
    """Run one policy end to end and exit non-zero on failure."""
    settings = resolve_settings(settings_path, org, repo, dry_run, debug, log_dir)
    configure_logging(settings.debug)
    print_settings(settings, kind)

    if settings.dry:
        console.print(
            "⚠️  [yellow]Dry run - no comments, closes or locks will be "
            "sent (use --no-dry-run to apply)[/yellow]"
        )

    try:
        console.print("🔑 Initializing GitHub client...")
        client = GitHubClient(
            token=token, timeout=settings.timeout, per_page=settings.per_page
        )
    except ValueError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    controller = RunController(
        client,
        settings.owner,
        settings.repo,
        kind,
        settings.policy_for(kind),
        log_writer=RunLogWriter(settings.log_folder),
    )

    try:
        result = controller.run()
    except Exception as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        console.print("Please check your GitHub token and network connection.")
        raise typer.Exit(1)

    if result.log_path:
        console.print(f"📁 Logs written to {result.log_path}")
    else:
        console.print("Dry run: no logs written.")


def close_issues(
    settings_path: str | None = SETTINGS_OPTION,
    org: str | None = ORG_OPTION,
    repo: str | None = REPO_OPTION,
    token: str | None = TOKEN_OPTION,
    dry_run: bool | None = DRY_RUN_OPTION,
    debug: bool = DEBUG_OPTION,
    log_dir: str | None = LOG_DIR_OPTION,
) -> None:
    """Close stale, unassigned issues whose labels are all close-eligible.

    Examples:
        github-triage close-issues --settings settings.json
        github-triage close-issues --org myorg --repo myrepo --no-dry-run
    """
    run_policy(
        PolicyKind.CLOSE_ISSUES,
        settings_path,
        org,
        repo,
        token,
        dry_run,
        debug,
        log_dir,
    )


def close_prs(
    settings_path: str | None = SETTINGS_OPTION,
    org: str | None = ORG_OPTION,
    repo: str | None = REPO_OPTION,
    token: str | None = TOKEN_OPTION,
    dry_run: bool | None = DRY_RUN_OPTION,
    debug: bool = DEBUG_OPTION,
    log_dir: str | None = LOG_DIR_OPTION,
) -> None:
    """Close stale pull requests that GitHub does not report as mergeable."""
    run_policy(
        PolicyKind.CLOSE_PULL_REQUESTS,
        settings_path,
        org,
        repo,
        token,
        dry_run,
        debug,
        log_dir,
    )


def lock_issues(
    settings_path: str | None = SETTINGS_OPTION,
    org: str | None = ORG_OPTION,
    repo: str | None = REPO_OPTION,
    token: str | None = TOKEN_OPTION,
    dry_run: bool | None = DRY_RUN_OPTION,
    debug: bool = DEBUG_OPTION,
    log_dir: str | None = LOG_DIR_OPTION,
) -> None:
    """Lock closed issues that have not been updated for a long time.

    Closed issues are scanned oldest first. Set ``lock.first_page`` and
    ``lock.first_issue`` in the settings file to resume an earlier sweep.
    """
    run_policy(
        PolicyKind.LOCK_ISSUES,
        settings_path,
        org,
        repo,
        token,
        dry_run,
        debug,
        log_dir,
    )


def show_settings(
    settings_path: str | None = SETTINGS_OPTION,
    org: str | None = ORG_OPTION,
    repo: str | None = REPO_OPTION,
    dry_run: bool | None = DRY_RUN_OPTION,
    log_dir: str | None = LOG_DIR_OPTION,
) -> None:
    """Show the resolved settings and the policy of every run type."""
    settings = resolve_settings(settings_path, org, repo, dry_run, log_dir=log_dir)
    print_settings(settings)
