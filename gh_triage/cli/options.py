"""Standardized CLI option definitions shared by the run commands."""

import typer

SETTINGS_OPTION = typer.Option(
    None, "--settings", "-c", help="Settings JSON file (defaults to built-ins)"
)

ORG_OPTION = typer.Option(
    None, "--org", "-o", help="Repository owner (overrides settings)"
)

REPO_OPTION = typer.Option(
    None, "--repo", "-r", help="Repository name (overrides settings)"
)

TOKEN_OPTION = typer.Option(
    None, "--token", "-t", help="GitHub API token (defaults to GITHUB_TOKEN env var)"
)

DRY_RUN_OPTION = typer.Option(
    None,
    "--dry-run/--no-dry-run",
    help="Decide and count without changing anything (overrides settings)",
)

DEBUG_OPTION = typer.Option(False, "--debug", help="Log every decision and page")

LOG_DIR_OPTION = typer.Option(
    None, "--log-dir", help="Root directory for run logs (overrides settings)"
)

POLICY_FILTER_OPTION = typer.Option(
    None, "--policy", "-p", help="Only show runs of this policy"
)
