"""Test configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from gh_triage.github_client.models import (
    GitHubIssue,
    GitHubLabel,
    GitHubPullRequest,
    GitHubUser,
)

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for staleness checks."""
    return NOW


@pytest.fixture
def temp_log_dir(tmp_path: Path) -> Path:
    """Create temporary log directory."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    return log_dir


@pytest.fixture
def make_issue() -> Callable[..., GitHubIssue]:
    """Factory for issue snapshots updated ``days_old`` days before NOW."""

    def _make(
        number: int = 1,
        labels: list[str] | None = None,
        assignee: str | None = None,
        days_old: float = 30,
        state: str = "open",
        locked: bool = False,
    ) -> GitHubIssue:
        return GitHubIssue(
            number=number,
            title=f"Issue {number}",
            state=state,
            locked=locked,
            labels=[GitHubLabel(name=name, color="ededed") for name in labels or []],
            assignee=GitHubUser(login=assignee, id=1) if assignee else None,
            created_at=NOW - timedelta(days=days_old + 10),
            updated_at=NOW - timedelta(days=days_old),
        )

    return _make


@pytest.fixture
def make_pull() -> Callable[..., GitHubPullRequest]:
    """Factory for pull request snapshots updated ``days_old`` days before NOW."""

    def _make(
        number: int = 1,
        mergeable: bool | None = None,
        days_old: float = 30,
        base_ref: str = "main",
    ) -> GitHubPullRequest:
        return GitHubPullRequest(
            number=number,
            title=f"Pull request {number}",
            state="open",
            created_at=NOW - timedelta(days=days_old + 10),
            updated_at=NOW - timedelta(days=days_old),
            mergeable=mergeable,
            base_ref=base_ref,
        )

    return _make
