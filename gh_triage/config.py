"""Bot settings and per-run policies.

Settings are read from a JSON file shaped like::

    {
      "owner": "microsoft",
      "repo": "TypeScript",
      "dry": true,
      "issues": {"days_since_last_edit": 14, "labels_to_close": ["Duplicate"]},
      "pull_requests": {"days_since_last_edit": 14},
      "lock": {"days_since_last_edit": 365, "first_issue": 0, "first_page": 0}
    }

Every key is optional. Caps that are zero or negative mean "no limit".
"""

from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_LABELS_TO_CLOSE = [
    "By Design",
    "Design Limitation",
    "Duplicate",
    "Question",
    "Won't Fix",
    "Working as Intended",
    "Needs More Info",
]


class PolicyKind(str, Enum):
    """The three kinds of triage run."""

    CLOSE_ISSUES = "close-issues"
    CLOSE_PULL_REQUESTS = "close-prs"
    LOCK_ISSUES = "lock-issues"


class Policy(BaseModel):
    """Immutable thresholds governing one run."""

    model_config = ConfigDict(frozen=True)

    stale_after: timedelta = Field(
        timedelta(days=14), description="Items updated more recently are skipped"
    )
    max_processed: int | None = Field(
        None, description="Cap on items examined (None for unbounded)"
    )
    max_acted: int | None = Field(
        None, description="Cap on items acted upon (None for unbounded)"
    )
    action_message: str = Field(
        "", description="Comment posted before closing; empty posts nothing"
    )
    labels_to_close: frozenset[str] = Field(
        frozenset(), description="Labels that make an issue eligible for closing"
    )
    dry_run: bool = Field(True, description="Decide and count without mutating")
    first_item_number: int = Field(
        0, description="Lock watermark: items numbered at or below are skipped"
    )
    first_page: int = Field(1, description="Lock listing page to start from")
    lock_reason: str | None = Field(
        None, description="Reason sent when locking; None sends no reason"
    )


def _cap(value: int) -> int | None:
    return value if value > 0 else None


class PolicySettings(BaseModel):
    """Settings shared by all policies."""

    days_since_last_edit: int = Field(
        14, description="Days without updates before an item counts as stale"
    )
    max_processed: int = Field(-1, description="Maximum items to examine")
    max_acted: int = Field(-1, description="Maximum items to close or lock")


class CloseIssuesSettings(PolicySettings):
    close_message: str = Field("", description="Comment posted before closing")
    labels_to_close: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LABELS_TO_CLOSE),
        description="Issues whose labels all appear here may be closed",
    )


class ClosePullRequestsSettings(PolicySettings):
    close_message: str = Field("", description="Comment posted before closing")


class LockSettings(PolicySettings):
    days_since_last_edit: int = Field(
        365, description="Days without updates before a closed issue is locked"
    )
    first_issue: int = Field(
        0, description="Issues numbered at or below this are skipped"
    )
    first_page: int = Field(0, description="Listing page to resume from")
    lock_reason: str | None = Field(
        None, description="off-topic, too heated, resolved, spam or none"
    )


class BotSettings(BaseModel):
    """Top-level bot settings."""

    owner: str = Field("microsoft", description="Repository owner")
    repo: str = Field("TypeScript", description="Repository name")
    dry: bool = Field(True, description="Simulate runs without mutating")
    debug: bool = Field(False, description="Verbose diagnostic logging")
    log_folder: str = Field("logs", description="Root directory for run logs")
    timeout: int = Field(15, description="Per-request timeout in seconds")
    per_page: int = Field(100, description="Listing page size")
    issues: CloseIssuesSettings = Field(default_factory=CloseIssuesSettings)
    pull_requests: ClosePullRequestsSettings = Field(
        default_factory=ClosePullRequestsSettings
    )
    lock: LockSettings = Field(default_factory=LockSettings)

    def policy_for(self, kind: PolicyKind) -> Policy:
        """Build the immutable policy for a run of ``kind``."""
        common: dict[str, Any] = {"dry_run": self.dry}
        if kind is PolicyKind.CLOSE_ISSUES:
            section: PolicySettings = self.issues
            common["action_message"] = self.issues.close_message
            common["labels_to_close"] = frozenset(self.issues.labels_to_close)
        elif kind is PolicyKind.CLOSE_PULL_REQUESTS:
            section = self.pull_requests
            common["action_message"] = self.pull_requests.close_message
        else:
            section = self.lock
            common["first_item_number"] = self.lock.first_issue
            common["first_page"] = max(self.lock.first_page, 1)
            common["lock_reason"] = self.lock.lock_reason

        return Policy(
            stale_after=timedelta(days=section.days_since_last_edit),
            max_processed=_cap(section.max_processed),
            max_acted=_cap(section.max_acted),
            **common,
        )


def load_settings(path: str | Path | None = None) -> BotSettings:
    """Load bot settings from a JSON file.

    Args:
        path: Settings file; None returns the built-in defaults

    Returns:
        Validated BotSettings

    Raises:
        ValueError: If the file does not exist or is not valid settings JSON
    """
    if path is None:
        return BotSettings()

    settings_path = Path(path)
    if not settings_path.exists():
        raise ValueError(f"Settings file {settings_path} does not exist")

    try:
        return BotSettings.model_validate_json(
            settings_path.read_text(encoding="utf-8")
        )
    except ValidationError as e:
        raise ValueError(f"Invalid settings in {settings_path}: {e}") from e
