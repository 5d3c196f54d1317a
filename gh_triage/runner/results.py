"""Run state and the result accumulated while a run scans."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from ..config import PolicyKind
from ..github_client.models import GitHubComment, GitHubIssue, GitHubPullRequest


class RunState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    CAPPED = "capped"
    EXHAUSTED = "exhausted"
    FAILED = "failed"
    FINALIZED = "finalized"


class RunResult(BaseModel):
    """Counters and acted-upon records of one run.

    Created empty at run start and only appended to while scanning.
    """

    kind: PolicyKind = Field(..., description="Policy the run applied")
    org: str = Field(..., description="Repository owner")
    repo: str = Field(..., description="Repository name")
    dry_run: bool = Field(True, description="Whether mutations were simulated")
    started_at: datetime = Field(..., description="Run start time")
    finished_at: datetime | None = Field(None, description="Run end time")
    state: RunState = Field(RunState.IDLE, description="Last state reached")
    end_state: RunState | None = Field(
        None, description="State the scan ended in before finalization"
    )
    processed: int = Field(0, description="Items examined")
    acted: int = Field(0, description="Items closed or locked")
    acted_by_label: dict[str, int] = Field(
        default_factory=dict, description="Acted items per label name"
    )
    items: list[GitHubPullRequest | GitHubIssue] = Field(
        default_factory=list, description="Snapshots of acted-upon items"
    )
    comments: list[GitHubComment] = Field(
        default_factory=list, description="Comments created during the run"
    )
    error: str | None = Field(None, description="Error that failed the run")
    log_path: str | None = Field(None, description="Directory the logs went to")

    def record_acted(
        self,
        item: GitHubIssue,
        comments: list[GitHubComment],
        label_names: list[str] | None = None,
    ) -> None:
        """Record an item whose actions all succeeded.

        Args:
            item: Post-update snapshot, or the evaluated item in dry runs
            comments: Comments created for the item
            label_names: Labels to count in ``acted_by_label``, if any
        """
        self.acted += 1
        self.items.append(item)
        self.comments.extend(comments)
        if label_names:
            for name in label_names:
                self.acted_by_label[name] = self.acted_by_label.get(name, 0) + 1
