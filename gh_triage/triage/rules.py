"""Triage decisions for the close-issues, close-prs and lock-issues runs.

Each decision function is pure: it looks only at the item snapshot, the
policy and the reference time, and returns either ``Skip`` with a reason or
``Act`` with the ordered actions to perform. Local checks run first so that
remote calls are only made for eligible items.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..config import Policy, PolicyKind
from ..github_client.models import GitHubIssue, GitHubPullRequest

SKIP_ASSIGNED = "assigned"
SKIP_RECENTLY_UPDATED = "recently updated"
SKIP_NO_LABELS = "no labels"
SKIP_UNKNOWN_LABELS = "unknown labels"
SKIP_MERGEABLE = "mergeable"
SKIP_BEFORE_WATERMARK = "before watermark"
SKIP_ALREADY_LOCKED = "already locked"


class CommentAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["comment"] = "comment"
    body: str


class CloseAction(BaseModel):
    """Close the item; ``base`` is resent for pull requests."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["close"] = "close"
    base: str | None = None


class LockAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["lock"] = "lock"
    reason: str | None = None


TriageAction = CommentAction | CloseAction | LockAction


class Skip(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: str = Field(..., description="Why the item is left alone")


class Act(BaseModel):
    model_config = ConfigDict(frozen=True)

    actions: list[TriageAction] = Field(
        ..., description="Actions to perform, in order"
    )


Decision = Skip | Act


def is_recently_updated(item: GitHubIssue, policy: Policy, now: datetime) -> bool:
    """True when the item was updated after ``now - stale_after``."""
    if item.updated_at is None:
        return False
    return item.updated_at > now - policy.stale_after


def _close_actions(policy: Policy, base: str | None = None) -> list[TriageAction]:
    actions: list[TriageAction] = []
    if policy.action_message:
        actions.append(CommentAction(body=policy.action_message))
    actions.append(CloseAction(base=base))
    return actions


def decide_close_issue(issue: GitHubIssue, policy: Policy, now: datetime) -> Decision:
    """Decide whether an open issue should be closed.

    An issue qualifies when it is unassigned, stale, and every one of its
    labels appears in the policy's allow-list.
    """
    if issue.assignee is not None:
        return Skip(reason=SKIP_ASSIGNED)

    if is_recently_updated(issue, policy, now):
        return Skip(reason=SKIP_RECENTLY_UPDATED)

    if not issue.labels:
        return Skip(reason=SKIP_NO_LABELS)

    unknown = [
        name for name in issue.label_names if name not in policy.labels_to_close
    ]
    if unknown:
        return Skip(reason=f"{SKIP_UNKNOWN_LABELS}: {','.join(unknown)}")

    return Act(actions=_close_actions(policy))


def decide_close_pull_request(
    pull: GitHubPullRequest, policy: Policy, now: datetime
) -> Decision:
    """Decide whether an open pull request should be closed.

    ``pull`` must come from the detail endpoint. Only a mergeable pull
    request is kept; conflicting and not-yet-computed ones proceed.
    """
    if pull.mergeable is True:
        return Skip(reason=SKIP_MERGEABLE)

    if is_recently_updated(pull, policy, now):
        return Skip(reason=SKIP_RECENTLY_UPDATED)

    return Act(actions=_close_actions(policy, base=pull.base_ref))


def decide_lock_issue(issue: GitHubIssue, policy: Policy, now: datetime) -> Decision:
    """Decide whether a closed issue should be locked."""
    if issue.number <= policy.first_item_number:
        return Skip(reason=SKIP_BEFORE_WATERMARK)

    if is_recently_updated(issue, policy, now):
        return Skip(reason=SKIP_RECENTLY_UPDATED)

    if issue.locked:
        return Skip(reason=SKIP_ALREADY_LOCKED)

    return Act(actions=[LockAction(reason=policy.lock_reason)])


def decide(
    kind: PolicyKind, item: GitHubIssue, policy: Policy, now: datetime
) -> Decision:
    """Dispatch to the decision function for ``kind``."""
    if kind is PolicyKind.CLOSE_ISSUES:
        return decide_close_issue(item, policy, now)
    if kind is PolicyKind.CLOSE_PULL_REQUESTS:
        if not isinstance(item, GitHubPullRequest):
            raise TypeError(f"Expected a pull request, got issue #{item.number}")
        return decide_close_pull_request(item, policy, now)
    return decide_lock_issue(item, policy, now)
