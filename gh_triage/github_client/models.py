"""Pydantic models for GitHub data structures.

These models map directly to GitHub's REST API v3 response structures.
API Reference: https://docs.github.com/en/rest/issues
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class GitHubUser(BaseModel):
    """GitHub user model representing a user account.

    Maps to GitHub REST API User object.
    API Reference: https://docs.github.com/en/rest/users/users
    """

    model_config = ConfigDict(frozen=True)

    login: str = Field(..., description="GitHub username/login (string)")
    id: int = Field(..., description="Unique user identifier (integer)")


class GitHubLabel(BaseModel):
    """GitHub label model representing repository labels.

    Only the name takes part in triage decisions; color and description are
    carried through to the run logs.
    API Reference: https://docs.github.com/en/rest/issues/labels
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Name of the label (string)")
    color: str = Field(
        "", description="Hexadecimal color code without leading # (string)"
    )
    description: str | None = Field(
        None, description="Short description of the label (string)"
    )


class GitHubComment(BaseModel):
    """GitHub comment model representing issue/PR comments.

    Maps to GitHub REST API Issue Comment object.
    API Reference: https://docs.github.com/en/rest/issues/comments
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Unique comment identifier (integer)")
    user: GitHubUser = Field(..., description="Comment author details")
    body: str = Field(..., description="Text content of the comment (string)")
    created_at: datetime = Field(
        ..., description="Timestamp of comment creation (ISO 8601)"
    )
    updated_at: datetime = Field(
        ..., description="Timestamp of last comment update (ISO 8601)"
    )


class GitHubIssue(BaseModel):
    """GitHub issue snapshot as returned by the issues listing.

    Maps to GitHub REST API Issue object. Snapshots are immutable; state
    changes are requested remotely and the returned snapshot is recorded
    separately.
    API Reference: https://docs.github.com/en/rest/issues/issues
    """

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., description="Issue number within the repository")
    title: str = Field("", description="Short description/title of the issue")
    state: str = Field(..., description="Current state: 'open', 'closed'")
    locked: bool = Field(False, description="Whether the conversation is locked")
    labels: list[GitHubLabel] = Field(
        default_factory=list, description="Labels attached to the issue"
    )
    assignee: GitHubUser | None = Field(
        None, description="User the issue is assigned to, if any"
    )
    created_at: datetime | None = Field(
        None, description="Timestamp of issue creation (ISO 8601)"
    )
    updated_at: datetime | None = Field(
        None, description="Timestamp of last issue update (ISO 8601)"
    )

    @property
    def label_names(self) -> list[str]:
        return [label.name for label in self.labels]


class GitHubPullRequest(GitHubIssue):
    """GitHub pull request snapshot.

    Maps to GitHub REST API Pull Request object. ``mergeable`` is only
    populated on the detail endpoint; listing payloads leave it ``None``.
    API Reference: https://docs.github.com/en/rest/pulls/pulls
    """

    mergeable: bool | None = Field(
        None,
        description="True/False once GitHub computed mergeability, None before",
    )
    base_ref: str = Field(..., description="Name of the base branch")


class ResultStatus(str, Enum):
    """Status strings reported for mutating GitHub calls."""

    CREATED = "201 Created"
    OK = "200 OK"
    NO_CONTENT = "204 No Content"
    FAILED = "failed"


class CommentResult(BaseModel):
    """Outcome of posting a comment."""

    status: ResultStatus = Field(..., description="Reported creation status")
    comment: GitHubComment | None = Field(
        None, description="Created comment, when GitHub returned one"
    )
    message: str | None = Field(None, description="Error detail on failure")


class UpdateResult(BaseModel):
    """Outcome of a state update (close or lock)."""

    status: ResultStatus = Field(..., description="Reported update status")
    item: GitHubPullRequest | GitHubIssue | None = Field(
        None, description="Post-update snapshot of the item"
    )
    message: str | None = Field(None, description="Error detail on failure")


ItemT = TypeVar("ItemT", bound=GitHubIssue)


@dataclass
class Page(Generic[ItemT]):
    """One page of a listing.

    ``cursor`` is opaque to callers and only handed back to the client to
    fetch the following page; ``None`` means there is no following page.
    """

    items: list[ItemT]
    number: int = 1
    cursor: Any = None
