"""GitHub client package for API interaction."""

from .client import GitHubClient
from .models import (
    CommentResult,
    GitHubComment,
    GitHubIssue,
    GitHubLabel,
    GitHubPullRequest,
    GitHubUser,
    Page,
    ResultStatus,
    UpdateResult,
)

__all__ = [
    "GitHubClient",
    "GitHubUser",
    "GitHubLabel",
    "GitHubComment",
    "GitHubIssue",
    "GitHubPullRequest",
    "Page",
    "ResultStatus",
    "CommentResult",
    "UpdateResult",
]
