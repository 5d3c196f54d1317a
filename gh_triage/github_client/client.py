"""GitHub API client using PyGitHub."""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from github import Auth, Github
from github.GithubException import GithubException, UnknownObjectException
from github.Issue import Issue
from github.IssueComment import IssueComment
from github.Label import Label
from github.NamedUser import NamedUser
from github.PaginatedList import PaginatedList
from github.PullRequest import PullRequest
from github.Repository import Repository

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

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15
DEFAULT_PER_PAGE = 100


@dataclass
class _ListingCursor:
    """Position inside a PyGitHub paginated listing."""

    listing: PaginatedList
    index: int
    convert: Callable[[Any], GitHubIssue]


def _is_server_error(error: GithubException) -> bool:
    return error.status is None or error.status >= 500


class GitHubClient:
    """GitHub API client exposing the calls the triage runs need.

    Listing and detail calls raise on any failure. Mutating calls report
    client errors (4xx) as ``ResultStatus.FAILED`` results and only raise on
    server or transport errors, which callers retry.
    """

    def __init__(
        self,
        token: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
        per_page: int = DEFAULT_PER_PAGE,
    ):
        """Initialize GitHub client with authentication.

        Args:
            token: GitHub personal access token. If None, reads from
                GITHUB_TOKEN env var.
            timeout: Per-request timeout in seconds
            per_page: Page size requested from listing endpoints
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable."
            )

        self.per_page = per_page
        self.github = Github(
            auth=Auth.Token(self.token), timeout=timeout, per_page=per_page
        )
        self._repositories: dict[str, Repository] = {}

    def _convert_user(self, github_user: NamedUser) -> GitHubUser:
        """Convert PyGitHub user to our model."""
        return GitHubUser(login=github_user.login, id=github_user.id)

    def _convert_label(self, github_label: Label) -> GitHubLabel:
        """Convert PyGitHub label to our model."""
        return GitHubLabel(
            name=github_label.name,
            color=github_label.color or "",
            description=github_label.description,
        )

    def _convert_comment(self, github_comment: IssueComment) -> GitHubComment:
        """Convert PyGitHub comment to our model."""
        return GitHubComment(
            id=github_comment.id,
            user=self._convert_user(github_comment.user),
            body=github_comment.body,
            created_at=github_comment.created_at,
            updated_at=github_comment.updated_at,
        )

    def _convert_issue(self, github_issue: Issue) -> GitHubIssue:
        """Convert PyGitHub issue to our model."""
        return GitHubIssue(
            number=github_issue.number,
            title=github_issue.title or "",
            state=github_issue.state,
            locked=bool(github_issue.locked),
            labels=[self._convert_label(label) for label in github_issue.labels],
            assignee=(
                self._convert_user(github_issue.assignee)
                if github_issue.assignee
                else None
            ),
            created_at=github_issue.created_at,
            updated_at=github_issue.updated_at,
        )

    def _convert_pull_request(
        self, github_pull: PullRequest, detailed: bool = False
    ) -> GitHubPullRequest:
        """Convert PyGitHub pull request to our model.

        ``mergeable`` is read only for detailed objects; on listing payloads
        PyGitHub would issue an extra request to complete the attribute.
        """
        return GitHubPullRequest(
            number=github_pull.number,
            title=github_pull.title or "",
            state=github_pull.state,
            locked=bool(github_pull.locked),
            labels=[self._convert_label(label) for label in github_pull.labels],
            assignee=(
                self._convert_user(github_pull.assignee)
                if github_pull.assignee
                else None
            ),
            created_at=github_pull.created_at,
            updated_at=github_pull.updated_at,
            mergeable=github_pull.mergeable if detailed else None,
            base_ref=github_pull.base.ref,
        )

    def get_repository(self, org: str, repo: str) -> Repository:
        """Get repository object."""
        full_name = f"{org}/{repo}"
        if full_name not in self._repositories:
            try:
                self._repositories[full_name] = self.github.get_repo(full_name)
            except UnknownObjectException:
                raise ValueError(f"Repository {org}/{repo} not found")
        return self._repositories[full_name]

    def _fetch_page(self, listing: PaginatedList, index: int, convert) -> Page:
        raw_items = listing.get_page(index)
        items = [convert(raw) for raw in raw_items]
        # A short page is the last one; a full page may be followed by an
        # empty one, which the paginator treats as exhaustion.
        cursor = None
        if len(raw_items) >= self.per_page:
            cursor = _ListingCursor(listing=listing, index=index + 1, convert=convert)
        return Page(items=items, number=index + 1, cursor=cursor)

    def list_issues(
        self,
        org: str,
        repo: str,
        state: str = "open",
        sort: str | None = None,
        direction: str | None = None,
        page: int = 1,
    ) -> Page[GitHubIssue]:
        """List repository issues one page at a time.

        Args:
            org: Organization name
            repo: Repository name
            state: Issue state (open, closed, all)
            sort: Sort field (created, updated, comments)
            direction: Sort direction (asc, desc)
            page: 1-based page to start from

        Returns:
            The requested page; pass it to ``next_page`` to continue
        """
        repository = self.get_repository(org, repo)
        kwargs: dict[str, Any] = {"state": state}
        if sort:
            kwargs["sort"] = sort
        if direction:
            kwargs["direction"] = direction

        listing = repository.get_issues(**kwargs)
        return self._fetch_page(listing, max(page, 1) - 1, self._convert_issue)

    def list_pull_requests(
        self, org: str, repo: str, state: str = "open", page: int = 1
    ) -> Page[GitHubPullRequest]:
        """List repository pull requests one page at a time."""
        repository = self.get_repository(org, repo)
        listing = repository.get_pulls(state=state)
        return self._fetch_page(
            listing, max(page, 1) - 1, self._convert_pull_request
        )

    def has_next_page(self, page: Page) -> bool:
        return page.cursor is not None

    def next_page(self, page: Page) -> Page:
        """Fetch the page following ``page``."""
        cursor = page.cursor
        if cursor is None:
            raise ValueError(f"Page {page.number} is the last page")
        return self._fetch_page(cursor.listing, cursor.index, cursor.convert)

    def get_pull_request(self, org: str, repo: str, number: int) -> GitHubPullRequest:
        """Get a pull request with detail-only fields such as mergeability."""
        repository = self.get_repository(org, repo)
        github_pull = repository.get_pull(number)
        return self._convert_pull_request(github_pull, detailed=True)

    def create_comment(
        self, org: str, repo: str, issue_number: int, body: str
    ) -> CommentResult:
        """Add a comment to an issue or pull request.

        Args:
            org: Organization name
            repo: Repository name
            issue_number: Issue or pull request number
            body: Comment text to add

        Returns:
            CommentResult with status "201 Created" on success

        Raises:
            GithubException: For server errors (5xx)
        """
        try:
            repository = self.get_repository(org, repo)
            github_issue = repository.get_issue(issue_number)
            github_comment = github_issue.create_comment(body)
        except GithubException as e:
            if _is_server_error(e):
                raise
            logger.warning("Comment on #%s rejected: %s", issue_number, e)
            return CommentResult(status=ResultStatus.FAILED, message=str(e))

        return CommentResult(
            status=ResultStatus.CREATED,
            comment=self._convert_comment(github_comment),
        )

    def _lock(self, github_issue: Issue, lock_reason: str | None) -> None:
        if lock_reason:
            github_issue.lock(lock_reason)
            return
        # Issue.lock() requires a reason; the endpoint itself does not.
        self.github.requester.requestJsonAndCheck("PUT", f"{github_issue.url}/lock")

    def update_issue(
        self,
        org: str,
        repo: str,
        issue_number: int,
        state: str | None = None,
        locked: bool | None = None,
        lock_reason: str | None = None,
    ) -> UpdateResult:
        """Change an issue's state and/or lock it.

        Args:
            org: Organization name
            repo: Repository name
            issue_number: Issue number
            state: New state ("closed" or "open"), if any
            locked: True to lock the conversation
            lock_reason: Reason sent with the lock request; None sends none

        Returns:
            UpdateResult with status "200 OK" for a state change, "204 No
            Content" for a lock, or "failed"

        Raises:
            GithubException: For server errors (5xx)
        """
        try:
            repository = self.get_repository(org, repo)
            github_issue = repository.get_issue(issue_number)
            status = ResultStatus.OK
            if state is not None:
                github_issue.edit(state=state)
            if locked:
                self._lock(github_issue, lock_reason)
                status = ResultStatus.NO_CONTENT
        except GithubException as e:
            if _is_server_error(e):
                raise
            logger.warning("Update of #%s rejected: %s", issue_number, e)
            return UpdateResult(status=ResultStatus.FAILED, message=str(e))

        snapshot = self._convert_issue(github_issue)
        if locked:
            # The lock endpoint answers 204 without a body.
            snapshot = snapshot.model_copy(update={"locked": True})
        return UpdateResult(status=status, item=snapshot)

    def update_pull_request(
        self, org: str, repo: str, number: int, state: str, base: str
    ) -> UpdateResult:
        """Change a pull request's state, keeping its base branch."""
        try:
            repository = self.get_repository(org, repo)
            github_pull = repository.get_pull(number)
            github_pull.edit(state=state, base=base)
        except GithubException as e:
            if _is_server_error(e):
                raise
            logger.warning("Update of pull request #%s rejected: %s", number, e)
            return UpdateResult(status=ResultStatus.FAILED, message=str(e))

        return UpdateResult(
            status=ResultStatus.OK,
            item=self._convert_pull_request(github_pull),
        )
