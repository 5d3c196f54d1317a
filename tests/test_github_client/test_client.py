"""Tests for GitHub client."""

import os
from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest
from github.GithubException import GithubException, UnknownObjectException

from gh_triage.github_client.client import GitHubClient
from gh_triage.github_client.models import (
    GitHubIssue,
    GitHubPullRequest,
    ResultStatus,
)

CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)
UPDATED = datetime(2024, 1, 2, tzinfo=timezone.utc)


def _raw_label(name: str) -> Mock:
    label = Mock()
    label.name = name
    label.color = "ff0000"
    label.description = None
    return label


def _raw_issue(number: int = 1, labels: list[str] | None = None, **overrides) -> Mock:
    issue = Mock()
    issue.number = number
    issue.title = f"Issue {number}"
    issue.state = "open"
    issue.locked = False
    issue.labels = [_raw_label(name) for name in labels or []]
    issue.assignee = None
    issue.created_at = CREATED
    issue.updated_at = UPDATED
    for key, value in overrides.items():
        setattr(issue, key, value)
    return issue


def _raw_pull(number: int = 1, mergeable: bool | None = False) -> Mock:
    pull = _raw_issue(number)
    pull.mergeable = mergeable
    pull.base.ref = "main"
    return pull


def _raw_comment(body: str) -> Mock:
    comment = Mock()
    comment.id = 42
    comment.user.login = "triage-bot"
    comment.user.id = 7
    comment.body = body
    comment.created_at = UPDATED
    comment.updated_at = UPDATED
    return comment


@pytest.fixture
def mock_github():
    """Patch PyGitHub and return the mocked ``Github`` instance."""
    with patch("gh_triage.github_client.client.Github") as mock_github_class:
        github = Mock()
        mock_github_class.return_value = github
        yield github


@pytest.fixture
def mock_repo(mock_github) -> Mock:
    repo = Mock()
    mock_github.get_repo.return_value = repo
    return repo


class TestGitHubClient:
    """Test GitHubClient class."""

    @patch.dict(os.environ, {"GITHUB_TOKEN": "test_token"})
    def test_init_with_env_token(self) -> None:
        """Test initialization with environment token."""
        with patch("gh_triage.github_client.client.Github") as mock_github:
            client = GitHubClient()

        assert client.token == "test_token"
        mock_github.assert_called_once()
        assert mock_github.call_args.kwargs["timeout"] == 15
        assert mock_github.call_args.kwargs["per_page"] == 100

    def test_init_with_explicit_token(self) -> None:
        """Test initialization with explicit token."""
        with patch("gh_triage.github_client.client.Github") as mock_github:
            client = GitHubClient(token="explicit_token", timeout=5, per_page=30)

        assert client.token == "explicit_token"
        assert client.per_page == 30
        assert mock_github.call_args.kwargs["timeout"] == 5

    @patch.dict(os.environ, {}, clear=True)
    def test_init_without_token(self) -> None:
        """Test initialization without token raises error."""
        with pytest.raises(ValueError, match="GitHub token is required"):
            GitHubClient()

    def test_get_repository_is_cached(self, mock_github, mock_repo) -> None:
        client = GitHubClient(token="test_token")

        assert client.get_repository("testorg", "testrepo") is mock_repo
        assert client.get_repository("testorg", "testrepo") is mock_repo
        mock_github.get_repo.assert_called_once_with("testorg/testrepo")

    def test_get_repository_not_found(self, mock_github) -> None:
        """Test repository not found error."""
        mock_github.get_repo.side_effect = UnknownObjectException(
            404, "Not Found", None
        )
        client = GitHubClient(token="test_token")

        with pytest.raises(ValueError, match="Repository testorg/testrepo not found"):
            client.get_repository("testorg", "testrepo")


class TestListing:
    """Test paged listings."""

    def test_list_issues_converts_page(self, mock_repo) -> None:
        listing = Mock()
        listing.get_page.return_value = [
            _raw_issue(1, labels=["Duplicate"]),
            _raw_issue(2, assignee=Mock(login="octocat", id=3)),
        ]
        mock_repo.get_issues.return_value = listing
        client = GitHubClient(token="test_token")

        page = client.list_issues("testorg", "testrepo")

        mock_repo.get_issues.assert_called_once_with(state="open")
        listing.get_page.assert_called_once_with(0)
        assert page.number == 1
        assert all(isinstance(item, GitHubIssue) for item in page.items)
        assert page.items[0].label_names == ["Duplicate"]
        assert page.items[0].updated_at == UPDATED
        assert page.items[1].assignee is not None
        assert page.items[1].assignee.login == "octocat"
        assert client.has_next_page(page) is False

    def test_list_issues_passes_sort_and_start_page(self, mock_repo) -> None:
        listing = Mock()
        listing.get_page.return_value = []
        mock_repo.get_issues.return_value = listing
        client = GitHubClient(token="test_token")

        page = client.list_issues(
            "testorg",
            "testrepo",
            state="closed",
            sort="created",
            direction="asc",
            page=4,
        )

        mock_repo.get_issues.assert_called_once_with(
            state="closed", sort="created", direction="asc"
        )
        listing.get_page.assert_called_once_with(3)
        assert page.number == 4
        assert page.items == []

    def test_full_page_has_next_page(self, mock_repo) -> None:
        listing = Mock()
        listing.get_page.side_effect = [
            [_raw_issue(1), _raw_issue(2)],
            [_raw_issue(3)],
        ]
        mock_repo.get_issues.return_value = listing
        client = GitHubClient(token="test_token", per_page=2)

        first = client.list_issues("testorg", "testrepo")
        assert client.has_next_page(first) is True

        second = client.next_page(first)

        listing.get_page.assert_called_with(1)
        assert second.number == 2
        assert [item.number for item in second.items] == [3]
        assert client.has_next_page(second) is False

    def test_next_page_after_last_page_raises(self, mock_repo) -> None:
        listing = Mock()
        listing.get_page.return_value = [_raw_issue(1)]
        mock_repo.get_issues.return_value = listing
        client = GitHubClient(token="test_token")
        page = client.list_issues("testorg", "testrepo")

        with pytest.raises(ValueError, match="last page"):
            client.next_page(page)

    def test_list_pull_requests_leaves_mergeable_unknown(self, mock_repo) -> None:
        listing = Mock()
        listing.get_page.return_value = [_raw_pull(5, mergeable=False)]
        mock_repo.get_pulls.return_value = listing
        client = GitHubClient(token="test_token")

        page = client.list_pull_requests("testorg", "testrepo")

        mock_repo.get_pulls.assert_called_once_with(state="open")
        pull = page.items[0]
        assert isinstance(pull, GitHubPullRequest)
        assert pull.mergeable is None
        assert pull.base_ref == "main"

    def test_get_pull_request_reads_mergeable(self, mock_repo) -> None:
        mock_repo.get_pull.return_value = _raw_pull(5, mergeable=False)
        client = GitHubClient(token="test_token")

        pull = client.get_pull_request("testorg", "testrepo", 5)

        mock_repo.get_pull.assert_called_once_with(5)
        assert pull.mergeable is False


class TestMutations:
    """Test comment, close and lock calls."""

    def test_create_comment_success(self, mock_repo) -> None:
        raw_issue = _raw_issue(10)
        raw_issue.create_comment.return_value = _raw_comment("stale")
        mock_repo.get_issue.return_value = raw_issue
        client = GitHubClient(token="test_token")

        result = client.create_comment("testorg", "testrepo", 10, "stale")

        raw_issue.create_comment.assert_called_once_with("stale")
        assert result.status is ResultStatus.CREATED
        assert result.comment is not None
        assert result.comment.body == "stale"
        assert result.comment.user.login == "triage-bot"

    def test_create_comment_client_error_is_reported(self, mock_repo) -> None:
        raw_issue = _raw_issue(10)
        raw_issue.create_comment.side_effect = GithubException(
            403, {"message": "Forbidden"}, {}
        )
        mock_repo.get_issue.return_value = raw_issue
        client = GitHubClient(token="test_token")

        result = client.create_comment("testorg", "testrepo", 10, "stale")

        assert result.status is ResultStatus.FAILED
        assert result.comment is None
        assert "Forbidden" in (result.message or "")

    def test_create_comment_server_error_raises(self, mock_repo) -> None:
        raw_issue = _raw_issue(10)
        raw_issue.create_comment.side_effect = GithubException(
            502, {"message": "Bad Gateway"}, {}
        )
        mock_repo.get_issue.return_value = raw_issue
        client = GitHubClient(token="test_token")

        with pytest.raises(GithubException):
            client.create_comment("testorg", "testrepo", 10, "stale")

    def test_close_issue(self, mock_repo) -> None:
        raw_issue = _raw_issue(10)

        def close(state):
            raw_issue.state = state

        raw_issue.edit.side_effect = close
        mock_repo.get_issue.return_value = raw_issue
        client = GitHubClient(token="test_token")

        result = client.update_issue("testorg", "testrepo", 10, state="closed")

        raw_issue.edit.assert_called_once_with(state="closed")
        raw_issue.lock.assert_not_called()
        assert result.status is ResultStatus.OK
        assert result.item is not None
        assert result.item.state == "closed"

    def test_lock_issue(self, mock_repo) -> None:
        raw_issue = _raw_issue(10, state="closed")
        mock_repo.get_issue.return_value = raw_issue
        client = GitHubClient(token="test_token")

        result = client.update_issue(
            "testorg", "testrepo", 10, locked=True, lock_reason="too heated"
        )

        raw_issue.lock.assert_called_once_with("too heated")
        raw_issue.edit.assert_not_called()
        assert result.status is ResultStatus.NO_CONTENT
        assert result.item is not None
        assert result.item.locked is True

    def test_lock_issue_without_reason(self, mock_github, mock_repo) -> None:
        """No reason is sent when none is configured."""
        raw_issue = _raw_issue(10, state="closed")
        raw_issue.url = "https://api.github.com/repos/testorg/testrepo/issues/10"
        mock_repo.get_issue.return_value = raw_issue
        client = GitHubClient(token="test_token")

        result = client.update_issue("testorg", "testrepo", 10, locked=True)

        raw_issue.lock.assert_not_called()
        mock_github.requester.requestJsonAndCheck.assert_called_once_with(
            "PUT", "https://api.github.com/repos/testorg/testrepo/issues/10/lock"
        )
        assert result.status is ResultStatus.NO_CONTENT
        assert result.item is not None
        assert result.item.locked is True

    def test_update_issue_client_error_is_reported(self, mock_repo) -> None:
        raw_issue = _raw_issue(10)
        raw_issue.edit.side_effect = GithubException(
            422, {"message": "Validation Failed"}, {}
        )
        mock_repo.get_issue.return_value = raw_issue
        client = GitHubClient(token="test_token")

        result = client.update_issue("testorg", "testrepo", 10, state="closed")

        assert result.status is ResultStatus.FAILED
        assert result.item is None

    def test_close_pull_request_keeps_base(self, mock_repo) -> None:
        raw_pull = _raw_pull(5)
        mock_repo.get_pull.return_value = raw_pull
        client = GitHubClient(token="test_token")

        result = client.update_pull_request(
            "testorg", "testrepo", 5, state="closed", base="main"
        )

        raw_pull.edit.assert_called_once_with(state="closed", base="main")
        assert result.status is ResultStatus.OK
        assert isinstance(result.item, GitHubPullRequest)

    def test_close_pull_request_server_error_raises(self, mock_repo) -> None:
        raw_pull = _raw_pull(5)
        raw_pull.edit.side_effect = GithubException(500, "boom", {})
        mock_repo.get_pull.return_value = raw_pull
        client = GitHubClient(token="test_token")

        with pytest.raises(GithubException):
            client.update_pull_request(
                "testorg", "testrepo", 5, state="closed", base="main"
            )
