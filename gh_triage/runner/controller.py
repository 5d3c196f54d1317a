"""Run controller: drives one policy over a repository's listing."""

import logging
from datetime import datetime, timezone

from rich.console import Console

from ..config import Policy, PolicyKind
from ..github_client.client import GitHubClient
from ..github_client.models import (
    GitHubComment,
    GitHubIssue,
    Page,
    ResultStatus,
    UpdateResult,
)
from ..storage.manager import RunLogWriter
from ..triage.rules import (
    CloseAction,
    CommentAction,
    LockAction,
    Skip,
    TriageAction,
    decide,
)
from .paginator import ScanOutcome, scan
from .reporting import print_summary
from .results import RunResult, RunState
from .retry import DEFAULT_MAX_ATTEMPTS, with_retry

console = Console()
logger = logging.getLogger(__name__)

LISTING_NAMES = {
    PolicyKind.CLOSE_ISSUES: "open issues",
    PolicyKind.CLOSE_PULL_REQUESTS: "open pull requests",
    PolicyKind.LOCK_ISSUES: "closed issues",
}


class RunController:
    """Applies one policy to every item of a listing.

    The controller scans pages, asks the rule engine for a decision per item,
    performs the resulting actions (unless the policy is a dry run) and
    keeps the counters in a ``RunResult``. The result is finalized, logged
    and summarized however the scan ends, including on failure, in which
    case the error is re-raised afterwards.
    """

    def __init__(
        self,
        client: GitHubClient,
        org: str,
        repo: str,
        kind: PolicyKind,
        policy: Policy,
        log_writer: RunLogWriter | None = None,
        now: datetime | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.client = client
        self.org = org
        self.repo = repo
        self.kind = kind
        self.policy = policy
        self.log_writer = log_writer
        self.now = now or datetime.now(timezone.utc)
        self.max_attempts = max_attempts
        self.result = RunResult(
            kind=kind,
            org=org,
            repo=repo,
            dry_run=policy.dry_run,
            started_at=self.now,
        )

    @property
    def _noun(self) -> str:
        if self.kind is PolicyKind.CLOSE_PULL_REQUESTS:
            return "pull request"
        return "issue"

    def _retry(self, operation, description: str):
        return with_retry(
            operation, max_attempts=self.max_attempts, description=description
        )

    def run(self) -> RunResult:
        """Scan the listing and apply the policy to each item.

        Returns:
            The finalized run result

        Raises:
            Exception: A remote failure that persisted through retries,
                re-raised after the partial result was finalized
        """
        if self.result.state is not RunState.IDLE:
            raise RuntimeError("A run controller can only run once")

        mode = "dry run" if self.policy.dry_run else "live"
        console.print(
            f"\n🔍 Running {self.kind.value} on {self.org}/{self.repo} ({mode})"
        )
        self.result.state = RunState.SCANNING

        try:
            outcome = scan(
                self._fetch_first_page,
                self.client.next_page,
                self.client.has_next_page,
                self._process_page,
                item_name=LISTING_NAMES[self.kind],
            )
            if outcome is ScanOutcome.EXHAUSTED:
                self.result.state = RunState.EXHAUSTED
        except Exception as e:
            self.result.state = RunState.FAILED
            self.result.error = str(e)
            console.print(f"❌ [red]Run failed: {e}[/red]")
            raise
        finally:
            self._finalize()

        return self.result

    def _fetch_first_page(self) -> Page:
        if self.kind is PolicyKind.CLOSE_ISSUES:
            return self.client.list_issues(self.org, self.repo, state="open")
        if self.kind is PolicyKind.CLOSE_PULL_REQUESTS:
            return self.client.list_pull_requests(self.org, self.repo, state="open")
        # Oldest first so a saved first_page/first_issue resumes a long sweep.
        return self.client.list_issues(
            self.org,
            self.repo,
            state="closed",
            sort="created",
            direction="asc",
            page=self.policy.first_page,
        )

    def _processed_cap_reached(self) -> bool:
        processed = self.result.processed
        max_processed = self.policy.max_processed
        if max_processed is None or processed < max_processed:
            return False
        console.print(
            f"\n== Reached maximum. Already processed: {processed}. "
            f"Max is: {max_processed}."
        )
        return True

    def _acted_cap_reached(self) -> bool:
        acted = self.result.acted
        max_acted = self.policy.max_acted
        if max_acted is None or acted < max_acted:
            return False
        console.print(
            f"\n== Reached maximum. Already acted: {acted}. Max is: {max_acted}."
        )
        return True

    def _process_page(self, items: list[GitHubIssue], page_number: int) -> bool:
        """Handle one page; returns True when a cap stops the run."""
        for item in items:
            # Checked before counting so max_processed=N handles N items.
            if self._processed_cap_reached():
                self.result.state = RunState.CAPPED
                return True

            self.result.processed += 1

            if self._acted_cap_reached():
                self.result.state = RunState.CAPPED
                return True

            logger.debug(
                "== %d. Processing %s #%d (page %d)...",
                self.result.processed,
                self._noun,
                item.number,
                page_number,
            )

            if self.kind is PolicyKind.CLOSE_PULL_REQUESTS:
                # Mergeability is only present on the detail endpoint.
                item = self._retry(
                    lambda number=item.number: self.client.get_pull_request(
                        self.org, self.repo, number
                    ),
                    f"Fetching pull request #{item.number}",
                )

            decision = decide(self.kind, item, self.policy, self.now)
            if isinstance(decision, Skip):
                logger.debug("==== #%d skipped: %s", item.number, decision.reason)
                continue

            self._execute(item, decision.actions)
        return False

    def _execute(self, item: GitHubIssue, actions: list[TriageAction]) -> bool:
        """Perform ``actions`` in order; True when every one succeeded."""
        comments: list[GitHubComment] = []
        snapshot = item

        for action in actions:
            if isinstance(action, CommentAction):
                console.print(f"==== Adding comment to {self._noun} #{item.number}...")
                if self.policy.dry_run:
                    continue
                comment_result = self._retry(
                    lambda body=action.body: self.client.create_comment(
                        self.org, self.repo, item.number, body
                    ),
                    f"Commenting on #{item.number}",
                )
                if (
                    comment_result.status is not ResultStatus.CREATED
                    or comment_result.comment is None
                ):
                    console.print(
                        f"==== [red]Failed to add comment: "
                        f"{comment_result.message or comment_result.status.value}"
                        f", skipping.[/red]"
                    )
                    return False
                comments.append(comment_result.comment)

            elif isinstance(action, CloseAction):
                console.print(f"==== Closing {self._noun} #{item.number}...")
                if self.policy.dry_run:
                    continue
                update = self._retry(
                    lambda base=action.base: self._close(item.number, base),
                    f"Closing #{item.number}",
                )
                if not self._verify(update, ResultStatus.OK, "Closing"):
                    return False
                snapshot = update.item or snapshot

            elif isinstance(action, LockAction):
                console.print(f"==== Locking issue #{item.number}...")
                if self.policy.dry_run:
                    continue
                update = self._retry(
                    lambda reason=action.reason: self.client.update_issue(
                        self.org,
                        self.repo,
                        item.number,
                        locked=True,
                        lock_reason=reason,
                    ),
                    f"Locking #{item.number}",
                )
                if not self._verify(update, ResultStatus.NO_CONTENT, "Locking"):
                    return False
                snapshot = update.item or snapshot

        label_names = None
        if self.kind is PolicyKind.CLOSE_ISSUES:
            label_names = item.label_names
        self.result.record_acted(snapshot, comments, label_names=label_names)
        logger.debug("== Done with #%d!", item.number)
        return True

    def _close(self, number: int, base: str | None) -> UpdateResult:
        if self.kind is PolicyKind.CLOSE_PULL_REQUESTS and base is not None:
            return self.client.update_pull_request(
                self.org, self.repo, number, state="closed", base=base
            )
        return self.client.update_issue(self.org, self.repo, number, state="closed")

    def _verify(self, update: UpdateResult, expected: ResultStatus, verb: str) -> bool:
        if update.status is expected:
            return True
        console.print(
            f"==== [red]{verb} failed: "
            f"{update.message or update.status.value}.[/red]"
        )
        return False

    def _finalize(self) -> None:
        """Write durable logs (live runs only) and print the summary."""
        result = self.result
        result.end_state = result.state
        result.finished_at = datetime.now(timezone.utc)

        try:
            if not result.dry_run and self.log_writer is not None:
                self._write_logs(self.log_writer, result)
        finally:
            print_summary(result)
            result.state = RunState.FINALIZED

    def _write_logs(self, writer: RunLogWriter, result: RunResult) -> None:
        """Flush the result; a failed run keeps its own error if this fails."""
        try:
            result.log_path = str(writer.write(result))
        except Exception as e:
            if result.end_state is not RunState.FAILED:
                raise
            logger.exception("Could not write logs of the failed run")
            console.print(f"❌ [red]Could not write run logs: {e}[/red]")
