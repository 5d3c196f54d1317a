"""Durable JSON logs of triage runs."""

import json
import time
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from rich.console import Console

from ..config import PolicyKind
from ..runner.results import RunResult

console = Console()

RUN_DIRECTORIES = {
    PolicyKind.CLOSE_ISSUES: "issues",
    PolicyKind.CLOSE_PULL_REQUESTS: "pr",
    PolicyKind.LOCK_ISSUES: "lock",
}

ACTED_FILES = {
    PolicyKind.CLOSE_ISSUES: "issues_closed.json",
    PolicyKind.CLOSE_PULL_REQUESTS: "pull_requests_closed.json",
    PolicyKind.LOCK_ISSUES: "issues_locked.json",
}

COMMENTS_FILE = "comments_added.json"
SUMMARY_FILE = "summary.json"


class RunLogWriter:
    """Writes run results under ``<base>/<policy>/<epoch-ms>/``."""

    def __init__(self, base_path: str | Path = "logs"):
        """Initialize the writer.

        Args:
            base_path: Root directory for run logs; created on first write
        """
        self.base_path = Path(base_path)

    def _policy_dir(self, kind: PolicyKind) -> Path:
        return self.base_path / RUN_DIRECTORIES[kind]

    def _create_run_dir(self, kind: PolicyKind) -> Path:
        """Create a fresh timestamped directory for one run."""
        policy_dir = self._policy_dir(kind)
        policy_dir.mkdir(parents=True, exist_ok=True)

        stamp = int(time.time() * 1000)
        run_dir = policy_dir / str(stamp)
        while run_dir.exists():
            stamp += 1
            run_dir = policy_dir / str(stamp)
        run_dir.mkdir()
        return run_dir

    def _write_json(self, path: Path, data: Any) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)

    def _dump_all(self, records: list[BaseModel]) -> list[dict[str, Any]]:
        return [record.model_dump(mode="json") for record in records]

    def write(self, result: RunResult) -> Path:
        """Write the acted-upon items, created comments and a summary.

        Args:
            result: Finished run result

        Returns:
            Path to the run directory
        """
        run_dir = self._create_run_dir(result.kind)

        try:
            self._write_json(
                run_dir / ACTED_FILES[result.kind], self._dump_all(result.items)
            )
            if result.kind is not PolicyKind.LOCK_ISSUES:
                self._write_json(
                    run_dir / COMMENTS_FILE, self._dump_all(result.comments)
                )
            self._write_json(
                run_dir / SUMMARY_FILE,
                result.model_dump(mode="json", exclude={"items", "comments"}),
            )
        except Exception as e:
            console.print(f"Error writing run logs to {run_dir}: {e}")
            raise

        console.print(f"Wrote run logs to {run_dir}")
        return run_dir

    def list_runs(self, kind: PolicyKind | None = None) -> list[dict[str, Any]]:
        """Load the summaries of previous runs, newest first.

        Args:
            kind: Only list runs of this policy (optional)

        Returns:
            Summary dictionaries, each with a ``path`` key added
        """
        kinds = [kind] if kind else list(PolicyKind)
        summaries = []

        for policy_kind in kinds:
            policy_dir = self._policy_dir(policy_kind)
            if not policy_dir.exists():
                continue
            for summary_file in policy_dir.glob(f"*/{SUMMARY_FILE}"):
                try:
                    with open(summary_file, encoding="utf-8") as f:
                        summary = json.load(f)
                except Exception as e:
                    console.print(f"Error loading {summary_file}: {e}")
                    continue
                summary["path"] = str(summary_file.parent)
                summaries.append(summary)

        summaries.sort(key=lambda s: s.get("started_at") or "", reverse=True)
        return summaries
