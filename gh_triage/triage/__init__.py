"""Triage rule engine."""

from .rules import (
    Act,
    CloseAction,
    CommentAction,
    Decision,
    LockAction,
    Skip,
    TriageAction,
    decide,
    decide_close_issue,
    decide_close_pull_request,
    decide_lock_issue,
)

__all__ = [
    "Act",
    "CloseAction",
    "CommentAction",
    "Decision",
    "LockAction",
    "Skip",
    "TriageAction",
    "decide",
    "decide_close_issue",
    "decide_close_pull_request",
    "decide_lock_issue",
]
