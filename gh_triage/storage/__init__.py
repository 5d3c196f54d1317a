"""Run log storage."""

from .manager import RunLogWriter

__all__ = ["RunLogWriter"]
