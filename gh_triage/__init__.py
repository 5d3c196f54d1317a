"""Stale issue and pull request triage bot for GitHub repositories."""

__version__ = "0.1.0"
