"""Paginated triage runs."""
