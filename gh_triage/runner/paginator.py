"""Sequential page scanning."""

import logging
from collections.abc import Callable
from enum import Enum
from typing import TypeVar

from rich.console import Console

from ..github_client.models import GitHubIssue, Page
from .retry import with_retry

console = Console()
logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=GitHubIssue)


class ScanOutcome(str, Enum):
    EXHAUSTED = "exhausted"
    STOPPED = "stopped"


def scan(
    fetch_first_page: Callable[[], Page[ItemT]],
    fetch_next_page: Callable[[Page[ItemT]], Page[ItemT]],
    has_next_page: Callable[[Page[ItemT]], bool],
    on_page: Callable[[list[ItemT], int], bool],
    item_name: str = "items",
) -> ScanOutcome:
    """Walk a listing page by page.

    Args:
        fetch_first_page: Fetches the first page
        fetch_next_page: Fetches the page after the one given
        has_next_page: Whether a page is followed by another
        on_page: Handles a page's items and listing page number; returns
            True to stop early
        item_name: Plural noun used in console output

    Returns:
        STOPPED when ``on_page`` asked to stop, EXHAUSTED otherwise

    Raises:
        Exception: A page fetch that still failed after retries
    """
    page = with_retry(fetch_first_page, description="Fetching first page")

    while True:
        logger.debug("--- Page %d: %s", page.number, page.items)

        if not page.items:
            console.print(f"\nFound no more {item_name}!")
            return ScanOutcome.EXHAUSTED

        console.print(
            f"\nProcessing page {page.number}, found {len(page.items)} {item_name}..."
        )
        done = on_page(page.items, page.number)
        console.print(f"Done processing page {page.number}.")

        if done:
            return ScanOutcome.STOPPED

        if not has_next_page(page):
            console.print(f"\nFound no more {item_name}!")
            return ScanOutcome.EXHAUSTED

        current = page
        page = with_retry(
            lambda: fetch_next_page(current),
            description=f"Fetching page {current.number + 1}",
        )
