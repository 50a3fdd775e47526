"""
Protocol implemented by every platform extractor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Tuple, runtime_checkable

from .models import Platform, ScrapedResult

if TYPE_CHECKING:
    from playwright.async_api import Page


@runtime_checkable
class ChatExtractor(Protocol):
    """Recognises a platform's share URLs and turns a loaded page into a transcript."""

    platform: Platform
    url_patterns: Tuple[str, ...]
    render_timeout_ms: int

    def can_handle(self, url: str) -> bool:
        """Pure URL check; must not touch the network."""
        ...

    async def extract(self, page: Page, url: str) -> ScrapedResult:
        """Extract messages from an already-navigated page.

        Raises:
            LayoutChangedError: if no messages were found.
        """
        ...
