"""
Classified failures raised by the scrape pipeline.

Each class carries the ``kind`` code used in logs and metrics and the HTTP
status the web layer maps it to. Browser and extractor code raise these and
never recover from them; only the orchestrator decides what the caller sees.
"""

from __future__ import annotations

from typing import Optional


class ScrapeError(Exception):
    """Base class for every failure surfaced by :func:`ScrapeOrchestrator.scrape`."""

    kind: str = "scrape_error"
    status_code: int = 500

    @property
    def public_message(self) -> str:
        """Message safe to return to API callers."""
        return str(self) or self.kind


class InvalidInputError(ScrapeError):
    """The request did not carry a usable URL."""

    kind = "invalid_input"
    status_code = 400


class UnsupportedPlatformError(ScrapeError):
    """No registered extractor recognises the URL."""

    kind = "unsupported_platform"
    status_code = 400

    def __init__(self, url: str) -> None:
        super().__init__(f"No extractor found for URL: {url}")
        self.url = url


class NavigationTimeoutError(ScrapeError):
    """The page did not reach DOM-ready within the navigation budget."""

    kind = "navigation_timeout"
    status_code = 500

    def __init__(self, url: str, timeout_ms: int) -> None:
        super().__init__(f"Navigation to {url} timed out after {timeout_ms / 1000:g}s")
        self.url = url
        self.timeout_ms = timeout_ms


class LayoutChangedError(ScrapeError):
    """Traversal found no messages; the platform's selectors are likely stale."""

    kind = "layout_changed"
    status_code = 500

    def __init__(self, platform: str, detail: Optional[str] = None) -> None:
        message = f"E_LAYOUT_CHANGED: Could not extract any messages from {platform}."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)
        self.platform = platform


class UnknownFailureError(ScrapeError):
    """Any other failure during launch, navigation or extraction."""

    kind = "unknown_failure"
    status_code = 500

    @property
    def public_message(self) -> str:
        # Raw exception text can contain page content; keep it in the logs only.
        return "Internal Server Error"


class BrowserUnavailableError(UnknownFailureError):
    """The configured browser binary is missing. Deployment error, not retried."""

    kind = "browser_unavailable"

    @property
    def public_message(self) -> str:
        return "Browser is not available on this server"
