"""
Scrape orchestrator: the single entry point from a URL to a transcript.

Stages run strictly in order: validate, select extractor, launch browser,
navigate, extract, release. The browser is released on every exit path.
Nothing is retried; callers resubmit.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Optional, Protocol

import structlog
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .browser import BrowserManager
from .config import Config, ScrapeConfig
from .exceptions import (
    InvalidInputError,
    NavigationTimeoutError,
    ScrapeError,
    UnknownFailureError,
    UnsupportedPlatformError,
)
from .extractor import ChatExtractor, ExtractorRegistry, ScrapedResult, default_registry
from .observability import histogram, increment

if TYPE_CHECKING:
    from playwright.async_api import Page

    from .browser import BrowserSession

logger = structlog.get_logger(__name__)

# Metric label for requests rejected before an extractor was chosen.
REJECTED_PLATFORM = "none"


class BrowserProvider(Protocol):
    async def acquire(self) -> BrowserSession: ...

    async def release(self, session: BrowserSession) -> None: ...


class ScrapeOrchestrator:
    """
    Turns a share-page URL into a :class:`ScrapedResult`.

    The registry and browser provider are injected, so tests can substitute
    either without touching global state.

    Note: there is no caller-initiated cancellation. If an HTTP client goes
    away mid-request, the browser keeps running until navigation or the
    render wait times out and the release step runs.
    """

    def __init__(
        self,
        registry: ExtractorRegistry,
        browser_manager: BrowserProvider,
        scrape_config: Optional[ScrapeConfig] = None,
    ) -> None:
        self.registry = registry
        self.browser_manager = browser_manager
        self.scrape_config = scrape_config or ScrapeConfig()
        self.logger = logger.bind(component="ScrapeOrchestrator")

    async def scrape(self, url: Any) -> ScrapedResult:
        if not isinstance(url, str) or not url.strip():
            raise self._rejected(InvalidInputError("Invalid URL provided."))
        url = url.strip()

        # Raises UnsupportedPlatformError before any browser cost is paid.
        try:
            extractor = self.registry.select_extractor(url)
        except UnsupportedPlatformError as e:
            self._rejected(e)
            raise

        with structlog.contextvars.bound_contextvars(url=url, platform=extractor.platform.value):
            return await self._run(extractor, url)

    async def _run(self, extractor: ChatExtractor, url: str) -> ScrapedResult:
        platform = extractor.platform.value
        started = time.monotonic()
        try:
            session = await self.browser_manager.acquire()
            try:
                page = await session.new_page()
                await self._navigate(page, url)
                result = await extractor.extract(page, url)
            finally:
                await self.browser_manager.release(session)
        except ScrapeError as e:
            self.logger.warning("Scrape failed", kind=e.kind, error=str(e))
            increment("scrapes_total", labels={"platform": platform, "outcome": e.kind})
            raise
        except Exception as e:
            self.logger.error(
                "Scrape failed", kind=UnknownFailureError.kind, error_type=type(e).__name__, exc_info=True
            )
            increment("scrapes_total", labels={"platform": platform, "outcome": UnknownFailureError.kind})
            raise UnknownFailureError(f"{type(e).__name__}: {e}") from e
        finally:
            histogram("scrape_duration_seconds", time.monotonic() - started, labels={"platform": platform})

        increment("scrapes_total", labels={"platform": platform, "outcome": "success"})
        increment("messages_extracted_total", len(result.messages), labels={"platform": platform})
        self.logger.info("Scrape completed", message_count=len(result.messages), title=result.title)
        return result

    def _rejected(self, error: ScrapeError) -> ScrapeError:
        """Count a request turned away before any browser was launched."""
        self.logger.info("Scrape rejected", kind=error.kind, error=str(error))
        increment("scrapes_total", labels={"platform": REJECTED_PLATFORM, "outcome": error.kind})
        return error

    async def _navigate(self, page: Page, url: str) -> None:
        timeout_ms = self.scrape_config.navigation_timeout_ms
        try:
            await page.goto(url, wait_until=self.scrape_config.wait_until, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeoutError(url, timeout_ms) from e


def build_orchestrator(config: Config) -> ScrapeOrchestrator:
    """Wire the production orchestrator from configuration, once at startup."""
    return ScrapeOrchestrator(
        registry=default_registry(config.extractors),
        browser_manager=BrowserManager.from_config(config.browser),
        scrape_config=config.scrape,
    )
