"""
Per-request browser lifecycle.

Every scrape owns exactly one browser process from :meth:`BrowserManager.acquire`
to :meth:`BrowserManager.release`. There is no pooling: under load each
concurrent request pays a full launch.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, AsyncIterator, Awaitable, Callable, List, Optional, Sequence, Tuple

import structlog
from playwright.async_api import async_playwright
from playwright_stealth import Stealth

from ..observability import increment
from .strategies import LaunchStrategy, strategy_for

if TYPE_CHECKING:
    from playwright.async_api import Browser, BrowserContext, Page, Playwright

    from ..config.config import BrowserConfig

logger = structlog.get_logger(__name__)


@dataclass
class BrowserSession:
    """A launched browser with its stealth-configured context."""

    playwright: Playwright
    browser: Browser
    context: BrowserContext
    environment: str

    async def new_page(self) -> Page:
        return await self.context.new_page()


class BrowserManager:
    """Launches and tears down one browser per request using the injected strategy."""

    def __init__(
        self,
        strategy: LaunchStrategy,
        *,
        stealth: bool = True,
        playwright_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        self.strategy = strategy
        self.stealth = stealth
        self._playwright_factory = playwright_factory
        self.logger = logger.bind(component="BrowserManager", environment=strategy.environment)

    @classmethod
    def from_config(cls, config: BrowserConfig) -> BrowserManager:
        return cls(strategy_for(config), stealth=config.stealth)

    async def acquire(self) -> BrowserSession:
        """Launch a browser and open a context with stealth applied before any navigation."""
        playwright = await self._playwright_factory().start()
        browser: Optional[Browser] = None
        try:
            browser = await self.strategy.launch(playwright)
            context = await browser.new_context(viewport=self.strategy.viewport)
            if self.stealth:
                await Stealth().apply_stealth_async(context)
        except BaseException:
            steps: List[Tuple[str, Callable[[], Awaitable[None]]]] = []
            if browser is not None:
                steps.append(("browser", browser.close))
            steps.append(("playwright", playwright.stop))
            await self._close_all(steps)
            raise

        increment("browser_launches_total", labels={"environment": self.strategy.environment})
        self.logger.debug("Browser acquired", stealth=self.stealth)
        return BrowserSession(
            playwright=playwright,
            browser=browser,
            context=context,
            environment=self.strategy.environment,
        )

    async def release(self, session: BrowserSession) -> None:
        """Close context, browser and driver. Each step runs even if an earlier one fails."""
        await self._close_all(
            [
                ("context", session.context.close),
                ("browser", session.browser.close),
                ("playwright", session.playwright.stop),
            ]
        )
        self.logger.debug("Browser released")

    async def _close_all(self, steps: Sequence[Tuple[str, Callable[[], Awaitable[None]]]]) -> None:
        for name, close in steps:
            try:
                await close()
            except Exception as e:
                self.logger.error("Failed to close browser resource", resource=name, error=str(e))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[BrowserSession]:
        session = await self.acquire()
        try:
            yield session
        finally:
            await self.release(session)
