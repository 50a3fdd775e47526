"""
Launch strategies for the two deployment environments.

A strategy is picked once from configuration and injected into the
:class:`BrowserManager`; acquisition never branches on the environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Protocol

import structlog
from playwright.async_api import Error as PlaywrightError

from ..exceptions import BrowserUnavailableError

if TYPE_CHECKING:
    from playwright.async_api import Browser, Playwright

    from ..config.config import BrowserConfig

logger = structlog.get_logger(__name__)

# Minimal-footprint flags for sandboxless, shared-memory-starved containers.
SERVERLESS_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--no-zygote",
    "--single-process",
    "--hide-scrollbars",
    "--disable-web-security",
    "--disable-blink-features=AutomationControlled",
)

LOCAL_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
)

_MISSING_BINARY_MARKERS = ("executable doesn't exist", "looks like playwright was just installed")


class LaunchStrategy(Protocol):
    environment: str

    @property
    def viewport(self) -> Dict[str, int]: ...

    async def launch(self, playwright: Playwright) -> Browser: ...


class ServerlessLaunchStrategy:
    """Headless Chromium from an externally provided binary."""

    environment = "serverless"

    def __init__(self, config: BrowserConfig) -> None:
        self.config = config

    @property
    def viewport(self) -> Dict[str, int]:
        assert self.config.viewport is not None
        return {"width": self.config.viewport.width, "height": self.config.viewport.height}

    @property
    def args(self) -> List[str]:
        return [*SERVERLESS_ARGS, *self.config.extra_args]

    async def launch(self, playwright: Playwright) -> Browser:
        if not self.config.executable_path:
            raise BrowserUnavailableError(
                "Serverless launch requires a Chromium binary; set CHROMIUM_EXECUTABLE_PATH "
                "or browser.executable_path"
            )
        logger.info("Launching Chromium (serverless mode)", executable_path=self.config.executable_path)
        return await playwright.chromium.launch(
            executable_path=self.config.executable_path,
            headless=True,
            args=self.args,
        )


class LocalLaunchStrategy:
    """Playwright's bundled Chromium, visible by default for debugging."""

    environment = "local"

    def __init__(self, config: BrowserConfig) -> None:
        self.config = config

    @property
    def viewport(self) -> Dict[str, int]:
        assert self.config.viewport is not None
        return {"width": self.config.viewport.width, "height": self.config.viewport.height}

    @property
    def args(self) -> List[str]:
        return [*LOCAL_ARGS, *self.config.extra_args]

    async def launch(self, playwright: Playwright) -> Browser:
        logger.info("Launching Chromium (local mode)", headless=self.config.headless)
        try:
            return await playwright.chromium.launch(
                headless=bool(self.config.headless),
                executable_path=self.config.executable_path or None,
                args=self.args,
            )
        except PlaywrightError as e:
            if any(marker in str(e).lower() for marker in _MISSING_BINARY_MARKERS):
                logger.error("Chromium is not installed for local runs", error=str(e))
                raise BrowserUnavailableError(
                    "Chromium is not installed. Run `playwright install chromium` and retry."
                ) from e
            raise


def strategy_for(config: BrowserConfig) -> LaunchStrategy:
    if config.environment == "serverless":
        return ServerlessLaunchStrategy(config)
    return LocalLaunchStrategy(config)
