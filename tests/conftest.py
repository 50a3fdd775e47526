"""
Shared fixtures for sharescrape tests.

Pages and browsers are substituted with in-memory fakes so extraction and
lifecycle behaviour can be checked without launching Chromium.
"""

from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from sharescrape.config import ScrapeConfig
from sharescrape.extractor import default_registry
from sharescrape.orchestrator import ScrapeOrchestrator

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Tests across the HTTP boundary")


# ============================================================================
# Fixture DOMs
# ============================================================================

CHATGPT_SHARE_HTML = (
    "<html><head><title>ChatGPT - Sorting lists</title></head><body><main>"
    '<article data-testid="conversation-turn-1"><h5 class="sr-only">You said:</h5>'
    '<div data-message-author-role="user"><div class="whitespace-pre-wrap">How do I sort a list in Python?</div></div>'
    "</article>"
    '<article data-testid="conversation-turn-2"><h6 class="sr-only">ChatGPT said:</h6>'
    '<div data-message-author-role="assistant"><div class="markdown prose">'
    "<p>Use <code>sorted()</code>:</p><pre><code>sorted([3, 1, 2])</code></pre>"
    "</div></div></article>"
    '<article data-testid="conversation-turn-3"><h5 class="sr-only">You said:</h5>'
    '<div data-message-author-role="user"><div class="whitespace-pre-wrap">And in reverse?</div></div>'
    "</article>"
    '<article data-testid="conversation-turn-4"><h6 class="sr-only">ChatGPT said:</h6>'
    '<div data-message-author-role="assistant"><div class="markdown prose">'
    "<p>Pass <code>reverse=True</code>.</p>"
    "</div></div></article>"
    "</main></body></html>"
)

CHATGPT_LEGACY_HTML = (
    "<html><body><main>"
    '<div class="text-base"><div data-message-author-role="user">Legacy question</div></div>'
    '<div class="text-base"><div class="markdown"><p>Legacy answer</p></div></div>'
    "</main></body></html>"
)

CLAUDE_SHARE_HTML = (
    "<html><head><title>Summary request | Claude</title></head><body>"
    '<div class="font-user-message"><p>Summarize this article.</p></div>'
    '<div class="font-claude-message"><div class="standard-markdown"><p>Here is a summary.</p>'
    "<ul><li>Point one</li><li>Point two</li></ul></div></div>"
    '<div class="font-user-message"><p>Shorter please.</p></div>'
    '<div class="font-claude-message"><p>Sure.</p></div>'
    '<div class="font-user-message">   </div>'
    "</body></html>"
)

GEMINI_UNLABELLED_HTML = (
    "<html><head><title>Gemini</title></head><body>"
    '<div class="turn"><message-content><div class="markdown"><p>What is a monad?</p></div></message-content></div>'
    '<div class="turn"><message-content><div class="markdown"><p>A monoid in the category of endofunctors.</p>'
    "</div></message-content></div>"
    "<div><message-content>   </message-content></div>"
    "</body></html>"
)

GEMINI_LABELLED_HTML = (
    "<html><head><title>Gemini</title></head><body>"
    '<div class="conversation-turn"><span class="author-name">You</span>'
    "<message-content>What is 2 + 2?</message-content></div>"
    '<div class="conversation-turn"><span class="author-name">Gemini</span>'
    '<div role="article"><message-content><div class="markdown"><p>4</p></div></message-content></div></div>'
    "</body></html>"
)

EMPTY_SHARE_HTML = (
    "<html><head><title>Shared conversation</title></head><body>"
    "<div id='root'><p>This conversation is no longer available.</p></div>"
    "</body></html>"
)


@pytest.fixture
def chatgpt_html():
    return CHATGPT_SHARE_HTML


@pytest.fixture
def chatgpt_legacy_html():
    return CHATGPT_LEGACY_HTML


@pytest.fixture
def claude_html():
    return CLAUDE_SHARE_HTML


@pytest.fixture
def gemini_unlabelled_html():
    return GEMINI_UNLABELLED_HTML


@pytest.fixture
def gemini_labelled_html():
    return GEMINI_LABELLED_HTML


@pytest.fixture
def empty_html():
    return EMPTY_SHARE_HTML


# ============================================================================
# Browser Fakes
# ============================================================================


class FakePage:
    """Stand-in for a Playwright page serving a fixed DOM snapshot."""

    def __init__(
        self,
        html: str,
        title: str = "Shared conversation",
        *,
        render_timeout: bool = False,
        goto_error: Optional[BaseException] = None,
        content_error: Optional[BaseException] = None,
    ) -> None:
        self.goto = AsyncMock(side_effect=goto_error)
        self.wait_for_selector = AsyncMock(
            side_effect=PlaywrightTimeoutError("Timeout exceeded") if render_timeout else None
        )
        self.content = AsyncMock(return_value=html, side_effect=content_error)
        self.title = AsyncMock(return_value=title)


class FakeBrowserManager:
    """Counts acquisitions and releases; hands out sessions serving ``page``."""

    def __init__(self, page: Optional[FakePage] = None, *, acquire_error: Optional[BaseException] = None) -> None:
        self.page = page
        self.acquire_error = acquire_error
        self.opened = 0
        self.closed = 0

    async def acquire(self):
        if self.acquire_error is not None:
            raise self.acquire_error
        self.opened += 1
        session = MagicMock()
        session.new_page = AsyncMock(return_value=self.page)
        return session

    async def release(self, session) -> None:
        self.closed += 1


@pytest.fixture
def make_page():
    return FakePage


@pytest.fixture
def make_orchestrator():
    """Build a production-registry orchestrator around a fake browser manager."""

    def _factory(page: Optional[FakePage] = None, **manager_kwargs):
        manager = FakeBrowserManager(page, **manager_kwargs)
        orchestrator = ScrapeOrchestrator(default_registry(), manager, ScrapeConfig())
        return orchestrator, manager

    return _factory
