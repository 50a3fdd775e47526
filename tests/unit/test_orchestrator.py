"""
Unit tests for ScrapeOrchestrator.

Every test checks browser parity: each launched browser is released,
and rejected input never launches one.
"""

import pytest
import structlog
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from prometheus_client import REGISTRY

from sharescrape.exceptions import (
    BrowserUnavailableError,
    InvalidInputError,
    LayoutChangedError,
    NavigationTimeoutError,
    UnknownFailureError,
    UnsupportedPlatformError,
)
from sharescrape.extractor import Platform, Role
from sharescrape.orchestrator import REJECTED_PLATFORM


@pytest.mark.asyncio
async def test_chatgpt_share_page(make_orchestrator, make_page, chatgpt_html):
    page = make_page(chatgpt_html, title="ChatGPT - Sorting lists")
    orchestrator, manager = make_orchestrator(page)

    result = await orchestrator.scrape("  https://chatgpt.com/share/abc  ")

    assert result.platform is Platform.CHATGPT
    assert result.url == "https://chatgpt.com/share/abc"
    assert result.title == "ChatGPT - Sorting lists"
    assert [m.role for m in result.messages] == [Role.USER, Role.ASSISTANT, Role.USER, Role.ASSISTANT]
    assert (manager.opened, manager.closed) == (1, 1)


@pytest.mark.asyncio
async def test_navigation_settings(make_orchestrator, make_page, claude_html):
    page = make_page(claude_html)
    orchestrator, _ = make_orchestrator(page)

    await orchestrator.scrape("https://claude.ai/share/abc")

    page.goto.assert_awaited_once_with(
        "https://claude.ai/share/abc", wait_until="domcontentloaded", timeout=30_000
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("url", [None, "", "   ", 123, ["https://chatgpt.com/share/abc"]])
async def test_invalid_input_never_launches(make_orchestrator, url):
    orchestrator, manager = make_orchestrator()

    with pytest.raises(InvalidInputError, match="Invalid URL provided."):
        await orchestrator.scrape(url)

    assert manager.opened == 0


@pytest.mark.asyncio
async def test_unsupported_platform_never_launches(make_orchestrator):
    orchestrator, manager = make_orchestrator()

    with pytest.raises(UnsupportedPlatformError) as exc_info:
        await orchestrator.scrape("https://example.com/share/abc")

    assert str(exc_info.value) == "No extractor found for URL: https://example.com/share/abc"
    assert manager.opened == 0


@pytest.mark.asyncio
async def test_navigation_timeout_is_not_layout_change(make_orchestrator, make_page, chatgpt_html):
    page = make_page(chatgpt_html, goto_error=PlaywrightTimeoutError("Timeout 30000ms exceeded"))
    orchestrator, manager = make_orchestrator(page)

    with pytest.raises(NavigationTimeoutError) as exc_info:
        await orchestrator.scrape("https://chatgpt.com/share/abc")

    assert not isinstance(exc_info.value, LayoutChangedError)
    assert exc_info.value.status_code == 500
    page.content.assert_not_called()
    assert (manager.opened, manager.closed) == (1, 1)


@pytest.mark.asyncio
async def test_empty_page_is_layout_change(make_orchestrator, make_page, empty_html):
    orchestrator, manager = make_orchestrator(make_page(empty_html, render_timeout=True))

    with pytest.raises(LayoutChangedError) as exc_info:
        await orchestrator.scrape("https://gemini.google.com/share/abc")

    assert exc_info.value.platform == "Gemini"
    assert "E_LAYOUT_CHANGED" in exc_info.value.public_message
    assert (manager.opened, manager.closed) == (1, 1)


@pytest.mark.asyncio
async def test_unexpected_error_is_wrapped(make_orchestrator, make_page, chatgpt_html):
    page = make_page(chatgpt_html, content_error=RuntimeError("Target page, context or browser has been closed"))
    orchestrator, manager = make_orchestrator(page)

    with pytest.raises(UnknownFailureError) as exc_info:
        await orchestrator.scrape("https://chatgpt.com/share/abc")

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert "RuntimeError" in str(exc_info.value)
    assert exc_info.value.public_message == "Internal Server Error"
    assert (manager.opened, manager.closed) == (1, 1)


@pytest.mark.asyncio
async def test_browser_unavailable_propagates(make_orchestrator):
    orchestrator, manager = make_orchestrator(acquire_error=BrowserUnavailableError("no chromium"))

    with pytest.raises(BrowserUnavailableError) as exc_info:
        await orchestrator.scrape("https://claude.ai/share/abc")

    assert exc_info.value.status_code == 500
    assert (manager.opened, manager.closed) == (0, 0)


@pytest.mark.asyncio
async def test_launch_crash_is_unknown_failure(make_orchestrator):
    orchestrator, manager = make_orchestrator(acquire_error=OSError("spawn failed"))

    with pytest.raises(UnknownFailureError):
        await orchestrator.scrape("https://claude.ai/share/abc")

    assert (manager.opened, manager.closed) == (0, 0)


@pytest.mark.asyncio
async def test_request_context_bound_during_scrape(make_orchestrator, make_page, chatgpt_html):
    page = make_page(chatgpt_html)
    seen = {}

    async def content():
        seen.update(structlog.contextvars.get_contextvars())
        return chatgpt_html

    page.content.side_effect = content
    orchestrator, _ = make_orchestrator(page)

    await orchestrator.scrape("https://chatgpt.com/share/abc")

    assert seen["url"] == "https://chatgpt.com/share/abc"
    assert seen["platform"] == "chatgpt"
    assert "url" not in structlog.contextvars.get_contextvars()


@pytest.mark.asyncio
async def test_rejections_are_counted(make_orchestrator):
    orchestrator, _ = make_orchestrator()
    labels = {"platform": REJECTED_PLATFORM, "outcome": "invalid_input"}
    before = REGISTRY.get_sample_value("sharescrape_scrapes_total", labels) or 0.0

    with pytest.raises(InvalidInputError):
        await orchestrator.scrape("")

    assert REGISTRY.get_sample_value("sharescrape_scrapes_total", labels) == before + 1
