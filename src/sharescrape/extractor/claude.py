"""
Claude share-page extractor.

Claude's typography classes ``font-user-message`` and ``font-claude-message``
have outlived several redesigns, so they both locate messages and name the
author.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

from bs4 import Tag

from .dom import content_text, find_timestamp, parse_html
from .models import ChatMessage, Platform, Role, ScrapedResult
from .page import build_result, snapshot, url_matches, wait_for_render

if TYPE_CHECKING:
    from playwright.async_api import Page

USER_CLASS = "font-user-message"
ASSISTANT_CLASS = "font-claude-message"
MESSAGE_SELECTOR = f".{USER_CLASS}, .{ASSISTANT_CLASS}"
MARKDOWN_SELECTOR = ".standard-markdown, .progressive-markdown, .markdown"


def resolve_role(node: Tag) -> Role:
    classes = node.get("class") or []
    if USER_CLASS in classes:
        return Role.USER
    if ASSISTANT_CLASS in classes:
        return Role.ASSISTANT
    return Role.UNKNOWN


def parse_messages(html: str) -> List[ChatMessage]:
    messages: List[ChatMessage] = []
    for node in parse_html(html).select(MESSAGE_SELECTOR):
        text = content_text(node, MARKDOWN_SELECTOR)
        if not text:
            continue
        messages.append(ChatMessage(role=resolve_role(node), content=text, timestamp=find_timestamp(node)))
    return messages


class ClaudeExtractor:
    platform = Platform.CLAUDE
    url_patterns: Tuple[str, ...] = ("claude.ai",)

    def __init__(self, render_timeout_ms: int = 15_000) -> None:
        # Claude's share page is heavier than the others; it gets the longest wait.
        self.render_timeout_ms = render_timeout_ms

    def can_handle(self, url: str) -> bool:
        return url_matches(url, self.url_patterns)

    async def extract(self, page: Page, url: str) -> ScrapedResult:
        rendered = await wait_for_render(page, MESSAGE_SELECTOR, self.render_timeout_ms, platform=self.platform)
        messages = parse_messages(await snapshot(page))
        return await build_result(page, self.platform, url, messages, rendered=rendered)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(render_timeout_ms={self.render_timeout_ms})"
