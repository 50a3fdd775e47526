"""
ChatGPT share-page extractor.

Turns are ``[data-testid^="conversation-turn-"]`` containers whose author is
marked by a nested ``data-message-author-role`` attribute. Older layouts
without turn containers fall back to ``main div.text-base`` blocks, where the
same attribute is the only trustworthy role marker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

import structlog
from bs4 import Tag

from .dom import content_text, find_timestamp, outermost, parse_html
from .models import ChatMessage, Platform, Role, ScrapedResult
from .page import build_result, snapshot, url_matches, wait_for_render

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = structlog.get_logger(__name__)

TURN_SELECTOR = '[data-testid^="conversation-turn-"]'
FALLBACK_SELECTOR = "main div.text-base"
ROLE_ATTRIBUTE = "data-message-author-role"
MARKDOWN_SELECTOR = ".markdown"

STRATEGY_TURNS = "turns"
STRATEGY_TEXT_BASE = "text_base"

_ROLES = {"user": Role.USER, "assistant": Role.ASSISTANT, "system": Role.SYSTEM}


def resolve_role(node: Tag) -> Role:
    """Author-role attribute on the node or its first marked descendant, else unknown."""
    marker = node if node.has_attr(ROLE_ATTRIBUTE) else node.select_one(f"[{ROLE_ATTRIBUTE}]")
    if marker is None:
        return Role.UNKNOWN
    value = marker.get(ROLE_ATTRIBUTE)
    if not isinstance(value, str):
        return Role.UNKNOWN
    return _ROLES.get(value.strip().lower(), Role.UNKNOWN)


def _to_message(node: Tag) -> ChatMessage:
    return ChatMessage(
        role=resolve_role(node),
        content=content_text(node, MARKDOWN_SELECTOR),
        timestamp=find_timestamp(node),
    )


def parse_messages(html: str) -> Tuple[List[ChatMessage], str]:
    """Return the messages in document order and the name of the strategy that found them."""
    soup = parse_html(html)

    turns = soup.select(TURN_SELECTOR)
    if turns:
        return [_to_message(turn) for turn in turns], STRATEGY_TURNS

    # Class names are unstable on ChatGPT; this only covers pre-testid layouts.
    blocks = outermost(soup.select(FALLBACK_SELECTOR))
    return [_to_message(block) for block in blocks], STRATEGY_TEXT_BASE


class ChatGPTExtractor:
    platform = Platform.CHATGPT
    url_patterns: Tuple[str, ...] = ("chatgpt.com", "openai.com")

    def __init__(self, render_timeout_ms: int = 10_000) -> None:
        self.render_timeout_ms = render_timeout_ms

    def can_handle(self, url: str) -> bool:
        return url_matches(url, self.url_patterns)

    async def extract(self, page: Page, url: str) -> ScrapedResult:
        rendered = await wait_for_render(page, TURN_SELECTOR, self.render_timeout_ms, platform=self.platform)
        messages, strategy = parse_messages(await snapshot(page))
        if strategy == STRATEGY_TEXT_BASE and messages:
            logger.warning("Using class-name fallback for ChatGPT", url=url, message_count=len(messages))
        return await build_result(page, self.platform, url, messages, rendered=rendered, strategy=strategy)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(render_timeout_ms={self.render_timeout_ms})"
