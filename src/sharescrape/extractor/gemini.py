"""
Gemini share-page extractor.

Gemini renders turns as ``<message-content>`` components (or ARIA articles)
with no author attribute. The only role hint is a header or label near the
message; when none is found the role stays ``unknown``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

from bs4 import Tag

from .dom import content_text, find_timestamp, inner_text, outermost, parse_html
from .models import ChatMessage, Platform, Role, ScrapedResult
from .page import build_result, snapshot, url_matches, wait_for_render

if TYPE_CHECKING:
    from playwright.async_api import Page

MESSAGE_SELECTOR = 'message-content, [role="article"]'
TURN_SELECTOR = ".conversation-turn"
HEADER_SELECTOR = "h2, .role-label, .author-name"
MARKDOWN_SELECTOR = ".markdown"

ASSISTANT_LABELS = ("gemini", "model")
USER_LABELS = ("user", "you")


def _container(node: Tag) -> Optional[Tag]:
    turn = node.css.closest(TURN_SELECTOR)
    return turn if turn is not None else node.parent


def resolve_role(node: Tag) -> Role:
    container = _container(node)
    if container is None:
        return Role.UNKNOWN
    # Headings inside the message belong to its content, not to a role label.
    header = next(
        (
            candidate
            for candidate in container.select(HEADER_SELECTOR)
            if candidate is not node and not any(parent is node for parent in candidate.parents)
        ),
        None,
    )
    if header is None:
        return Role.UNKNOWN

    label = inner_text(header).lower()
    role = Role.UNKNOWN
    if any(word in label for word in ASSISTANT_LABELS):
        role = Role.ASSISTANT
    # A label naming the user wins over one that also mentions the model.
    if any(word in label for word in USER_LABELS):
        role = Role.USER
    return role


def parse_messages(html: str) -> List[ChatMessage]:
    messages: List[ChatMessage] = []
    for node in outermost(parse_html(html).select(MESSAGE_SELECTOR)):
        text = content_text(node, MARKDOWN_SELECTOR)
        if not text:
            continue
        messages.append(ChatMessage(role=resolve_role(node), content=text, timestamp=find_timestamp(node)))
    return messages


class GeminiExtractor:
    platform = Platform.GEMINI
    url_patterns: Tuple[str, ...] = ("gemini.google.com", "g.co/gemini")

    def __init__(self, render_timeout_ms: int = 10_000) -> None:
        self.render_timeout_ms = render_timeout_ms

    def can_handle(self, url: str) -> bool:
        return url_matches(url, self.url_patterns)

    async def extract(self, page: Page, url: str) -> ScrapedResult:
        rendered = await wait_for_render(page, MESSAGE_SELECTOR, self.render_timeout_ms, platform=self.platform)
        messages = parse_messages(await snapshot(page))
        return await build_result(page, self.platform, url, messages, rendered=rendered)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(render_timeout_ms={self.render_timeout_ms})"
