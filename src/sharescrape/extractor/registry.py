"""
Ordered, read-only set of platform extractors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional, Sequence, Tuple

import structlog

from ..exceptions import UnsupportedPlatformError
from .chatgpt import ChatGPTExtractor
from .claude import ClaudeExtractor
from .gemini import GeminiExtractor
from .protocols import ChatExtractor

if TYPE_CHECKING:
    from ..config.config import ExtractorConfig

logger = structlog.get_logger(__name__)


class ExtractorRegistry:
    """
    Selects the extractor responsible for a URL.

    Candidates are tried in registration order and the first whose
    ``can_handle`` accepts the URL wins. Selection is pure string matching,
    so it runs before any browser is launched.
    """

    def __init__(self, extractors: Sequence[ChatExtractor]) -> None:
        if not extractors:
            raise ValueError("ExtractorRegistry requires at least one extractor")
        for extractor in extractors:
            if not isinstance(extractor, ChatExtractor):
                raise TypeError(f"{extractor!r} does not implement ChatExtractor")
        self._extractors: Tuple[ChatExtractor, ...] = tuple(extractors)

    def select_extractor(self, url: str) -> ChatExtractor:
        for extractor in self._extractors:
            if extractor.can_handle(url):
                logger.debug("Extractor selected", url=url, platform=extractor.platform.value)
                return extractor
        raise UnsupportedPlatformError(url)

    @property
    def extractors(self) -> Tuple[ChatExtractor, ...]:
        return self._extractors

    def __iter__(self) -> Iterator[ChatExtractor]:
        return iter(self._extractors)

    def __len__(self) -> int:
        return len(self._extractors)


def default_registry(config: Optional[ExtractorConfig] = None) -> ExtractorRegistry:
    """The production registry: ChatGPT, Claude, Gemini, in that order."""
    if config is None:
        return ExtractorRegistry([ChatGPTExtractor(), ClaudeExtractor(), GeminiExtractor()])
    return ExtractorRegistry(
        [
            ChatGPTExtractor(render_timeout_ms=config.chatgpt_render_timeout_ms),
            ClaudeExtractor(render_timeout_ms=config.claude_render_timeout_ms),
            GeminiExtractor(render_timeout_ms=config.gemini_render_timeout_ms),
        ]
    )
