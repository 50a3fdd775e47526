"""
Platform extractors for AI chat share pages.

Each extractor recognises its platform's share URLs and converts a loaded
page into a :class:`ScrapedResult`:

- ChatGPT: ``data-message-author-role`` on conversation-turn containers
- Claude: ``font-user-message`` / ``font-claude-message`` typography classes
- Gemini: ``<message-content>`` nodes with header-label role hints
"""

from .chatgpt import ChatGPTExtractor
from .claude import ClaudeExtractor
from .gemini import GeminiExtractor
from .models import ChatMessage, Platform, Role, ScrapedResult
from .protocols import ChatExtractor
from .registry import ExtractorRegistry, default_registry

__all__ = [
    "ChatExtractor",
    "ChatGPTExtractor",
    "ChatMessage",
    "ClaudeExtractor",
    "ExtractorRegistry",
    "GeminiExtractor",
    "Platform",
    "Role",
    "ScrapedResult",
    "default_registry",
]
