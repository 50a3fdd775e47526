"""
Unit tests for ExtractorRegistry.
"""

from unittest.mock import MagicMock

import pytest

from sharescrape.exceptions import UnsupportedPlatformError
from sharescrape.extractor import ChatGPTExtractor, ClaudeExtractor, ExtractorRegistry, GeminiExtractor, default_registry
from sharescrape.config import ExtractorConfig


class TestSelectExtractor:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://chatgpt.com/share/abc", ChatGPTExtractor),
            ("https://chat.openai.com/share/abc", ChatGPTExtractor),
            ("https://claude.ai/share/abc", ClaudeExtractor),
            ("https://gemini.google.com/share/abc", GeminiExtractor),
            ("https://g.co/gemini/share/abc", GeminiExtractor),
        ],
    )
    def test_known_platforms(self, url, expected):
        assert type(default_registry().select_extractor(url)) is expected

    @pytest.mark.parametrize(
        "url",
        ["https://example.com/share/abc", "https://bard.google.com/share/abc", "not a url", "https://g.co/maps"],
    )
    def test_unknown_platforms(self, url):
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            default_registry().select_extractor(url)

        assert exc_info.value.status_code == 400
        assert url in str(exc_info.value)

    def test_first_match_wins(self):
        first = MagicMock()
        first.can_handle.return_value = True
        second = MagicMock()
        second.can_handle.return_value = True

        registry = ExtractorRegistry([first, second])

        assert registry.select_extractor("https://chatgpt.com/share/x") is first
        second.can_handle.assert_not_called()


class TestRegistryConstruction:
    def test_order_is_chatgpt_claude_gemini(self):
        platforms = [extractor.platform.value for extractor in default_registry()]
        assert platforms == ["chatgpt", "claude", "gemini"]

    def test_render_timeouts_from_config(self):
        registry = default_registry(
            ExtractorConfig(chatgpt_render_timeout_ms=1, claude_render_timeout_ms=2, gemini_render_timeout_ms=3)
        )
        assert [extractor.render_timeout_ms for extractor in registry] == [1, 2, 3]

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            ExtractorRegistry([])

    def test_rejects_non_extractors(self):
        with pytest.raises(TypeError):
            ExtractorRegistry([object()])

    def test_extractors_are_read_only(self):
        registry = default_registry()
        assert isinstance(registry.extractors, tuple)
        assert len(registry) == 3
