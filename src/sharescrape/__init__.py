"""
sharescrape - normalized transcripts from AI chat share pages.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .exceptions import (
    InvalidInputError,
    LayoutChangedError,
    NavigationTimeoutError,
    ScrapeError,
    UnknownFailureError,
    UnsupportedPlatformError,
)
from .extractor import ChatMessage, Platform, Role, ScrapedResult
from .orchestrator import ScrapeOrchestrator, build_orchestrator

__all__ = [
    "__version__",
    "ChatMessage",
    "Config",
    "InvalidInputError",
    "LayoutChangedError",
    "NavigationTimeoutError",
    "Platform",
    "Role",
    "ScrapeError",
    "ScrapeOrchestrator",
    "ScrapedResult",
    "UnknownFailureError",
    "UnsupportedPlatformError",
    "build_orchestrator",
]
