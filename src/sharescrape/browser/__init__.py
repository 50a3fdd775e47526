"""Browser lifecycle: launch strategies and the per-request browser manager."""

from .manager import BrowserManager, BrowserSession
from .strategies import LaunchStrategy, LocalLaunchStrategy, ServerlessLaunchStrategy, strategy_for

__all__ = [
    "BrowserManager",
    "BrowserSession",
    "LaunchStrategy",
    "LocalLaunchStrategy",
    "ServerlessLaunchStrategy",
    "strategy_for",
]
