"""
Data models for extracted conversations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    UNKNOWN = "unknown"


class Platform(str, Enum):
    CHATGPT = "chatgpt"
    CLAUDE = "claude"
    GEMINI = "gemini"

    @property
    def label(self) -> str:
        return {"chatgpt": "ChatGPT", "claude": "Claude", "gemini": "Gemini"}[self.value]


@dataclass(slots=True, frozen=True)
class ChatMessage:
    """One turn of a conversation, in document order."""

    role: Role
    content: str  # markdown-flavoured text
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        return data


@dataclass(slots=True, frozen=True)
class ScrapedResult:
    """Normalized transcript of one share page."""

    platform: Platform
    url: str
    title: str
    messages: Tuple[ChatMessage, ...]
    metadata: Optional[Mapping[str, Any]] = field(default=None)

    def __post_init__(self) -> None:
        """Freeze the containers so the result cannot change after creation."""
        object.__setattr__(self, "messages", tuple(self.messages))
        if self.metadata is not None:
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "platform": self.platform.value,
            "url": self.url,
            "title": self.title,
            "messages": [message.to_dict() for message in self.messages],
        }
        if self.metadata is not None:
            data["metadata"] = dict(self.metadata)
        return data
