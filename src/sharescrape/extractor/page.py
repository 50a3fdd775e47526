"""
Browser-side steps shared by the platform extractors.

Everything that touches the live page lives here; heuristics stay in the
pure ``parse_messages`` functions of each platform module.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence

import structlog
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..exceptions import LayoutChangedError
from .models import ChatMessage, Platform, ScrapedResult

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = structlog.get_logger(__name__)


def url_matches(url: str, patterns: Sequence[str]) -> bool:
    lowered = url.lower()
    return any(pattern in lowered for pattern in patterns)


async def wait_for_render(page: Page, selector: str, timeout_ms: int, *, platform: Platform) -> bool:
    """
    Wait for the platform's render marker.

    A timeout is not an error: the page may have rendered before the wait
    started, so extraction goes ahead either way.
    """
    try:
        await page.wait_for_selector(selector, timeout=timeout_ms)
    except PlaywrightTimeoutError:
        logger.info(
            "Render marker not seen before timeout, extracting anyway",
            platform=platform.value,
            selector=selector,
            timeout_ms=timeout_ms,
        )
        return False
    return True


async def snapshot(page: Page) -> str:
    """Serialize the current DOM. Failures propagate to the caller."""
    return await page.content()


async def build_result(
    page: Page,
    platform: Platform,
    url: str,
    messages: Sequence[ChatMessage],
    *,
    rendered: bool,
    strategy: Optional[str] = None,
) -> ScrapedResult:
    if not messages:
        logger.warning("No messages extracted", platform=platform.value, url=url, rendered=rendered)
        raise LayoutChangedError(platform.label)

    role_counts = Counter(message.role.value for message in messages)
    metadata: Dict[str, Any] = {
        "message_count": len(messages),
        "role_counts": dict(role_counts),
        "extracted_at": datetime.now(timezone.utc).isoformat(),
        "render_marker_seen": rendered,
    }
    if strategy is not None:
        metadata["strategy"] = strategy

    result = ScrapedResult(
        platform=platform,
        url=url,
        title=await page.title(),
        messages=tuple(messages),
        metadata=metadata,
    )
    logger.info(
        "Extraction completed",
        platform=platform.value,
        message_count=len(messages),
        unknown_roles=role_counts.get("unknown", 0),
        strategy=strategy,
    )
    return result
