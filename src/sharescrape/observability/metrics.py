"""
Defines Prometheus metrics for the scrape service.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram
from prometheus_client import generate_latest

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Test suites import this module repeatedly; reuse an already-registered
# collector instead of raising on duplicate registration.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "scrapes_total": Counter(
            "sharescrape_scrapes_total",
            "Scrape requests by platform and outcome",
            ["platform", "outcome"],
        ),
        "scrape_duration_seconds": Histogram(
            "sharescrape_scrape_duration_seconds",
            "Wall-clock time of a scrape from browser launch to release",
            ["platform"],
            buckets=(1, 2.5, 5, 10, 15, 20, 30, 45, 60, 90),
        ),
        "browser_launches_total": Counter(
            "sharescrape_browser_launches_total",
            "Browser processes launched",
            ["environment"],
        ),
        "messages_extracted_total": Counter(
            "sharescrape_messages_extracted_total",
            "Messages extracted from share pages",
            ["platform"],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()


def export_prometheus() -> bytes:
    """Export metrics in Prometheus text format."""
    return generate_latest()
