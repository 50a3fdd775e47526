#!/usr/bin/env python3
"""
Production entry point for sharescrape.

``python main.py`` serves the API with the configured host and port;
``python main.py health`` validates configuration and prints a health report
for container orchestration.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pydantic import ValidationError

from sharescrape import __version__
from sharescrape.config import Config, load_config
from sharescrape.observability import configure_logging
from sharescrape.web.main import run_web_server

logger = structlog.get_logger(__name__)


def _config_path() -> Optional[Path]:
    config_path = os.getenv("SHARESCRAPE_CONFIG")
    return Path(config_path) if config_path else None


def health_check() -> Dict[str, Any]:
    """Validate configuration without launching a browser."""
    try:
        config = load_config(_config_path())
    except (ValidationError, FileNotFoundError) as e:
        return {"status": "unhealthy", "error": str(e), "version": __version__}

    report: Dict[str, Any] = {
        "status": "healthy",
        "version": __version__,
        "environment": config.browser.environment,
    }
    if config.browser.environment == "serverless" and not config.browser.executable_path:
        report["status"] = "unhealthy"
        report["error"] = "serverless environment without a Chromium executable_path"
    return report


def main() -> None:
    if len(sys.argv) > 1 and sys.argv[1] == "health":
        health = health_check()
        print(json.dumps(health, indent=2))
        sys.exit(0 if health["status"] == "healthy" else 1)

    config: Config = load_config(_config_path())
    configure_logging(config.monitoring)
    try:
        run_web_server(host=config.web.host, port=config.web.port, config=config)
    except Exception as e:
        logger.error("Unhandled exception in main", error=str(e), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
