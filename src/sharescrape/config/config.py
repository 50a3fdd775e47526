"""
Configuration management for sharescrape using Pydantic.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

Environment = Literal["local", "serverless"]

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

# Environment variables set by the serverless platforms we deploy to.
SERVERLESS_MARKERS = ("VERCEL", "AWS_LAMBDA_FUNCTION_NAME", "K_SERVICE")


def detect_environment(environ: Optional[Dict[str, str]] = None) -> Environment:
    """Decide between the constrained serverless runtime and a local workstation."""
    env = os.environ if environ is None else environ
    if env.get("SHARESCRAPE_ENV", "").lower() == "production":
        return "serverless"
    if any(env.get(marker) for marker in SERVERLESS_MARKERS):
        return "serverless"
    return "local"


# --- Nested Configuration Models ---


class ViewportConfig(BaseModel):
    width: int = Field(default=1280, gt=0)
    height: int = Field(default=800, gt=0)


class BrowserConfig(BaseModel):
    """Browser launch configuration."""

    environment: Environment = Field(
        default_factory=detect_environment,
        description="Launch strategy: 'serverless' (minimal external binary) or 'local' (bundled Chromium).",
    )
    executable_path: Optional[str] = Field(
        default_factory=lambda: os.getenv("CHROMIUM_EXECUTABLE_PATH"),
        description="Chromium binary used by the serverless strategy.",
    )
    headless: Optional[bool] = Field(
        default=None,
        description="Headless mode. Defaults to True for serverless and False for local runs.",
    )
    stealth: bool = Field(default=True, description="Apply anti-bot-detection patches to every context.")
    extra_args: List[str] = Field(default_factory=list, description="Additional Chromium command-line flags.")
    viewport: Optional[ViewportConfig] = Field(
        default=None,
        description="Fixed viewport. Defaults to 1920x1080 for serverless and 1280x800 for local runs.",
    )

    @model_validator(mode="after")
    def apply_environment_defaults(self) -> BrowserConfig:
        if self.headless is None:
            self.headless = self.environment == "serverless"
        if self.viewport is None:
            if self.environment == "serverless":
                self.viewport = ViewportConfig(width=1920, height=1080)
            else:
                self.viewport = ViewportConfig(width=1280, height=800)
        return self


class ScrapeConfig(BaseModel):
    """Navigation settings for a single scrape request."""

    navigation_timeout_ms: int = Field(default=30_000, gt=0, description="Budget for reaching DOM-ready.")
    wait_until: Literal["commit", "domcontentloaded", "load", "networkidle"] = Field(
        default="domcontentloaded",
        description="Navigation lifecycle event to wait for.",
    )


class ExtractorConfig(BaseModel):
    """Render-wait budgets per platform, in milliseconds."""

    chatgpt_render_timeout_ms: int = Field(default=10_000, ge=0)
    claude_render_timeout_ms: int = Field(default=15_000, ge=0)
    gemini_render_timeout_ms: int = Field(default=10_000, ge=0)


class WebConfig(BaseModel):
    """Configuration for the HTTP API."""

    host: str = Field(default="127.0.0.1", description="Host for the web server.")
    port: int = Field(default=8000, description="Port for the web server.")


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")
    json_logs: bool = Field(default=False, description="Render console logs as JSON.")

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "sharescrape"
    version: str = "0.1.0"
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    scrape: ScrapeConfig = Field(default_factory=ScrapeConfig)
    extractors: ExtractorConfig = Field(default_factory=ExtractorConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    model_config = SettingsConfigDict(env_prefix="SHARESCRAPE_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for path in (current_dir / "config.yaml", current_dir / "config.yml"):
        if path.exists():
            return path
    return None


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from an explicit path, a discovered file, or the environment."""
    if path is not None:
        return Config.from_yaml(path)
    discovered = find_config_file()
    if discovered is not None:
        return Config.from_yaml(discovered)
    return Config()
