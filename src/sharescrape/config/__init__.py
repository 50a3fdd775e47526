from .config import (
    BrowserConfig,
    Config,
    ExtractorConfig,
    MonitoringConfig,
    ScrapeConfig,
    ViewportConfig,
    WebConfig,
    detect_environment,
    find_config_file,
    load_config,
)

__all__ = [
    "BrowserConfig",
    "Config",
    "ExtractorConfig",
    "MonitoringConfig",
    "ScrapeConfig",
    "ViewportConfig",
    "WebConfig",
    "detect_environment",
    "find_config_file",
    "load_config",
]
