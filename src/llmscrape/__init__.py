"""LLMScrape package."""

from llmscrape.exceptions import (
    ConfigurationError,
    DependencyError,
    PackageError,
    PageLoadError,
    SettingsError,
)
from llmscrape.logging import configure_logging, get_logger
from llmscrape.prompts import DEFAULT_PROMPT
from llmscrape.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("llmscrape")

__all__ = [
    "DEFAULT_PROMPT",
    "ConfigurationError",
    "DependencyError",
    "PackageError",
    "PageLoadError",
    "Settings",
    "SettingsError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
]
