"""Configuration management for aicli."""

from .models import (
    LOG_LEVELS,
    AIChatSettings,
    AppConfig,
    ConfigError,
    LLMFunctionsSettings,
    LoggingSettings,
)
from .store import (
    DEFAULT_CONFIG_PATH,
    deep_merge,
    default_config,
    load_config,
    save_config,
)

__all__ = [
    "LOG_LEVELS",
    "AIChatSettings",
    "AppConfig",
    "ConfigError",
    "LLMFunctionsSettings",
    "LoggingSettings",
    "DEFAULT_CONFIG_PATH",
    "deep_merge",
    "default_config",
    "load_config",
    "save_config",
]
