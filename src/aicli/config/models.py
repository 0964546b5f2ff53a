"""
Typed configuration sections for aicli.

The JSON document uses camelCase keys (``aiChat``, ``maxTokens``); the
dataclasses expose snake_case attributes and translate in ``to_dict`` /
``from_dict``. ``from_dict`` does not coerce values: whatever the merged
document holds is what the caller gets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

LOG_LEVELS = ("debug", "info", "warn", "error")


class ConfigError(ValueError):
    """Raised when a document cannot form a configuration."""


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise ConfigError(f"Section '{key}' must be an object, got {type(value).__name__}")
    return value


@dataclass
class AIChatSettings:
    """Settings passed to the aichat CLI."""

    model: str = "gpt-4-turbo"
    api_key: str = field(default="", repr=False)
    temperature: float = 0.7
    max_tokens: int = 4000

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AIChatSettings":
        default = cls()
        return cls(
            model=data.get("model", default.model),
            api_key=data.get("apiKey", default.api_key),
            temperature=data.get("temperature", default.temperature),
            max_tokens=data.get("maxTokens", default.max_tokens),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "apiKey": self.api_key,
            "temperature": self.temperature,
            "maxTokens": self.max_tokens,
        }


@dataclass
class LLMFunctionsSettings:
    """Location and declared contents of an llm-functions checkout."""

    directory: str = "llm-functions"
    tools: List[str] = field(default_factory=list)
    agents: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LLMFunctionsSettings":
        default = cls()
        tools = data.get("tools", default.tools)
        agents = data.get("agents", default.agents)
        return cls(
            directory=data.get("directory", default.directory),
            tools=list(tools) if isinstance(tools, list) else tools,
            agents=list(agents) if isinstance(agents, list) else agents,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "directory": self.directory,
            "tools": list(self.tools) if isinstance(self.tools, list) else self.tools,
            "agents": list(self.agents) if isinstance(self.agents, list) else self.agents,
        }


@dataclass
class LoggingSettings:
    level: str = "info"
    file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoggingSettings":
        default = cls()
        log_file = data.get("file", default.file)
        if log_file is not None and not isinstance(log_file, str):
            raise ConfigError(f"logging.file must be a path string, got {type(log_file).__name__}")
        return cls(level=data.get("level", default.level), file=log_file)

    def to_dict(self) -> Dict[str, Any]:
        # "file" is always emitted so it stays a recognized override key
        return {"level": self.level, "file": self.file}


@dataclass
class AppConfig:
    """Top-level configuration bundling chat, function library and logging settings."""

    ai_chat: AIChatSettings = field(default_factory=AIChatSettings)
    llm_functions: LLMFunctionsSettings = field(default_factory=LLMFunctionsSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppConfig":
        if not isinstance(data, Mapping):
            raise ConfigError(f"Configuration must be an object, got {type(data).__name__}")
        return cls(
            ai_chat=AIChatSettings.from_dict(_section(data, "aiChat")),
            llm_functions=LLMFunctionsSettings.from_dict(_section(data, "llmFunctions")),
            logging=LoggingSettings.from_dict(_section(data, "logging")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aiChat": self.ai_chat.to_dict(),
            "llmFunctions": self.llm_functions.to_dict(),
            "logging": self.logging.to_dict(),
        }

    def redacted(self) -> Dict[str, Any]:
        """Return ``to_dict()`` with the API key masked, for display."""
        data = self.to_dict()
        if data["aiChat"]["apiKey"]:
            data["aiChat"]["apiKey"] = "********"
        return data
