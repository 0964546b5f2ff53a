#!/usr/bin/env python3
"""
Config Store

Builds the aicli configuration from compiled-in defaults, environment
variables and an optional JSON override file (``~/.aicli/config.json``), and
writes configurations back to disk.

Loading never fails from the caller's point of view: a missing file is
ignored, an unreadable or malformed one is logged and ignored. Override keys
that are not part of the default structure are dropped.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..integrations.process import CommandResult
from .models import (
    AIChatSettings,
    AppConfig,
    ConfigError,
    LLMFunctionsSettings,
    LoggingSettings,
)

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_DIR = Path.home() / ".aicli"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.json"
DEFAULT_FUNCTIONS_DIR = PROJECT_ROOT / "llm-functions"

DEFAULT_TOOLS = ["get_current_weather.sh", "execute_command.sh"]
DEFAULT_AGENTS = ["todo", "coder"]


def default_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Return a fresh default configuration.

    ``AICHAT_MODEL``, ``OPENAI_API_KEY``, ``LLM_FUNCTIONS_DIR`` and
    ``LOG_LEVEL`` replace the corresponding compiled-in values when set to a
    non-empty string.
    """
    env = os.environ if env is None else env
    return AppConfig(
        ai_chat=AIChatSettings(
            model=env.get("AICHAT_MODEL") or "gpt-4-turbo",
            api_key=env.get("OPENAI_API_KEY") or "",
            temperature=0.7,
            max_tokens=4000,
        ),
        llm_functions=LLMFunctionsSettings(
            directory=env.get("LLM_FUNCTIONS_DIR") or str(DEFAULT_FUNCTIONS_DIR),
            tools=list(DEFAULT_TOOLS),
            agents=list(DEFAULT_AGENTS),
        ),
        logging=LoggingSettings(level=env.get("LOG_LEVEL") or "info"),
    )


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` onto ``base`` and return a new dict.

    Only keys already present in ``base`` are considered. When both values at a
    key are mappings the merge recurses; any other value in ``override``
    (scalar, list, None, or a type that differs from base) replaces the base
    value outright. Lists are never concatenated.
    """
    result = copy.deepcopy(dict(base))

    for key, value in override.items():
        if key not in base:
            continue
        base_value = base[key]
        if isinstance(base_value, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = copy.deepcopy(value)

    return result


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_config(
    config_path: Union[str, Path], defaults: Optional[AppConfig] = None
) -> AppConfig:
    """Load the configuration at ``config_path`` merged onto the defaults.

    Args:
        config_path: Path to the JSON override file; need not exist
        defaults: Base configuration, ``default_config()`` when omitted

    Returns:
        A fully populated AppConfig. Read or parse failures fall back to the
        defaults with a warning.
    """
    base = defaults if defaults is not None else default_config()
    path = Path(config_path)

    if not path.exists():
        logger.debug(f"No configuration file at {path}, using defaults")
        return base

    try:
        user_config = _read_json(path)
    except (OSError, ValueError) as e:
        logger.warning(f"Error loading configuration file {path}: {e}")
        return base

    if not isinstance(user_config, dict):
        logger.warning(
            f"Ignoring configuration file {path}: expected a JSON object, "
            f"got {type(user_config).__name__}"
        )
        return base

    merged = deep_merge(base.to_dict(), user_config)
    try:
        config = AppConfig.from_dict(merged)
    except ConfigError as e:
        logger.warning(f"Ignoring configuration file {path}: {e}")
        return base

    logger.debug(f"Loaded configuration from {path}")
    return config


def save_config(config: AppConfig, config_path: Union[str, Path]) -> CommandResult:
    """Write ``config`` to ``config_path`` as indented JSON.

    Parent directories are created as needed. The file is written to a
    temporary sibling and moved into place, so an existing file is either
    fully replaced or left as it was.
    """
    path = Path(config_path)
    tmp_name: Optional[str] = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
            f.write("\n")
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        logger.error(f"Error saving configuration to {path}: {e}")
        return CommandResult(success=False, error=str(e))
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass

    logger.info(f"Configuration saved to {path}")
    return CommandResult(success=True, data=str(path))
