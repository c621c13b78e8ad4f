"""Configuration loading for phonefwd.

All user-editable settings (seed rules, console, logging) live in a single
JSON file so they can be tweaked without touching Python.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from dotenv import load_dotenv

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Default location; PHONEFWD_CONFIG (environment or .env) or --config override it.
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

CONFIG_ENV_VAR = "PHONEFWD_CONFIG"
LOG_LEVEL_ENV_VAR = "PHONEFWD_LOG_LEVEL"


@dataclass(frozen=True)
class ConsoleSettings:
    """Interactive console settings."""

    prompt: str = "phonefwd> "
    banner: bool = True


@dataclass(frozen=True)
class Settings:
    """Everything the application reads from config.json."""

    rules: list = field(default_factory=list)
    console: ConsoleSettings = field(default_factory=ConsoleSettings)
    # Logging configuration (optional), kept raw like the JSON section.
    logging: dict = field(default_factory=dict)
    config_path: Optional[str] = None
    # PHONEFWD_LOG_LEVEL; turns logging on like --log-level does.
    log_level: Optional[str] = None


def _load_json_config(path: str) -> dict:
    """Load the JSON config file with a flat, user-friendly schema."""

    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _console_settings(raw: dict[str, Any]) -> ConsoleSettings:
    defaults = ConsoleSettings()
    return ConsoleSettings(
        prompt=str(raw.get("prompt", defaults.prompt)),
        banner=bool(raw.get("banner", defaults.banner)),
    )


def resolve_config_path(path: Optional[str] = None) -> tuple[str, bool]:
    """Return (config path, explicitly requested)."""

    if path:
        return path, True

    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return env_path, True
    return CONFIG_PATH, False


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from ``path``, the environment, or the default file.

    Only an explicitly requested file has to exist; a missing default file
    yields built-in defaults so the console runs out of the box.
    """

    load_dotenv()
    config_path, explicit = resolve_config_path(path)
    if not explicit and not os.path.exists(config_path):
        return Settings(log_level=os.getenv(LOG_LEVEL_ENV_VAR) or None)

    config = _load_json_config(config_path)
    return Settings(
        rules=list(config.get("rules", [])),
        console=_console_settings(config.get("console", {})),
        logging=dict(config.get("logging", {})),
        config_path=config_path,
        log_level=os.getenv(LOG_LEVEL_ENV_VAR) or None,
    )
