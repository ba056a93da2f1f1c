"""Configuration Management Package

Config is looked up in order:

1. .genai-config.json in the current directory (project-specific)
2. .genai-config.json in the home directory (global default)
3. Built-in defaults
"""

import json
import os
import sys
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from commit_sensei.usage import USAGE_FILENAME

VALID_PROVIDERS = {"auto", "gemini", "claude"}

GEMINI_KEY_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")
CLAUDE_KEY_VARS = ("ANTHROPIC_API_KEY",)


@dataclass
class Config:
    """User configuration with sensible defaults."""
    provider: str = "auto"
    model: Optional[str] = None
    api_key: Optional[str] = None
    emoji: bool = True
    enforce_minute_limits: bool = True
    usage_file: str = USAGE_FILENAME
    max_subject_length: int = 50

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if self.provider not in VALID_PROVIDERS:
            warnings.append(f"Invalid provider '{self.provider}', using '{defaults.provider}'")
            self.provider = defaults.provider

        if self.api_key is not None and (not isinstance(self.api_key, str) or not self.api_key.strip()):
            warnings.append("Empty api_key ignored")
            self.api_key = None

        for name in ("emoji", "enforce_minute_limits"):
            if not isinstance(getattr(self, name), bool):
                warnings.append(f"Invalid {name} '{getattr(self, name)}', using {str(getattr(defaults, name)).lower()}")
                setattr(self, name, getattr(defaults, name))

        if not isinstance(self.usage_file, str) or not self.usage_file.strip():
            warnings.append(f"Invalid usage_file '{self.usage_file}', using '{defaults.usage_file}'")
            self.usage_file = defaults.usage_file

        if (isinstance(self.max_subject_length, bool) or not isinstance(self.max_subject_length, int)
                or self.max_subject_length <= 0):
            warnings.append(f"Invalid max_subject_length '{self.max_subject_length}', using {defaults.max_subject_length}")
            self.max_subject_length = defaults.max_subject_length

        return warnings

    def resolve_api_key(self, provider: str) -> Optional[str]:
        """API key for `provider`: config file first, then environment.

        The stored api_key belongs to the configured provider; with "auto"
        that is Gemini.
        """
        key_owner = "gemini" if self.provider == "auto" else self.provider
        if self.api_key and provider == key_owner:
            return self.api_key
        env_vars = CLAUDE_KEY_VARS if provider == "claude" else GEMINI_KEY_VARS
        for var in env_vars:
            if os.environ.get(var):
                return os.environ[var]
        return None

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        # The original tool stored the key as "apiKey"
        if "apiKey" in data and "api_key" not in filtered:
            filtered["api_key"] = data["apiKey"]
        config = cls(**filtered)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_FILENAME = ".genai-config.json"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        local_path = Path.cwd() / self.CONFIG_FILENAME
        if local_path.exists():
            self._config = self._load_from_file(local_path)
            self._config_path = local_path
            return self._config

        home_path = Path.home() / self.CONFIG_FILENAME
        if home_path.exists():
            self._config = self._load_from_file(home_path)
            self._config_path = home_path
            return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (json.JSONDecodeError, ValueError, OSError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()

    def save(self, config: Config, global_config: bool = False) -> Path:
        path = Path.home() / self.CONFIG_FILENAME if global_config else Path.cwd() / self.CONFIG_FILENAME
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=2)
        self._config = config
        self._config_path = path
        return path

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def save_config(config: Config, global_config: bool = False) -> Path:
    return _manager.save(config, global_config)


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "load_config",
    "save_config",
    "get_config_path",
    "VALID_PROVIDERS",
    "GEMINI_KEY_VARS",
    "CLAUDE_KEY_VARS",
]
