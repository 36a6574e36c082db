"""
Configuration management

Settings are merged from several sources, later ones overriding earlier ones:
- Built-in defaults
- YAML or JSON files in the configuration directory
- TASKOPTS_* environment variables
- Values set at runtime (e.g. from command-line flags)
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .core import TaskError

ENV_PREFIX = "TASKOPTS_"
ENV_KEY_SEPARATOR = "__"


class ConfigError(TaskError):
    """Exception raised for configuration-related errors."""


@dataclass
class ConfigSource:
    """Represents a configuration source with priority and metadata."""

    name: str
    data: Dict[str, Any]
    priority: int = 0
    source_type: str = "unknown"
    file_path: Optional[Path] = None


class Config:
    """
    Layered configuration with dot-notation access.

    Example:
        config = Config().load()
        config.get("output.format")  # "text"
    """

    def __init__(self, config_dir: Union[str, Path] = None):
        self.config_dir = Path(config_dir) if config_dir else Path.cwd() / "config"
        self.sources: List[ConfigSource] = []
        self._data: Dict[str, Any] = {}
        self._loaded = False

    def load(self, reload: bool = False) -> "Config":
        """
        Load configuration from all available sources.

        Args:
            reload: Force reload even if already loaded

        Returns:
            Self for method chaining
        """
        if self._loaded and not reload:
            return self

        runtime_sources = [s for s in self.sources if s.source_type == "runtime"]
        self.sources.clear()

        self._load_default_config()  # Priority 0
        self._load_file_configs()  # Priority 10-40
        self._load_environment_vars()  # Priority 60
        self.sources.extend(runtime_sources)  # Priority 100

        self._merge_sources()
        self._loaded = True

        return self

    def _load_default_config(self):
        defaults = {
            "logging": {
                "level": "WARNING",
                "format": "%(levelname)s %(name)s: %(message)s",
            },
            "tasks": {"discovery_paths": ["taskopts.tasks"]},
            "output": {"format": "text"},
        }

        self.sources.append(
            ConfigSource(
                name="defaults", data=defaults, priority=0, source_type="internal"
            )
        )

    def _load_file_configs(self):
        environment = self._get_environment()
        config_files = [
            ("config.yaml", 10),
            ("config.yml", 10),
            ("config.json", 10),
            (f"config.{environment}.yaml", 20),
            (f"config.{environment}.yml", 20),
            (f"config.{environment}.json", 20),
            ("local.config.yaml", 30),
            ("local.config.yml", 30),
            ("local.config.json", 30),
            (".taskopts.yaml", 40),
            (".taskopts.yml", 40),
            (".taskopts.json", 40),
        ]

        for filename, priority in config_files:
            file_path = self.config_dir / filename
            if file_path.exists():
                try:
                    data = self._load_file(file_path)
                except (OSError, ValueError, yaml.YAMLError) as e:
                    raise ConfigError(
                        f"Error loading config file {file_path}: {e}", cause=e
                    )
                if not isinstance(data, dict):
                    raise ConfigError(
                        f"Config file {file_path} must contain a mapping at the top level"
                    )
                self.sources.append(
                    ConfigSource(
                        name=filename,
                        data=data,
                        priority=priority,
                        source_type="file",
                        file_path=file_path,
                    )
                )

    def _load_environment_vars(self):
        env_data = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX) or key == f"{ENV_PREFIX}ENV":
                continue

            # TASKOPTS_OUTPUT__FORMAT -> output.format
            config_key = key[len(ENV_PREFIX) :].lower().replace(ENV_KEY_SEPARATOR, ".")

            try:
                parsed_value = json.loads(value)
            except ValueError:
                parsed_value = value

            self._set_nested_value(env_data, config_key, parsed_value)

        if env_data:
            self.sources.append(
                ConfigSource(
                    name="environment",
                    data=env_data,
                    priority=60,
                    source_type="environment",
                )
            )

    def _load_file(self, file_path: Path) -> Dict[str, Any]:
        with open(file_path, "r", encoding="utf-8") as f:
            if file_path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f) or {}

    def _merge_sources(self):
        self._data = {}
        for source in sorted(self.sources, key=lambda s: s.priority):
            self._deep_merge(self._data, source.data)

    def _deep_merge(self, target: Dict[str, Any], source: Dict[str, Any]):
        for key, value in source.items():
            if (
                key in target
                and isinstance(target[key], dict)
                and isinstance(value, dict)
            ):
                self._deep_merge(target[key], value)
            elif isinstance(value, dict):
                target[key] = {}
                self._deep_merge(target[key], value)
            else:
                target[key] = value

    def _set_nested_value(self, data: Dict[str, Any], key_path: str, value: Any):
        """Set a nested value using dot notation (e.g., 'logging.level')."""
        keys = key_path.split(".")
        current = data

        for key in keys[:-1]:
            current = current.setdefault(key, {})

        current[keys[-1]] = value

    def _get_environment(self) -> str:
        return os.getenv(f"{ENV_PREFIX}ENV", "development").lower()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., 'logging.level')
            default: Default value if key is not found
        """
        if not self._loaded:
            self.load()

        current = self._data
        try:
            for k in key.split("."):
                current = current[k]
            return current
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any, priority: int = 100):
        """Set a configuration value at runtime."""
        if not self._loaded:
            self.load()

        runtime_data = {}
        self._set_nested_value(runtime_data, key, value)

        self.sources = [
            s
            for s in self.sources
            if not (s.name == f"runtime.{key}" and s.source_type == "runtime")
        ]
        self.sources.append(
            ConfigSource(
                name=f"runtime.{key}",
                data=runtime_data,
                priority=priority,
                source_type="runtime",
            )
        )

        self._merge_sources()

    def has(self, key: str) -> bool:
        """Check if a configuration key exists."""
        return self.get(key, None) is not None

    def to_dict(self) -> Dict[str, Any]:
        """Return the complete configuration as a dictionary."""
        if not self._loaded:
            self.load()
        return self._data.copy()

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __repr__(self) -> str:
        return f"<Config(config_dir='{self.config_dir}', sources={len(self.sources)})>"
