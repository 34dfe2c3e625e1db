"""Configuration management for btrpc.

Settings are loaded from defaults, then a TOML file, then ``BTRPC_*``
environment variables, each layer overriding the previous one.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import toml
from pydantic import ValidationError as PydanticValidationError

from btrpc.exceptions import ConfigurationError
from btrpc.models import Config, ConnectionConfig, ObservabilityConfig

logger = logging.getLogger(__name__)

# Global configuration instance
_config_manager: ConfigManager | None = None

ENV_MAPPINGS: dict[str, str] = {
    "BTRPC_HOST": "connection.host",
    "BTRPC_PORT": "connection.port",
    "BTRPC_PATH": "connection.path",
    "BTRPC_USERNAME": "connection.username",
    "BTRPC_PASSWORD": "connection.password",
    "BTRPC_SSL": "connection.ssl",
    "BTRPC_TIMEOUT": "connection.timeout",
    "BTRPC_LOG_LEVEL": "observability.log_level",
    "BTRPC_LOG_FILE": "observability.log_file",
}


def parse_path(raw: str | list[str]) -> list[str]:
    """Split ``/transmission/rpc`` into path segments."""
    if isinstance(raw, list):
        return raw
    return [segment for segment in raw.split("/") if segment]


def _parse_env_value(raw: str, path: str) -> Any:
    if path == "connection.path":
        return parse_path(raw)
    if path in {"connection.host", "connection.username", "connection.password"}:
        return raw
    if path == "observability.log_level":
        return raw.upper()

    low = raw.lower()
    if low in {"true", "1", "yes", "on"}:
        return True
    if low in {"false", "0", "no", "off"}:
        return False
    try:
        if "." in raw:
            return float(raw)
        return int(raw)
    except ValueError:
        return raw


def _set_nested(d: dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    cur = d
    for p in parts[:-1]:
        cur = cur.setdefault(p, {})
    cur[parts[-1]] = value


class ConfigManager:
    """Loads and holds the btrpc configuration."""

    def __init__(self, config_file: str | Path | None = None):
        """Initialize configuration manager.

        Args:
            config_file: Path to TOML config file. If None, searches for btrpc.toml

        Raises:
            ConfigurationError: The file or environment holds invalid settings

        """
        self.config_file = self._find_config_file(config_file)
        self.config = self._load_config()

    def _find_config_file(self, config_file: str | Path | None) -> Path | None:
        """Find configuration file in standard locations."""
        if config_file:
            return Path(config_file)

        search_paths = [
            Path.cwd() / "btrpc.toml",
            Path.home() / ".config" / "btrpc" / "btrpc.toml",
            Path.home() / ".btrpc.toml",
        ]
        for path in search_paths:
            if path.exists():
                return path
        return None

    def _load_config(self) -> Config:
        """Load configuration from file and environment."""
        config_data: dict[str, Any] = {}

        if self.config_file is not None:
            if not self.config_file.exists():
                msg = f"Config file not found: {self.config_file}"
                raise ConfigurationError(msg)
            try:
                with open(self.config_file, encoding="utf-8") as f:
                    config_data.update(toml.load(f))
            except toml.TomlDecodeError as e:
                msg = f"Invalid TOML in {self.config_file}: {e}"
                raise ConfigurationError(msg) from e
            logger.debug("Loaded config file %s", self.config_file)

        config_data = self._merge_config(config_data, self._get_env_config())

        connection = config_data.get("connection")
        if isinstance(connection, dict) and "path" in connection:
            connection["path"] = parse_path(connection["path"])

        try:
            return Config(
                connection=ConnectionConfig.model_validate(
                    config_data.get("connection", {}), strict=False
                ),
                observability=ObservabilityConfig.model_validate(
                    config_data.get("observability", {})
                ),
            )
        except PydanticValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigurationError(msg) from e

    def _get_env_config(self) -> dict[str, Any]:
        """Get configuration from environment variables."""
        env_config: dict[str, Any] = {}
        for env_name, cfg_path in ENV_MAPPINGS.items():
            raw = os.getenv(env_name)
            if raw is None:
                continue
            _set_nested(env_config, cfg_path, _parse_env_value(raw, cfg_path))
        return env_config

    def _merge_config(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge configuration dictionaries recursively."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result


def get_config() -> Config:
    """Get the global configuration."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.config


def init_config(config_file: str | Path | None = None) -> ConfigManager:
    """Initialize the global configuration manager."""
    global _config_manager
    _config_manager = ConfigManager(config_file)
    return _config_manager


def reset_config() -> None:
    """Drop the global configuration manager."""
    global _config_manager
    _config_manager = None
