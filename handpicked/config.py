"""
Configuration management for Handpicked.

Handles loading, validation, and access to application configuration.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

# Global configuration instance
_config: Optional["HandpickedConfig"] = None


class ServerConfig(BaseModel):
    """Server configuration."""
    host: str = "0.0.0.0"
    port: int = 8420
    debug: bool = False
    log_level: str = "INFO"


class DatabaseConfig(BaseModel):
    """Database configuration."""
    url: str = "sqlite:///./handpicked.db"
    echo: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = "logs/handpicked.log"
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    to_console: bool = True
    to_file: bool = True


class PlaybackConfig(BaseModel):
    """
    Playback failure handling.

    Only these player error codes mean the video itself is unavailable
    (removed, private, or not embeddable) and may disable a schedule item.
    """
    disabling_error_codes: list[int] = Field(default_factory=lambda: [100, 101, 150, 153])
    default_error_message: str = "YouTube error {code}"


class HandpickedConfig(BaseModel):
    """Main Handpicked configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)


def load_config(config_path: Optional[str] = None) -> HandpickedConfig:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. Defaults to config.yaml in project root.

    Returns:
        Loaded and validated configuration.
    """
    global _config

    if config_path is None:
        # Look for config.yaml in current directory or project root
        possible_paths = [
            Path("config.yaml"),
            Path(__file__).parent.parent / "config.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data: dict[str, Any] = {}

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

    # Apply environment variable overrides
    env_overrides = _get_env_overrides()
    _deep_merge(config_data, env_overrides)

    _config = HandpickedConfig(**config_data)
    return _config


def get_config() -> HandpickedConfig:
    """
    Get the current configuration.

    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> HandpickedConfig:
    """Drop the cached configuration and load it again from disk."""
    global _config
    _config = None
    return load_config()


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_map = {
        "HANDPICKED_HOST": ("server", "host"),
        "HANDPICKED_PORT": ("server", "port"),
        "HANDPICKED_DEBUG": ("server", "debug"),
        "HANDPICKED_DATABASE_URL": ("database", "url"),
        "HANDPICKED_LOG_LEVEL": ("logging", "level"),
    }

    for env_var, path in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            _set_nested(overrides, path, _parse_env_value(value))

    return overrides


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def _set_nested(d: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested dictionary value from a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


class _ConfigProxy:
    """
    Lazy access to configuration.

        from handpicked.config import config
        config.server.port
    """

    def __getattr__(self, name: str) -> Any:
        return getattr(get_config(), name)

    def __repr__(self) -> str:
        return f"<ConfigProxy for {get_config()}>"


config = _ConfigProxy()
