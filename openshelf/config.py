"""
Configuration management for OpenShelf.

Handles loading, validation, and access to application configuration.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

# Global configuration instance
_config: Optional["OpenShelfConfig"] = None
_config_path: Optional[Path] = None


class OpenListConfig(BaseModel):
    """OpenList storage backend configuration."""
    enabled: bool = False
    url: str = ""
    username: str = ""
    password: str = ""
    root_path: str = "/"

    # Written back after every successful refresh
    last_refresh_time: Optional[int] = None  # epoch milliseconds
    resource_count: int = 0


class TMDBConfig(BaseModel):
    """TMDB metadata search configuration."""
    api_key: str = ""
    proxy: Optional[str] = None  # e.g. "http://127.0.0.1:7890"
    language: str = "zh-CN"


class RefreshConfig(BaseModel):
    """Library refresh settings."""
    page_size: int = 100
    item_delay_seconds: float = 0.3  # Pause after every catalog lookup
    task_retention_seconds: int = 3600
    metainfo_key: str = "video.metainfo"


class CacheConfig(BaseModel):
    """In-memory index cache settings."""
    metainfo_ttl_seconds: int = 7200
    max_entries: int = 64


class DatabaseConfig(BaseModel):
    """Database configuration."""
    url: str = "sqlite:///./openshelf.db"
    echo: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = "logs/openshelf.log"
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class OpenShelfConfig(BaseModel):
    """Main OpenShelf configuration."""
    openlist: OpenListConfig = Field(default_factory=OpenListConfig)
    tmdb: TMDBConfig = Field(default_factory=TMDBConfig)
    refresh: RefreshConfig = Field(default_factory=RefreshConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> OpenShelfConfig:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. Defaults to config.yaml in project root.

    Returns:
        Loaded and validated configuration.
    """
    global _config, _config_path

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

    _config = OpenShelfConfig(**config_data)
    _config_path = Path(config_path) if config_path else None
    return _config


def get_config() -> OpenShelfConfig:
    """
    Get the current configuration.

    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_config_path() -> Optional[Path]:
    """Path of the file the current configuration was loaded from, if any."""
    return _config_path


def reload_config() -> OpenShelfConfig:
    """
    Reload configuration from disk.

    Returns:
        Freshly loaded configuration.
    """
    global _config
    path = str(_config_path) if _config_path else None
    _config = None
    return load_config(path)


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    # Map of environment variables to config paths
    env_map = {
        "OPENSHELF_OPENLIST_ENABLED": ("openlist", "enabled"),
        "OPENSHELF_OPENLIST_URL": ("openlist", "url"),
        "OPENSHELF_OPENLIST_USERNAME": ("openlist", "username"),
        "OPENSHELF_OPENLIST_PASSWORD": ("openlist", "password"),
        "OPENSHELF_OPENLIST_ROOT_PATH": ("openlist", "root_path"),
        "OPENSHELF_TMDB_API_KEY": ("tmdb", "api_key"),
        "OPENSHELF_TMDB_PROXY": ("tmdb", "proxy"),
        "OPENSHELF_DATABASE_URL": ("database", "url"),
        "OPENSHELF_LOG_LEVEL": ("logging", "level"),
    }

    for env_var, path in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            # pydantic coerces "true" / "8080" style strings on validation
            _set_nested(overrides, path, value)

    return overrides


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
    Proxy object that provides lazy access to configuration.

    Allows modules to import `config` directly and access it like:
        from openshelf.config import config
        config.openlist.url

    The actual config is loaded on first attribute access.
    """

    def __getattr__(self, name: str) -> Any:
        return getattr(get_config(), name)

    def __repr__(self) -> str:
        return f"<ConfigProxy for {get_config()}>"


config = _ConfigProxy()
