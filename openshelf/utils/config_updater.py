"""Utility for updating configuration at runtime"""

import logging
from pathlib import Path
from typing import Any

import yaml

from ..config import config, get_config_path

logger = logging.getLogger(__name__)


class ConfigUpdater:
    """Update configuration without full restart"""

    def __init__(self, config_path: Path | None = None):
        if config_path is None:
            config_path = get_config_path() or Path("config.yaml")
        self.config_path = Path(config_path)

    def update_openlist_stats(self, last_refresh_time: int, resource_count: int) -> None:
        """
        Record the outcome of a library refresh.

        Args:
            last_refresh_time: Completion time in epoch milliseconds
            resource_count: Number of folders in the index
        """
        config_data = self.read_config()

        openlist_config = config_data.setdefault("openlist", {})
        openlist_config["last_refresh_time"] = last_refresh_time
        openlist_config["resource_count"] = resource_count

        self.write_config(config_data)

        config.openlist.last_refresh_time = last_refresh_time
        config.openlist.resource_count = resource_count

    def read_config(self) -> dict[str, Any]:
        """Read the current file contents, or an empty mapping if there is no file."""
        if not self.config_path.exists():
            return {}
        with open(self.config_path) as f:
            return yaml.safe_load(f) or {}

    def write_config(self, config_data: dict[str, Any]) -> None:
        """
        Write configuration to file.

        Args:
            config_data: Configuration dictionary
        """
        self.validate_config(config_data)

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            yaml.safe_dump(
                config_data, f, sort_keys=False, default_flow_style=False, allow_unicode=True
            )

        logger.info(f"Configuration updated: {self.config_path}")

    def validate_config(self, config_data: dict[str, Any]) -> None:
        """
        Validate configuration before writing.

        Raises:
            ValueError: If configuration is invalid
        """
        if not isinstance(config_data, dict):
            raise ValueError("Configuration must be a dictionary")

        if "openlist" in config_data:
            openlist_config = config_data["openlist"]
            if not isinstance(openlist_config, dict):
                raise ValueError("OpenList configuration must be a dictionary")

            count = openlist_config.get("resource_count")
            if count is not None and (not isinstance(count, int) or count < 0):
                raise ValueError("resource_count must be a non-negative integer")
