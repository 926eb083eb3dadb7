"""
Configuration Loader for the Election Geography library

This module provides a centralized way to load and access configuration
settings from a config.yaml file.

Usage:
    from ops import Config

    config = Config()
    name_field = config.get_boundary_setting('name_field')
    tie_break = config.get_aggregation_setting('tie_break')
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # type: ignore[import-untyped]
from loguru import logger

PACKAGED_CONFIG = Path(__file__).parent / "config.yaml"


class Config:
    """Configuration manager for boundary ingestion and vote aggregation."""

    # Default values that can be overridden in config
    DEFAULTS: Dict[str, Any] = {
        "boundaries": {
            "name_field": "shapeName",
            "id_field": "shapeID",
            "crs": "EPSG:4326",
        },
        "tiers": {
            "region": "region",
            "department": "department",
            "arrondissement": "arrondissement",
        },
        "aggregation": {"tie_break": "order", "default_sort": "name"},
        "search": {"limit": 50},
        "logging": {"level": "INFO"},
    }

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to config file. If None, looks for:
                        1. Environment variable ELECTION_GEO_CONFIG_PATH
                        2. config.yaml in current directory
                        3. the config.yaml shipped with this package
        """
        if config_file is None:
            # Check environment variable first (for CLI overrides)
            env_config = os.environ.get("ELECTION_GEO_CONFIG_PATH")
            if env_config and Path(env_config).exists():
                config_file = env_config
                logger.debug(f"Using config from environment: {config_file}")
            elif Path("config.yaml").exists():
                config_file = "config.yaml"
            elif PACKAGED_CONFIG.exists():
                config_file = PACKAGED_CONFIG
                logger.debug("Using packaged ops/config.yaml")
            else:
                raise FileNotFoundError(
                    "No config.yaml found. Check current directory or set ELECTION_GEO_CONFIG_PATH"
                )

        self.config_path = Path(config_file).resolve()
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        logger.debug(f"Loading config from: {self.config_path}")

        with open(self.config_path, "r") as f:
            self.data = yaml.safe_load(f) or {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build a Config from an in-memory mapping (no file lookup)."""
        config = cls.__new__(cls)
        config.config_path = None
        config.data = dict(data)
        return config

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation with intelligent defaults.

        Args:
            key_path: Dot-separated path to the configuration value
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key_path.split(".")

        # Try to get from config first
        value: Any = self.data
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                value = None
                break

        # If not found in config, try defaults
        if value is None:
            value = self.DEFAULTS
            for key in keys:
                if isinstance(value, dict) and key in value:
                    value = value[key]
                else:
                    return default

        return value

    def _get_string(self, key_path: str) -> str:
        result = self.get(key_path)
        if isinstance(result, str):
            return result
        raise ValueError(f"Setting not found or not a string: {key_path}")

    def get_boundary_setting(self, setting_key: str) -> str:
        """Get boundary ingestion setting (name/id property, CRS)."""
        return self._get_string(f"boundaries.{setting_key}")

    def get_tier_name(self, tier_key: str) -> str:
        """Get display name of a hierarchy tier."""
        return self._get_string(f"tiers.{tier_key}")

    def get_aggregation_setting(self, setting_key: str) -> Any:
        """Get aggregation setting with intelligent defaults."""
        return self.get(f"aggregation.{setting_key}")

    def get_search_limit(self) -> int:
        """Get maximum number of voting centers returned by a search."""
        return int(self.get("search.limit", 50))

    def get_log_level(self) -> str:
        """Get configured loguru level."""
        return str(self.get("logging.level", "INFO")).upper()

    def print_config_summary(self) -> None:
        """Print a summary of the current configuration."""
        logger.debug("📋 Configuration Summary")
        logger.debug("=" * 50)
        logger.debug(f"Project: {self.get('project_name', 'Unknown')}")
        logger.debug(f"Config file: {self.config_path}")

        logger.debug("🗺️ Boundaries:")
        for key in ["name_field", "id_field", "crs"]:
            logger.debug(f"  {key}: {self.get_boundary_setting(key)}")

        logger.debug("🗳️ Aggregation:")
        logger.debug(f"  tie_break: {self.get_aggregation_setting('tie_break')}")
        logger.debug(f"  default_sort: {self.get_aggregation_setting('default_sort')}")


# Convenience function for easy importing
def load_config(config_file: Optional[str] = None) -> Config:
    """
    Load configuration from file.

    Args:
        config_file: Path to configuration file

    Returns:
        Config instance
    """
    return Config(config_file)
