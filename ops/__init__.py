"""
Operations package for the Election Geography library

This package centralizes the operational tools:
- Configuration management
- Logging setup

The Config class is exposed at the package level for convenient imports:
    from ops import Config
"""

from .config_loader import Config, load_config
from .logging_config import setup_logging

__all__ = ["Config", "load_config", "setup_logging"]
