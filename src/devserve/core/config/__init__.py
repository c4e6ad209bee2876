"""Layered configuration loading for devserve."""

from .manager import ENV_PREFIX, PROJECT_CONFIG_FILENAMES, ConfigManager, to_serve_config

__all__ = ["ConfigManager", "ENV_PREFIX", "PROJECT_CONFIG_FILENAMES", "to_serve_config"]
