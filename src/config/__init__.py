"""Configuration module."""

from src.config.constants import RELAY, RelayConstants
from src.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "RelayConstants", "RELAY"]
