"""Configuration module."""

from .settings import Settings, config, get_settings

__all__ = ["Settings", "config", "get_settings"]
