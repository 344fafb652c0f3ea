"""Configuration - Settings loaded from the environment."""

from .settings import AuthMethod, Settings, load_settings

__all__ = ["AuthMethod", "Settings", "load_settings"]
