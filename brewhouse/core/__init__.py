"""
Core module initialization.
Exports configuration and logging utilities.
"""

from brewhouse.core.config import get_settings, Settings, EnvironmentMode, StorageBackend

__all__ = ["get_settings", "Settings", "EnvironmentMode", "StorageBackend"]
