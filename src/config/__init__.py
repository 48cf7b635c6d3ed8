"""
Configuration layer - Settings
"""

from src.config.settings import settings, Settings, PROJECT_ROOT

__all__ = [
    "settings",
    "Settings",
    "PROJECT_ROOT",
]
