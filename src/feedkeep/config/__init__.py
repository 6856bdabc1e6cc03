"""Configuration package."""

from feedkeep.config.settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
]
