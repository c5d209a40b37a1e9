"""
evote Configuration

Loads evote.toml at startup.
Environment variables override TOML values.
"""

from .loader import (
    ElectionConfig,
    ElectionSectionConfig,
    LoggingSectionConfig,
    load_config,
)

__all__ = [
    "ElectionConfig",
    "ElectionSectionConfig",
    "LoggingSectionConfig",
    "load_config",
]
