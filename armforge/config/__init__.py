"""
Configuration management for armforge.

Provides type-safe configuration loading and validation with support
for multiple configuration sources and priority-based merging.
"""

from ..exceptions import ConfigError
from .loader import ConfigLoader, load_config
from .models import (
    ArmForgeConfig,
    LoggingSettings,
    LogLevel,
    NamingSettings,
    OutputSettings,
    ValidationSettings,
)

__all__ = [
    "ArmForgeConfig",
    "ConfigError",
    "ConfigLoader",
    "LogLevel",
    "LoggingSettings",
    "NamingSettings",
    "OutputSettings",
    "ValidationSettings",
    "load_config",
]
