"""Configuration management for planarkit.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- ToleranceConfig: Epsilon thresholds threaded through kernel calls
- FlatteningConfig: Curve-to-polyline sampling settings
- ProcessingConfig: Batch tessellation settings
- LoggingConfig: Logging settings
- KernelSettings: Main application settings
"""

from planarkit.config.settings import (
    DEFAULT_TOLERANCE,
    FlatteningConfig,
    KernelSettings,
    LoggingConfig,
    ProcessingConfig,
    ToleranceConfig,
    get_default_settings,
)

__all__ = [
    "DEFAULT_TOLERANCE",
    "FlatteningConfig",
    "KernelSettings",
    "LoggingConfig",
    "ProcessingConfig",
    "ToleranceConfig",
    "get_default_settings",
]
