"""Configuration management for curvebuffer.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- BufferConfig: Join/cap styles and mitre limit
- GeometryConfig: Geometric tolerances
- LoggingConfig: Logging settings
- CurveBufferSettings: Main application settings
"""

from curvebuffer.config.settings import (
    BufferConfig,
    CapStyle,
    CurveBufferSettings,
    GeometryConfig,
    JoinStyle,
    LoggingConfig,
    get_default_settings,
)

__all__ = [
    "BufferConfig",
    "CapStyle",
    "CurveBufferSettings",
    "GeometryConfig",
    "JoinStyle",
    "LoggingConfig",
    "get_default_settings",
]
