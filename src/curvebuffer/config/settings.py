"""Configuration settings for curvebuffer."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class JoinStyle(str, Enum):
    """Connective geometry inserted at convex vertices."""

    ROUND = "round"
    BEVEL = "bevel"
    MITRE = "mitre"


class CapStyle(str, Enum):
    """Geometry closing the extremities of open curves."""

    ROUND = "round"
    SQUARE = "square"
    BUTT = "butt"


class GeometryConfig(BaseModel):
    """Tolerances for geometric comparisons.

    Values are absolute, expressed in the units of the input coordinates.
    """

    almost_equal_tolerance: float = Field(
        default=1e-9,
        gt=0.0,
        le=1e-2,
        description="Tolerance for point equality and deduplication",
    )
    distance_tolerance: float = Field(
        default=1e-6,
        gt=0.0,
        le=1e-1,
        description="Slack on the buffer distance when discarding overshoot loops",
    )


class BufferConfig(BaseModel):
    """Configuration for buffer construction."""

    join_style: JoinStyle = Field(
        default=JoinStyle.ROUND,
        description="Join inserted between consecutive offset pieces",
    )
    cap_style: CapStyle = Field(
        default=CapStyle.ROUND,
        description="Cap closing the extremities of open curves",
    )
    mitre_limit: float = Field(
        default=4.0,
        ge=1.0,
        le=100.0,
        description="Maximum distance from vertex to mitre tip, as a multiple of the buffer distance",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class CurveBufferSettings(BaseModel):
    """Main application settings."""

    buffer: BufferConfig = Field(default_factory=BufferConfig)
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> CurveBufferSettings:
    """Get default application settings."""
    return CurveBufferSettings()
