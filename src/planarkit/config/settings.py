"""Configuration settings for planarkit."""

import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ToleranceConfig(BaseModel):
    """Numeric tolerances threaded through the kernel entry points.

    Every kernel function that compares derived floating values takes one of
    these (defaulting to ``DEFAULT_TOLERANCE``) so a call site can trade
    precision for speed without touching module state.
    """

    model_config = ConfigDict(frozen=True)

    epsilon: float = Field(
        default=sys.float_info.epsilon,
        gt=0.0,
        le=1e-3,
        description="Near-zero threshold for coefficients, discriminants and cross products",
    )
    point_tolerance: float = Field(
        default=1e-10,
        gt=0.0,
        le=1e-3,
        description="Distance under which a point counts as lying on a segment",
    )
    bisection_tolerance: float = Field(
        default=1e-7,
        gt=0.0,
        le=1e-2,
        description="Parameter interval width at which point-at-length bisection stops",
    )
    intersection_min_range: float = Field(
        default=1e-8,
        gt=0.0,
        le=1e-2,
        description="Box size below which curve-curve bisection records an intersection",
    )
    intersection_min_distance_squared: float = Field(
        default=1e-8,
        gt=0.0,
        le=1e-2,
        description="Squared distance under which two intersection points are merged",
    )
    max_intersection_depth: int = Field(
        default=64,
        ge=8,
        le=256,
        description="Maximum number of halvings applied to either curve during bisection",
    )
    max_intersection_count: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Curve-curve search stops after this many intersections",
    )
    distance_min_range: float = Field(
        default=1e-7,
        gt=0.0,
        le=1e-2,
        description="Resolution of the subdivided farthest-distance search",
    )


class FlatteningConfig(BaseModel):
    """Configuration for turning curves into polylines."""

    quality: float = Field(
        default=1.0,
        gt=0.0,
        le=100.0,
        description="Samples per unit of curve length when sampling by count",
    )
    min_count: int = Field(
        default=2,
        ge=1,
        le=64,
        description="Minimum samples per curve",
    )
    max_count: int = Field(
        default=20,
        ge=2,
        le=1024,
        description="Maximum samples per curve",
    )
    length_flatness: int = Field(
        default=4,
        ge=1,
        le=256,
        description="Polyline sample count used to estimate curve length before sampling",
    )
    adaptive_tolerance: float | None = Field(
        default=None,
        gt=0.0,
        description="If set, flatten by recursive subdivision to this distance instead of by count",
    )


class ProcessingConfig(BaseModel):
    """Configuration for batch tessellation."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )
    resolve_self_intersections: bool = Field(
        default=True,
        description="Split self-crossing outer contours into simple faces before decomposition",
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


class KernelSettings(BaseModel):
    """Main application settings."""

    tolerance: ToleranceConfig = Field(default_factory=ToleranceConfig)
    flattening: FlatteningConfig = Field(default_factory=FlatteningConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_TOLERANCE = ToleranceConfig()


def get_default_settings() -> KernelSettings:
    """Get default application settings."""
    return KernelSettings()
