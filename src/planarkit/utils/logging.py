"""Logging utilities for planarkit."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class ProcessingStats:
    """Statistics from a tessellation run."""

    processed_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    triangle_count: int = 0
    piece_count: int = 0
    rejected_count: int = 0
    total_area: float = 0.0
    errors: list[tuple[str, str]] = field(default_factory=list)
    shape_timings_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None
    was_cancelled: bool = False
    cancelled_count: int = 0

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Handlers installed by the last configure_logging() call
_installed_handlers: list[logging.Handler] = []


def _install_handler(handler: logging.Handler, level: str, fmt: str) -> None:
    handler.setLevel(level.upper())
    handler.setFormatter(logging.Formatter(fmt))
    logging.getLogger().addHandler(handler)
    _installed_handlers.append(handler)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Route structlog events and kernel ``logging`` records to stderr and a file.

    Calling this again replaces the handlers of the previous call, so a
    process that builds several processors does not duplicate output.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output entirely

    Returns:
        Logger named ``planarkit``
    """
    root_logger = logging.getLogger()
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        _install_handler(logging.FileHandler(log_file, encoding="utf-8"), file_level, _FILE_FORMAT)
    if not quiet:
        _install_handler(logging.StreamHandler(), console_level, "%(message)s")

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("planarkit")
    logger.debug("Logging configured", log_file=str(log_file) if log_file else None)
    return logger


class ProcessingLogger:
    """Logger for tracking tessellation progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_shape_start(self, shape_name: str) -> None:
        self._logger.debug("Processing shape", shape=shape_name)

    def log_shape_complete(
        self,
        shape_name: str,
        triangle_count: int,
        piece_count: int,
        duration_ms: float,
    ) -> None:
        """Log a successfully tessellated shape."""
        self._logger.info(
            "Shape tessellated",
            shape=shape_name,
            triangles=triangle_count,
            pieces=piece_count,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.triangle_count += triangle_count
        self._stats.piece_count += piece_count

    def log_shape_skipped(self, shape_name: str, reason: str) -> None:
        self._logger.debug("Shape skipped", shape=shape_name, reason=reason)
        self._stats.skipped_count += 1

    def log_shape_error(
        self,
        shape_name: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log a shape that failed to tessellate."""
        self._logger.error(
            "Shape processing failed",
            shape=shape_name,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((shape_name, str(error)))

    def log_rejected_faces(self, shape_name: str, rejected: int) -> None:
        """Log faces the decomposer dropped as non-monotone."""
        self._logger.warning("Faces rejected", shape=shape_name, rejected=rejected)
        self._stats.rejected_count += rejected

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
