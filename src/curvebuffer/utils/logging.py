"""Logging utilities for curvebuffer."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog


@dataclass
class ProcessingStats:
    """Statistics from a buffering run."""

    processed_count: int = 0
    error_count: int = 0
    boundary_count: int = 0
    empty_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    curve_times_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_curve_time_ms(self) -> float | None:
        if not self.curve_times_ms:
            return None
        return sum(self.curve_times_ms) / len(self.curve_times_ms)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(f"curvebuffer_{timestamp}.log")

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, file_level.upper()))
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("curvebuffer")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


class ProcessingLogger:
    """Logger for tracking buffering progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_curve_start(self, curve_name: str, pieces: int, closed: bool) -> None:
        """Log start of curve buffering."""
        self._logger.debug("Buffering curve", curve=curve_name, pieces=pieces, closed=closed)

    def log_curve_complete(
        self,
        curve_name: str,
        boundary_curves: int,
        duration_ms: float,
    ) -> None:
        """Log successful curve buffering."""
        self._logger.info(
            "Curve buffered",
            curve=curve_name,
            boundary_curves=boundary_curves,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.boundary_count += boundary_curves
        self._stats.curve_times_ms.append(duration_ms)
        if boundary_curves == 0:
            self._stats.empty_count += 1

    def log_curve_error(
        self,
        curve_name: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log curve buffering error."""
        self._logger.error(
            "Curve buffering failed",
            curve=curve_name,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((curve_name, str(error)))

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
