"""File processing orchestration for the buffer pipeline.

This module coordinates the full workflow: read curves from a JSON file,
buffer them one after the other, and draw the results into an SVG file.

Key components:
- buffer_entry: Buffer one curve entry and report the outcome as a dict
- BufferProcessor: Main orchestrator class for curve files
"""

import time
import traceback
from collections.abc import Callable
from pathlib import Path
from typing import Any

from curvebuffer.config import CurveBufferSettings
from curvebuffer.core.calculator import BufferCalculator
from curvebuffer.domain import BufferDomain, PolyCurve
from curvebuffer.exceptions import CurveBufferError
from curvebuffer.io import CurveReader, SvgWriter
from curvebuffer.utils import ProcessingLogger, ProcessingStats, configure_logging


def buffer_entry(
    reader: CurveReader,
    entry: dict[str, Any],
    calculator: BufferCalculator,
    distance: float,
) -> dict[str, Any]:
    """Buffer a single curve entry.

    Args:
        reader: Reader the entry comes from
        entry: Parsed JSON curve entry
        calculator: Calculator to use
        distance: Buffer distance

    Returns:
        Dictionary containing either:
        - Success: {"curve": PolyCurve, "domain": BufferDomain, "duration_ms": float}
        - Error: {"error": Exception, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        curve = reader.read_curve(entry)
        domain = calculator.compute_buffer(curve, distance)
        duration_ms = (time.time() - start_time) * 1000
        return {"curve": curve, "domain": domain, "duration_ms": duration_ms}

    except CurveBufferError as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "error": e,
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


class BufferProcessor:
    """Orchestrates buffering of curve files.

    Manages the complete workflow:
    1. Load curve file
    2. Buffer every curve, sequentially
    3. Collect results and update statistics
    4. Save the SVG drawing

    A curve that fails is logged and counted; the run goes on with the
    next one.

    Example:
        settings = CurveBufferSettings()
        processor = BufferProcessor(settings)
        stats = processor.process(
            input_path=Path("curves.json"),
            distance=10.0,
            output_path=Path("curves-buffer.svg"),
        )
    """

    def __init__(self, config: CurveBufferSettings) -> None:
        """Initialize processor with configuration.

        Args:
            config: Settings containing buffer, geometry and logging config
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=False,
        )
        self.calculator = BufferCalculator.from_config(config.buffer, config.geometry)

    def process(
        self,
        input_path: Path,
        distance: float,
        output_path: Path | None = None,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> ProcessingStats:
        """Buffer every curve of a file and draw the results.

        Args:
            input_path: Path to the JSON curve file
            distance: Buffer distance applied to every curve
            output_path: Path for the SVG output (auto-generated if None)
            progress_callback: Optional callback(completed, total, curve_name, success)
                for progress updates

        Returns:
            ProcessingStats with counts, timing, and error details

        Raises:
            CurveLoadError: If the curve file cannot be read
            CurveSaveError: If the SVG file cannot be written
        """
        processing_logger = ProcessingLogger(self.logger)
        stats = processing_logger.stats
        stats.start_time = time.time()

        if output_path is None:
            output_path = SvgWriter.get_buffer_path(input_path)

        self.logger.info(
            "Starting curve processing",
            input=str(input_path),
            output=str(output_path),
            distance=distance,
            join=self.config.buffer.join_style.value,
            cap=self.config.buffer.cap_style.value,
        )

        reader = CurveReader(input_path)
        reader.load()
        total = reader.curve_count
        self.logger.info("Curves loaded", curve_count=total)

        writer = SvgWriter(output_path, margin=max(distance, 1.0))
        results: list[tuple[str, PolyCurve, BufferDomain]] = []

        for completed, (name, entry) in enumerate(reader.iter_entries(), start=1):
            pieces = len(entry.get("points") or entry.get("elements") or [])
            closed = entry.get("type") == "ring" or bool(entry.get("closed", False))
            processing_logger.log_curve_start(name, pieces=pieces, closed=closed)

            result = buffer_entry(reader, entry, self.calculator, distance)

            success = "error" not in result
            if success:
                domain = result["domain"]
                results.append((name, result["curve"], domain))
                processing_logger.log_curve_complete(
                    curve_name=name,
                    boundary_curves=len(domain.boundary()),
                    duration_ms=result["duration_ms"],
                )
            else:
                processing_logger.log_curve_error(
                    curve_name=name,
                    error=result["error"],
                    traceback=result["traceback"],
                )

            if progress_callback is not None:
                progress_callback(completed, total, name, success)

        for name, curve, domain in results:
            writer.add_domain(domain, name=name)
            writer.add_curve(curve, name=name)
        writer.save()

        self.logger.info("Drawing saved", output=str(output_path), paths=writer.path_count)

        stats.end_time = time.time()

        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            errors=stats.error_count,
            boundary_curves=stats.boundary_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return stats
