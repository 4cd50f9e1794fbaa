"""Curve I/O layer for curvebuffer.

This module handles reading curve files and writing buffer drawings.
It provides a clean abstraction layer between file formats and the
domain models.

Key responsibilities:
- Load JSON curve files (polylines, rings, line/arc composites)
- Convert file entries to domain models
- Convert curves to SVG path data
- Write SVG drawings with the buffer naming convention

Key classes:
- CurveReader: Load curve files and extract curves
- SvgWriter: Save curves and buffer domains as SVG
"""

from curvebuffer.io.converter import curve_to_svg_path, entry_to_curve
from curvebuffer.io.reader import CurveReader
from curvebuffer.io.writer import SvgWriter

__all__ = [
    "CurveReader",
    "SvgWriter",
    "curve_to_svg_path",
    "entry_to_curve",
]
