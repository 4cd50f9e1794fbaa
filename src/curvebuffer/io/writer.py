"""SVG writer for buffered curves.

This module provides the SvgWriter class for drawing original curves and
their buffer domains into one SVG document.
"""

import xml.etree.ElementTree as ET
from pathlib import Path

from curvebuffer.domain import Box, BufferDomain, Curve
from curvebuffer.exceptions import CurveSaveError
from curvebuffer.io.converter import curve_to_svg_path

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

CURVE_STYLE = "fill:none;stroke:#333333;stroke-width:1"
DOMAIN_STYLE = "fill:#4a90d9;fill-opacity:0.35;fill-rule:nonzero;stroke:#1f5fa8;stroke-width:1"


class SvgWriter:
    """Collects curves and domains and saves them as an SVG document.

    The document keeps the input coordinates and flips the y axis with a
    group transform, so that counter-clockwise curves still look
    counter-clockwise.

    Example:
        writer = SvgWriter(Path("out.svg"))
        writer.add_curve(curve, name="zigzag")
        writer.add_domain(domain, name="zigzag")
        writer.save()
    """

    def __init__(self, output_path: Path, margin: float = 10.0) -> None:
        """Initialize the writer.

        Args:
            output_path: Path of the SVG file to write
            margin: Blank space around the drawing, in input units
        """
        self._output_path = output_path
        self._margin = margin
        self._paths: list[tuple[str, str, str]] = []
        self._box: Box | None = None

    @property
    def path_count(self) -> int:
        return len(self._paths)

    def add_curve(self, curve: Curve, name: str = "curve") -> None:
        """Add an original curve, drawn as a stroke."""
        data = curve_to_svg_path(curve)
        if not data:
            return
        self._paths.append((f"{name}-curve", data, CURVE_STYLE))
        self._extend_box(curve.bounding_box())

    def add_domain(self, domain: BufferDomain, name: str = "domain") -> None:
        """Add a buffer domain, drawn as one filled path over all boundary curves."""
        if domain.is_empty():
            return
        data = " ".join(curve_to_svg_path(curve) for curve in domain.boundary())
        self._paths.append((f"{name}-buffer", data, DOMAIN_STYLE))
        self._extend_box(domain.bounding_box())

    def _extend_box(self, box: Box) -> None:
        self._box = box if self._box is None else self._box.union(box)

    def to_element(self) -> ET.Element:
        """Build the SVG document tree."""
        box = (self._box or Box(0.0, 0.0, 0.0, 0.0)).expand(self._margin)
        root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NAMESPACE,
                "viewBox": f"{box.min_x:g} {box.min_y:g} {box.width:g} {box.height:g}",
                "width": f"{box.width:g}",
                "height": f"{box.height:g}",
            },
        )
        group = ET.SubElement(
            root,
            "g",
            {"transform": f"matrix(1 0 0 -1 0 {box.min_y + box.max_y:g})"},
        )
        # Domains first so that curves are drawn on top
        ordered = sorted(self._paths, key=lambda item: not item[0].endswith("-buffer"))
        for identifier, data, style in ordered:
            ET.SubElement(group, "path", {"id": identifier, "d": data, "style": style})
        return root

    def save(self) -> None:
        """Save the SVG document to the output path.

        Raises:
            CurveSaveError: If the file cannot be written
        """
        tree = ET.ElementTree(self.to_element())
        try:
            tree.write(self._output_path, encoding="utf-8", xml_declaration=True)
        except OSError as e:
            raise CurveSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_buffer_path(input_path: Path) -> Path:
        """Generate output path with the buffer naming convention.

        Converts: curves.json -> curves-buffer.svg

        Args:
            input_path: Original curve file path

        Returns:
            Path with -buffer suffix and svg extension
        """
        return input_path.parent / f"{input_path.stem}-buffer.svg"
