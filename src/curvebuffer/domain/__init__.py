"""Domain models for curvebuffer.

This module contains the geometric value types used by the buffer engine.
All models are designed to be:

- Immutable (frozen dataclasses, build-then-freeze composites)
- Serializable to plain dictionaries
- Free of any algorithmic dependency on the core package

Key classes:
- Point, Vector, Box: Basic planar values
- SimilarityTransform: Scale, rotation and translation of geometry
- LineElement, CircleArc: Atomic circulinear elements
- PolyCurve, PolyCurveBuilder: Composite continuous curves
- Boundary, BufferDomain: Regions delimited by closed curves
"""

from curvebuffer.domain.elements import (
    CircleArc,
    Element,
    LineElement,
    Measurable,
    Offsettable,
    Orientable,
    element_intersections,
)
from curvebuffer.domain.point import Box, Point, SimilarityTransform, Vector
from curvebuffer.domain.polycurve import (
    Curve,
    PolyCurve,
    PolyCurveBuilder,
    curve_from_dict,
    end_tangent,
    smooth_pieces,
    start_tangent,
)
from curvebuffer.domain.region import Boundary, BufferDomain

__all__: list[str] = [
    # Values
    "Point",
    "Vector",
    "Box",
    "SimilarityTransform",
    # Capabilities
    "Measurable",
    "Orientable",
    "Offsettable",
    # Curves
    "Element",
    "LineElement",
    "CircleArc",
    "Curve",
    "PolyCurve",
    "PolyCurveBuilder",
    # Regions
    "Boundary",
    "BufferDomain",
    # Helpers
    "curve_from_dict",
    "element_intersections",
    "end_tangent",
    "smooth_pieces",
    "start_tangent",
]
