"""Converters between file representations and domain models.

This module handles the conversion between JSON curve entries, SVG path
data and our domain models (LineElement, CircleArc, PolyCurve).
"""

import math
from typing import Any

from curvebuffer.domain import (
    CircleArc,
    Curve,
    LineElement,
    Point,
    PolyCurve,
    PolyCurveBuilder,
    smooth_pieces,
)

# Distance under which consecutive pieces are drawn without a move command
SVG_GAP_TOLERANCE = 1e-9


def _point(value: Any) -> Point:
    """Parse an [x, y] pair."""
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"Expected [x, y] pair, got {value!r}")
    return Point(float(value[0]), float(value[1]))


def _element(entry: dict[str, Any]) -> Curve:
    match entry.get("type"):
        case "segment":
            return LineElement.segment(_point(entry["start"]), _point(entry["end"]))
        case "arc":
            return CircleArc(
                _point(entry["center"]),
                float(entry["radius"]),
                float(entry["start_angle"]),
                float(entry["extent"]),
            )
        case "arc3":
            return CircleArc.from_three_points(
                _point(entry["start"]), _point(entry["mid"]), _point(entry["end"])
            )
        case other:
            raise ValueError(f"Unknown element type: {other!r}")


def entry_to_curve(entry: dict[str, Any]) -> PolyCurve:
    """Convert a JSON curve entry to a domain PolyCurve.

    Supported entries:
    - {"type": "polyline", "points": [[x, y], ...]}
    - {"type": "ring", "points": [[x, y], ...]}
    - {"type": "composite", "closed": bool, "elements": [...]} where each
      element is a segment (start, end), an arc (center, radius,
      start_angle, extent) or an arc3 (start, mid, end)

    Args:
        entry: Parsed JSON object describing one curve

    Returns:
        Domain PolyCurve

    Raises:
        ValueError: If the entry type is unknown or a coordinate is malformed
        KeyError: If a required field is missing
        ColinearPointsError: If an arc3 element has colinear points
    """
    match entry.get("type"):
        case "polyline" | "ring" as kind:
            points = [_point(value) for value in entry["points"]]
            if len(points) < 2:
                raise ValueError(f"A {kind} needs at least 2 points, got {len(points)}")
            return PolyCurve.from_points(points, closed=kind == "ring")
        case "composite":
            builder = PolyCurveBuilder()
            builder.extend(_element(item) for item in entry["elements"])
            return builder.build(closed=bool(entry.get("closed", False)))
        case other:
            raise ValueError(f"Unknown curve type: {other!r}")


def _fmt(value: float) -> str:
    return format(value, ".10g")


def _arc_commands(arc: CircleArc) -> list[str]:
    """SVG arc commands for an arc, split in halves when it is a full circle."""
    extent = arc.extent
    if abs(extent) >= 2.0 * math.pi - 1e-9:
        half = arc.t1 / 2.0
        return _arc_commands(arc.sub_curve(0.0, half)) + _arc_commands(
            arc.sub_curve(half, arc.t1)
        )
    end = arc.last_point
    large = 1 if abs(extent) > math.pi else 0
    # Raw coordinates: positive angles sweep in the positive direction
    sweep = 1 if extent > 0.0 else 0
    r = _fmt(arc.radius)
    return [f"A {r} {r} 0 {large} {sweep} {_fmt(end.x)} {_fmt(end.y)}"]


def curve_to_svg_path(curve: Curve) -> str:
    """Convert a bounded curve to SVG path data.

    Emits M for the first point and after any discontinuity, L for line
    pieces, A for arcs and Z when the curve is closed.

    Args:
        curve: Bounded curve to convert

    Returns:
        SVG path data string, empty for an empty curve

    Raises:
        UnboundedShapeError: If the curve contains an unbounded line
    """
    commands: list[str] = []
    current: Point | None = None
    for piece in smooth_pieces(curve):
        start = piece.first_point
        if current is None or not current.almost_equals(start, SVG_GAP_TOLERANCE):
            commands.append(f"M {_fmt(start.x)} {_fmt(start.y)}")
        match piece:
            case CircleArc():
                commands.extend(_arc_commands(piece))
            case LineElement():
                end = piece.last_point
                commands.append(f"L {_fmt(end.x)} {_fmt(end.y)}")
        current = piece.last_point

    if commands and isinstance(curve, PolyCurve) and curve.closed:
        commands.append("Z")
    return " ".join(commands)
