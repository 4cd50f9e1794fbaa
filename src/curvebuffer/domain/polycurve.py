"""Composite continuous curves.

A PolyCurve glues continuous sub-curves end to end and exposes them through
a single parameter space. With n sub-curves the parameter runs over
[0, 2n-1]:

- sub-curve k occupies [2k, 2k+1], mapped onto its own [t0, t1]
- the gap (2k+1, 2k+2) is the junction between sub-curves k and k+1;
  positions before 2k+1.5 belong to curve k, positions after to curve k+1

Consecutive sub-curves are expected to share an endpoint. This is assumed by
every traversal but not checked at construction.
"""

import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from curvebuffer.domain.elements import CircleArc, Element, LineElement, element_from_dict
from curvebuffer.domain.point import Box, Point, SimilarityTransform, Vector
from curvebuffer.exceptions import DegenerateCurveError, UnboundedShapeError

# Tolerance used to glue clipped pieces back together
GLUE_EPSILON = 1e-9


def from_unit_segment(u: float, t0: float, t1: float) -> float:
    """Map u in [0, 1] onto [t0, t1], handling infinite bounds."""
    if math.isinf(t0) and math.isinf(t1):
        return math.tan((u - 0.5) * math.pi)
    if math.isinf(t0):
        return t1 - (1.0 / u - 1.0) if u > 0.0 else -math.inf
    if math.isinf(t1):
        return t0 + (1.0 / (1.0 - u) - 1.0) if u < 1.0 else math.inf
    return t0 + u * (t1 - t0)


def to_unit_segment(t: float, t0: float, t1: float) -> float:
    """Map t in [t0, t1] onto [0, 1]; inverse of from_unit_segment."""
    if math.isinf(t0) and math.isinf(t1):
        return math.atan(t) / math.pi + 0.5
    if math.isinf(t0):
        return 1.0 / (t1 - t + 1.0)
    if math.isinf(t1):
        return 1.0 - 1.0 / (t - t0 + 1.0)
    if t1 == t0:
        return 0.0
    return (t - t0) / (t1 - t0)


@dataclass(frozen=True, slots=True)
class PolyCurve:
    """A continuous curve made of several continuous sub-curves.

    Immutable: use PolyCurveBuilder to assemble one piece by piece.

    Attributes:
        curves: Ordered sub-curves (atomic elements or nested PolyCurves)
        closed: Whether the last sub-curve connects back to the first one
    """

    curves: tuple["Curve", ...] = ()
    closed: bool = False

    @classmethod
    def from_points(cls, points: Sequence[Point], closed: bool = False) -> "PolyCurve":
        """Create a polyline, or a linear ring when closed is True."""
        segments = [LineElement.segment(p1, p2) for p1, p2 in zip(points, points[1:])]
        if closed and len(points) > 1 and points[0] != points[-1]:
            segments.append(LineElement.segment(points[-1], points[0]))
        return cls(tuple(segments), closed)

    @classmethod
    def from_curves(cls, curves: Iterable["Curve"], closed: bool = False) -> "PolyCurve":
        return cls(tuple(curves), closed)

    def __len__(self) -> int:
        return len(self.curves)

    def __iter__(self) -> Iterator["Curve"]:
        return iter(self.curves)

    def is_empty(self) -> bool:
        return len(self.curves) == 0

    def is_bounded(self) -> bool:
        return all(curve.is_bounded() for curve in self.curves)

    # ------------------------------------------------------------------
    # Parametrization

    @property
    def t0(self) -> float:
        return 0.0

    @property
    def t1(self) -> float:
        return float(max(2 * len(self.curves) - 1, 0))

    def curve_index(self, t: float) -> int:
        """Index of the sub-curve owning global position t."""
        n = len(self.curves)
        if n == 0:
            return 0
        if t > 2 * n - 1:
            return n - 1
        if t < 0.0:
            return 0

        nc = math.floor(t)
        index = nc // 2
        if index * 2 == nc:
            return index
        return index if t - nc < 0.5 else index + 1

    def local_position(self, t: float) -> float:
        """Convert a global position into the parameter of its sub-curve."""
        i = self.curve_index(t)
        curve = self.curves[i]
        u = min(max(t - 2 * i, 0.0), 1.0)
        return from_unit_segment(u, curve.t0, curve.t1)

    def global_position(self, i: int, t: float) -> float:
        """Convert the parameter t of sub-curve i into a global position."""
        curve = self.curves[i]
        return to_unit_segment(t, curve.t0, curve.t1) + 2 * i

    def child_curve(self, t: float) -> "Curve | None":
        if not self.curves:
            return None
        return self.curves[self.curve_index(t)]

    def point(self, t: float) -> Point | None:
        """Point at global position t.

        Returns:
            The evaluated point, or None for an empty curve
        """
        if not self.curves:
            return None
        if t < self.t0:
            return self.first_point
        if t > self.t1:
            return self.last_point

        nc = math.floor(t)
        index = nc // 2
        if index * 2 == nc:
            curve = self.curves[index]
            return curve.point(from_unit_segment(t - nc, curve.t0, curve.t1))

        # Junction: last point of previous curve or first point of next one
        if t - nc < 0.5:
            return self.curves[index].last_point
        return self.curves[index + 1].first_point

    @property
    def first_point(self) -> Point | None:
        if not self.curves:
            return None
        return self.curves[0].first_point

    @property
    def last_point(self) -> Point | None:
        if not self.curves:
            return None
        return self.curves[-1].last_point

    def position(self, point: Point) -> float:
        """Global position of the projection of point on the curve.

        Sub-curves are scanned in order; ties keep the first one.
        """
        min_dist = math.inf
        pos = 0.0
        for i, curve in enumerate(self.curves):
            dist = curve.distance(point)
            if dist < min_dist:
                min_dist = dist
                pos = self.global_position(i, curve.position(point))
        return pos

    def distance(self, point: Point) -> float:
        return min((curve.distance(point) for curve in self.curves), default=math.inf)

    # ------------------------------------------------------------------
    # Measures

    def length(self) -> float:
        return sum(curve.length() for curve in self.curves)

    def length_at(self, t: float) -> float:
        """Length of the curve between its start and position t."""
        if not self.curves:
            return 0.0
        i = self.curve_index(t)
        before = sum(curve.length() for curve in self.curves[:i])
        return before + self.curves[i].length_at(self.local_position(t))

    def position_at_length(self, length: float) -> float:
        """Global position located at a given length from the start."""
        cumulated = 0.0
        for i, curve in enumerate(self.curves):
            piece_length = curve.length()
            if length <= cumulated + piece_length:
                return self.global_position(i, curve.position_at_length(length - cumulated))
            cumulated += piece_length
        return self.t1

    def signed_area(self) -> float:
        """Signed area enclosed by the curve, positive for counter-clockwise."""
        return sum(curve.signed_area() for curve in self.curves)

    def winding_angle(self, point: Point) -> float:
        return sum(curve.winding_angle(point) for curve in self.curves)

    def bounding_box(self) -> Box:
        if not self.curves:
            return Box(0.0, 0.0, 0.0, 0.0)
        if not self.is_bounded():
            raise UnboundedShapeError(self, "bounding box")
        box = self.curves[0].bounding_box()
        for curve in self.curves[1:]:
            box = box.union(curve.bounding_box())
        return box

    # ------------------------------------------------------------------
    # Derived curves

    def smooth_pieces(self) -> list[Element]:
        """Atomic elements of the curve, in traversal order."""
        return smooth_pieces(self)

    def continuous_curves(self) -> list["PolyCurve"]:
        """Maximal continuous pieces; a PolyCurve is one continuous curve."""
        return [self]

    def reverse(self) -> "PolyCurve":
        """Same curve traversed in the opposite direction."""
        return PolyCurve(tuple(curve.reverse() for curve in reversed(self.curves)), self.closed)

    def sub_curve(self, t0: float, t1: float) -> "PolyCurve":
        """Portion of the curve between two global positions.

        For closed curves, t1 < t0 wraps around through the start point. For
        open curves it gives an empty curve.
        """
        n = len(self.curves)
        if n == 0 or (not self.closed and t1 <= t0):
            return PolyCurve()

        t0 = min(max(t0, 0.0), self.t1)
        t1 = min(max(t1, 0.0), self.t1)

        ind0 = math.floor(t0) // 2
        ind1 = math.floor(t1) // 2
        if t0 - 2 * ind0 > 1.5:
            ind0 += 1
        if t1 - 2 * ind1 > 1.5:
            ind1 += 1
        ind0 = min(ind0, n - 1)
        ind1 = min(ind1, n - 1)

        first = self.curves[ind0]
        last = self.curves[ind1]
        pos0 = from_unit_segment(min(max(t0 - 2 * ind0, 0.0), 1.0), first.t0, first.t1)
        pos1 = from_unit_segment(min(max(t1 - 2 * ind1, 0.0), 1.0), last.t0, last.t1)

        if ind0 == ind1 and t0 < t1:
            return PolyCurve((first.sub_curve(pos0, pos1),))

        pieces: list[Curve] = [first.sub_curve(pos0, first.t1)]
        if ind1 > ind0:
            pieces.extend(self.curves[ind0 + 1 : ind1])
        else:
            pieces.extend(self.curves[ind0 + 1 :])
            pieces.extend(self.curves[:ind1])
        pieces.append(last.sub_curve(last.t0, pos1))
        return PolyCurve(tuple(pieces))

    def clip(self, box: Box) -> list["PolyCurve"]:
        """Pieces of the curve lying inside the box.

        Each maximal run of consecutive inside pieces becomes one output
        curve. A closed curve fully inside the box is returned unchanged.
        """
        runs: list[list[Curve]] = []
        clipped_length = 0.0
        for curve in self.curves:
            for piece in curve.clip(box):
                clipped_length += piece.length()
                if runs and runs[-1][-1].last_point.almost_equals(piece.first_point, GLUE_EPSILON):
                    runs[-1].append(piece)
                else:
                    runs.append([piece])

        if not runs:
            return []

        total = self.length()
        if self.closed and abs(total - clipped_length) <= GLUE_EPSILON * max(1.0, total):
            return [self]

        if (
            self.closed
            and len(runs) > 1
            and runs[-1][-1].last_point.almost_equals(runs[0][0].first_point, GLUE_EPSILON)
        ):
            runs[0] = runs.pop() + runs[0]

        return [PolyCurve(tuple(run)) for run in runs]

    def start_tangent(self) -> Vector:
        return start_tangent(self)

    def end_tangent(self) -> Vector:
        return end_tangent(self)

    def transform(self, trans: SimilarityTransform) -> "PolyCurve":
        return PolyCurve(tuple(curve.transform(trans) for curve in self.curves), self.closed)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary representation of the curve and its sub-curves
        """
        return {
            "type": "poly",
            "closed": self.closed,
            "curves": [curve.to_dict() for curve in self.curves],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PolyCurve":
        curves = tuple(curve_from_dict(item) for item in data["curves"])
        return cls(curves, data.get("closed", False))


Curve = LineElement | CircleArc | PolyCurve


class PolyCurveBuilder:
    """Append-only assembly of a PolyCurve.

    The builder is the only mutable object used while composing curves;
    build() returns an immutable PolyCurve.
    """

    def __init__(self) -> None:
        self._curves: list[Curve] = []

    def __len__(self) -> int:
        return len(self._curves)

    def append(self, curve: Curve) -> "PolyCurveBuilder":
        self._curves.append(curve)
        return self

    def extend(self, curves: Iterable[Curve]) -> "PolyCurveBuilder":
        self._curves.extend(curves)
        return self

    @property
    def last_point(self) -> Point | None:
        if not self._curves:
            return None
        return self._curves[-1].last_point

    def build(self, closed: bool = False) -> PolyCurve:
        return PolyCurve(tuple(self._curves), closed)


def smooth_pieces(curve: Curve) -> list[Element]:
    """Flatten a curve into its atomic elements."""
    match curve:
        case PolyCurve(curves=curves):
            return [piece for child in curves for piece in smooth_pieces(child)]
        case _:
            return [curve]


def start_tangent(curve: Curve) -> Vector:
    """Tangent vector at the first point of a curve."""
    match curve:
        case PolyCurve(curves=()):
            raise DegenerateCurveError(curve, "empty curve has no tangent")
        case PolyCurve(curves=curves):
            return start_tangent(curves[0])
        case _:
            return curve.tangent(curve.t0)


def end_tangent(curve: Curve) -> Vector:
    """Tangent vector at the last point of a curve."""
    match curve:
        case PolyCurve(curves=()):
            raise DegenerateCurveError(curve, "empty curve has no tangent")
        case PolyCurve(curves=curves):
            return end_tangent(curves[-1])
        case _:
            return curve.tangent(curve.t1)


def curve_from_dict(data: dict[str, Any]) -> Curve:
    """Deserialize any curve from its dictionary form."""
    if data["type"] == "poly":
        return PolyCurve.from_dict(data)
    return element_from_dict(data)
