"""Atomic circulinear elements.

This module defines the two smooth pieces every curve is made of:
- LineElement: A straight segment, ray or line (origin + t * direction)
- CircleArc: An arc of circle, counter-clockwise for positive extent

Each element carries its own parameter interval [t0, t1] and implements the
Measurable, Orientable and Offsettable capabilities directly. Offsets follow
one convention: a positive distance moves the element to its right.
"""

import math
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from curvebuffer.domain._intersect import circle_circle, circumcenter, line_circle, line_line
from curvebuffer.domain.point import Box, Point, SimilarityTransform, Vector
from curvebuffer.exceptions import DegenerateCurveError, UnboundedShapeError

TWO_PI = 2.0 * math.pi

# Tolerance on parameters when testing whether an intersection lies on a piece
PARAMETER_EPSILON = 1e-9


@runtime_checkable
class Measurable(Protocol):
    """Shapes with a length and a length <-> position conversion."""

    def length(self) -> float: ...

    def length_at(self, t: float) -> float: ...

    def position_at_length(self, length: float) -> float: ...


@runtime_checkable
class Orientable(Protocol):
    """Shapes with an inside, measured by winding angle and signed area."""

    def winding_angle(self, point: Point) -> float: ...

    def signed_area(self) -> float: ...


@runtime_checkable
class Offsettable(Protocol):
    """Shapes that can produce a parallel copy at a signed distance."""

    def parallel(self, distance: float) -> Any: ...


def _normalize_angle(angle: float) -> float:
    """Bring an angle into [0, 2*pi)."""
    angle = math.fmod(angle, TWO_PI)
    if angle < 0.0:
        angle += TWO_PI
    return angle


def _in_range(t: float, t0: float, t1: float) -> float | None:
    """Clamp t into [t0, t1] when it lies within tolerance, else None."""
    if math.isinf(t0) or math.isinf(t1):
        tol = PARAMETER_EPSILON
    else:
        tol = PARAMETER_EPSILON * max(1.0, t1 - t0)
    if t < t0 - tol or t > t1 + tol:
        return None
    return min(max(t, t0), t1)


def _winding(start: Vector, end: Vector) -> float:
    """Signed angle swept from vector start to vector end."""
    return math.atan2(start.cross(end), start.dot(end))


@dataclass(frozen=True, slots=True)
class LineElement:
    """A straight piece: segment, ray or full line.

    Points are origin + t * direction for t in [t0, t1]. Bounds may be
    infinite for rays and straight lines.

    Attributes:
        origin: Point at parameter 0
        direction: Direction vector (not necessarily unit)
        t0: Start parameter
        t1: End parameter
    """

    origin: Point
    direction: Vector
    t0: float = 0.0
    t1: float = 1.0

    @classmethod
    def segment(cls, p1: Point, p2: Point) -> "LineElement":
        """Create the bounded segment from p1 to p2, parametrized on [0, 1]."""
        return cls(p1, p1.vector_to(p2), 0.0, 1.0)

    @classmethod
    def ray(cls, origin: Point, direction: Vector) -> "LineElement":
        """Create a ray starting at origin."""
        return cls(origin, direction, 0.0, math.inf)

    @classmethod
    def straight_line(cls, origin: Point, direction: Vector) -> "LineElement":
        """Create an unbounded line through origin."""
        return cls(origin, direction, -math.inf, math.inf)

    def is_bounded(self) -> bool:
        return not (math.isinf(self.t0) or math.isinf(self.t1))

    def point(self, t: float) -> Point:
        """Point at parameter t, clamped into [t0, t1]."""
        t = min(max(t, self.t0), self.t1)
        return self.origin.translate(self.direction, t)

    @property
    def first_point(self) -> Point:
        if math.isinf(self.t0):
            raise UnboundedShapeError(self, "first point")
        return self.point(self.t0)

    @property
    def last_point(self) -> Point:
        if math.isinf(self.t1):
            raise UnboundedShapeError(self, "last point")
        return self.point(self.t1)

    def length(self) -> float:
        if not self.is_bounded():
            return math.inf
        return self.direction.norm() * (self.t1 - self.t0)

    def length_at(self, t: float) -> float:
        """Length of the element between t0 and t."""
        return self.direction.norm() * (t - self.t0)

    def position_at_length(self, length: float) -> float:
        """Parameter located at the given length from the start."""
        norm = self.direction.norm()
        if norm == 0.0:
            raise DegenerateCurveError(self, "zero-length direction vector")
        return self.t0 + length / norm

    def tangent(self, t: float) -> Vector:
        """Tangent vector, constant along the line."""
        if self.direction.norm() == 0.0:
            raise DegenerateCurveError(self, "zero-length direction vector")
        return self.direction

    def curvature(self, t: float) -> float:
        return 0.0

    def parallel(self, distance: float) -> "LineElement":
        """Parallel line at a signed distance, positive on the right side.

        Raises:
            DegenerateCurveError: If the direction vector has zero length
        """
        if self.direction.norm() == 0.0:
            raise DegenerateCurveError(self, "zero-length direction vector")
        normal = self.direction.right_normal()
        return LineElement(
            self.origin.translate(normal, distance), self.direction, self.t0, self.t1
        )

    def reverse(self) -> "LineElement":
        """Same points traversed in opposite direction."""
        return LineElement(self.origin, self.direction.opposite(), -self.t1, -self.t0)

    def sub_curve(self, t0: float, t1: float) -> "LineElement":
        """Portion of the line between two parameters."""
        t0 = min(max(t0, self.t0), self.t1)
        t1 = min(max(t1, self.t0), self.t1)
        return LineElement(self.origin, self.direction, t0, t1)

    def position(self, point: Point) -> float:
        """Parameter of the orthogonal projection of point, clamped to bounds."""
        norm2 = self.direction.dot(self.direction)
        if norm2 == 0.0:
            return self.t0
        t = self.origin.vector_to(point).dot(self.direction) / norm2
        return min(max(t, self.t0), self.t1)

    def distance(self, point: Point) -> float:
        return self.point(self.position(point)).distance(point)

    def winding_angle(self, point: Point) -> float:
        """Angle swept by the element as seen from point."""
        if math.isinf(self.t0):
            start = self.direction.opposite()
        else:
            start = point.vector_to(self.first_point)
        if math.isinf(self.t1):
            end = self.direction
        else:
            end = point.vector_to(self.last_point)
        return _winding(start, end)

    def signed_area(self) -> float:
        """Contribution of the element to the area of an enclosing curve."""
        p1, p2 = self.first_point, self.last_point
        return (p1.x * p2.y - p2.x * p1.y) / 2.0

    def bounding_box(self) -> Box:
        if not self.is_bounded():
            raise UnboundedShapeError(self, "bounding box")
        p1, p2 = self.first_point, self.last_point
        return Box(min(p1.x, p2.x), max(p1.x, p2.x), min(p1.y, p2.y), max(p1.y, p2.y))

    def clip(self, box: Box) -> list["LineElement"]:
        """Part of the line inside the box (Liang-Barsky clipping).

        Returns:
            Empty list, or a list holding the single clipped piece
        """
        t_min, t_max = self.t0, self.t1
        checks = (
            (-self.direction.x, self.origin.x - box.min_x),
            (self.direction.x, box.max_x - self.origin.x),
            (-self.direction.y, self.origin.y - box.min_y),
            (self.direction.y, box.max_y - self.origin.y),
        )
        for p, q in checks:
            if p == 0.0:
                if q < 0.0:
                    return []
                continue
            r = q / p
            if p < 0.0:
                t_min = max(t_min, r)
            else:
                t_max = min(t_max, r)

        if t_max <= t_min:
            return []
        return [LineElement(self.origin, self.direction, t_min, t_max)]

    def intersections(self, other: "Element") -> list[Point]:
        """Points where this element crosses another one."""
        return [self.point(t) for t, _ in element_intersections(self, other)]

    def transform(self, trans: SimilarityTransform) -> "LineElement":
        return LineElement(
            trans.apply(self.origin), trans.apply_vector(self.direction), self.t0, self.t1
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with type, origin, direction and bounds
        """
        return {
            "type": "line",
            "origin": self.origin.to_dict(),
            "direction": {"x": self.direction.x, "y": self.direction.y},
            "t0": self.t0,
            "t1": self.t1,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineElement":
        direction = data["direction"]
        return cls(
            origin=Point.from_dict(data["origin"]),
            direction=Vector(direction["x"], direction["y"]),
            t0=data.get("t0", 0.0),
            t1=data.get("t1", 1.0),
        )


@dataclass(frozen=True, slots=True)
class CircleArc:
    """An arc of circle.

    The arc starts at start_angle and sweeps extent radians, counter-clockwise
    when extent is positive. Parameter t runs over [0, |extent|].

    Attributes:
        center: Center of the supporting circle
        radius: Radius of the supporting circle
        start_angle: Angle of the first point, in radians
        extent: Signed angular span, in radians
    """

    center: Point
    radius: float
    start_angle: float
    extent: float

    @classmethod
    def from_three_points(cls, p1: Point, p2: Point, p3: Point) -> "CircleArc":
        """Create the arc starting at p1, passing through p2 and ending at p3.

        Raises:
            ColinearPointsError: If the three points are colinear
        """
        center = circumcenter(p1, p2, p3)
        direct = p1.vector_to(p2).cross(p2.vector_to(p3)) > 0.0
        return cls.from_center(center, p1, p3, direct)

    @classmethod
    def from_center(
        cls, center: Point, start: Point, end: Point, direct: bool
    ) -> "CircleArc":
        """Create the arc around center going from start to end.

        The radius is taken from the start point.
        """
        angle1 = center.vector_to(start).angle()
        angle2 = center.vector_to(end).angle()
        if direct:
            extent = _normalize_angle(angle2 - angle1)
        else:
            extent = -_normalize_angle(angle1 - angle2)
        return cls(center, center.distance(start), angle1, extent)

    @property
    def t0(self) -> float:
        return 0.0

    @property
    def t1(self) -> float:
        return abs(self.extent)

    def is_direct(self) -> bool:
        """True for a counter-clockwise arc."""
        return self.extent >= 0.0

    def is_bounded(self) -> bool:
        return True

    def _sign(self) -> float:
        return 1.0 if self.extent >= 0.0 else -1.0

    def angle_at(self, t: float) -> float:
        """Angle of the point at parameter t."""
        return self.start_angle + self._sign() * t

    def point(self, t: float) -> Point:
        t = min(max(t, 0.0), self.t1)
        return Point.from_polar(self.center, self.radius, self.angle_at(t))

    @property
    def first_point(self) -> Point:
        return self.point(0.0)

    @property
    def last_point(self) -> Point:
        return self.point(self.t1)

    def length(self) -> float:
        return self.radius * abs(self.extent)

    def length_at(self, t: float) -> float:
        return self.radius * t

    def position_at_length(self, length: float) -> float:
        if self.radius == 0.0:
            raise DegenerateCurveError(self, "zero radius")
        return length / self.radius

    def tangent(self, t: float) -> Vector:
        """Tangent vector, with norm equal to the radius."""
        if self.radius == 0.0:
            raise DegenerateCurveError(self, "zero radius")
        angle = self.angle_at(t)
        sign = self._sign()
        return Vector(
            -sign * self.radius * math.sin(angle), sign * self.radius * math.cos(angle)
        )

    def curvature(self, t: float) -> float:
        """Signed curvature, positive for counter-clockwise arcs."""
        if self.radius == 0.0:
            raise DegenerateCurveError(self, "zero radius")
        return self._sign() / self.radius

    def parallel(self, distance: float) -> "CircleArc":
        """Concentric arc at a signed distance, positive on the right side.

        When the offset crosses the center, the arc is re-expressed on the
        opposite side of the center so that the radius stays positive.

        Raises:
            DegenerateCurveError: If the arc has zero radius
        """
        if self.radius == 0.0:
            raise DegenerateCurveError(self, "zero radius")
        r2 = self.radius + distance if self.is_direct() else self.radius - distance
        if r2 >= 0.0:
            return CircleArc(self.center, r2, self.start_angle, self.extent)
        return CircleArc(self.center, -r2, self.start_angle + math.pi, self.extent)

    def reverse(self) -> "CircleArc":
        return CircleArc(
            self.center, self.radius, self.start_angle + self.extent, -self.extent
        )

    def sub_curve(self, t0: float, t1: float) -> "CircleArc":
        t0 = min(max(t0, 0.0), self.t1)
        t1 = min(max(t1, t0), self.t1)
        return CircleArc(
            self.center, self.radius, self.angle_at(t0), self._sign() * (t1 - t0)
        )

    def parameter_of_angle(self, angle: float) -> float | None:
        """Parameter of the point at a given angle, or None if off the arc."""
        t = _normalize_angle(self._sign() * (angle - self.start_angle))
        if t <= self.t1 + PARAMETER_EPSILON:
            return min(t, self.t1)
        # Points just before the start wrap around to 2*pi
        if t >= TWO_PI - PARAMETER_EPSILON:
            return 0.0
        return None

    def position(self, point: Point) -> float:
        """Parameter of the closest point of the arc."""
        if point == self.center:
            return 0.0
        t = self.parameter_of_angle(self.center.vector_to(point).angle())
        if t is not None:
            return t
        if point.distance(self.first_point) <= point.distance(self.last_point):
            return 0.0
        return self.t1

    def distance(self, point: Point) -> float:
        return self.point(self.position(point)).distance(point)

    def winding_angle(self, point: Point) -> float:
        """Angle swept by the arc as seen from point.

        This is the angle subtended by the chord, corrected by a full turn when
        the point lies in the circular segment between chord and arc.
        """
        # The chord test only holds for arcs up to a half turn
        if abs(self.extent) > math.pi:
            half = self.t1 / 2.0
            return self.sub_curve(0.0, half).winding_angle(point) + self.sub_curve(
                half, self.t1
            ).winding_angle(point)

        p1, p2 = self.first_point, self.last_point
        angle = _winding(point.vector_to(p1), point.vector_to(p2))

        if self.center.distance(point) >= self.radius:
            return angle
        side = p1.vector_to(p2).cross(p1.vector_to(point))
        if self.is_direct() and side < 0.0:
            return angle + TWO_PI
        if not self.is_direct() and side > 0.0:
            return angle - TWO_PI
        return angle

    def signed_area(self) -> float:
        """Contribution of the arc to the area of an enclosing curve."""
        theta0 = self.start_angle
        theta1 = self.start_angle + self.extent
        r = self.radius
        cx, cy = self.center.x, self.center.y
        integral = r * r * self.extent + r * (
            cx * (math.sin(theta1) - math.sin(theta0))
            - cy * (math.cos(theta1) - math.cos(theta0))
        )
        return integral / 2.0

    def bounding_box(self) -> Box:
        points = [self.first_point, self.last_point]
        for k in range(4):
            angle = k * math.pi / 2.0
            if self.parameter_of_angle(angle) is not None:
                points.append(Point.from_polar(self.center, self.radius, angle))
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return Box(min(xs), max(xs), min(ys), max(ys))

    def clip(self, box: Box) -> list["CircleArc"]:
        """Pieces of the arc lying inside the box."""
        cuts = [0.0, self.t1]
        for corner, direction in (
            (Point(box.min_x, box.min_y), Vector(1.0, 0.0)),
            (Point(box.min_x, box.max_y), Vector(1.0, 0.0)),
            (Point(box.min_x, box.min_y), Vector(0.0, 1.0)),
            (Point(box.max_x, box.min_y), Vector(0.0, 1.0)),
        ):
            for s in line_circle(corner, direction, self.center, self.radius):
                hit = corner.translate(direction, s)
                t = self.parameter_of_angle(self.center.vector_to(hit).angle())
                if t is not None:
                    cuts.append(t)

        cuts.sort()
        eps = PARAMETER_EPSILON * max(1.0, self.radius)
        pieces: list[CircleArc] = []
        for a, b in zip(cuts, cuts[1:]):
            if b - a <= PARAMETER_EPSILON:
                continue
            if box.contains(self.point((a + b) / 2.0), eps):
                pieces.append(self.sub_curve(a, b))
        return _merge_arc_pieces(self, pieces)

    def intersections(self, other: "Element") -> list[Point]:
        return [self.point(t) for t, _ in element_intersections(self, other)]

    def transform(self, trans: SimilarityTransform) -> "CircleArc":
        return CircleArc(
            trans.apply(self.center),
            self.radius * trans.scale,
            self.start_angle + trans.rotation,
            self.extent,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with type, center, radius, start angle and extent
        """
        return {
            "type": "arc",
            "center": self.center.to_dict(),
            "radius": self.radius,
            "start_angle": self.start_angle,
            "extent": self.extent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CircleArc":
        return cls(
            center=Point.from_dict(data["center"]),
            radius=data["radius"],
            start_angle=data["start_angle"],
            extent=data["extent"],
        )


Element = LineElement | CircleArc


def _merge_arc_pieces(arc: CircleArc, pieces: list[CircleArc]) -> list[CircleArc]:
    """Glue clipped arc pieces that touch each other."""
    merged: list[CircleArc] = []
    eps = PARAMETER_EPSILON * max(1.0, arc.radius)
    for piece in pieces:
        if merged and merged[-1].last_point.almost_equals(piece.first_point, eps):
            last = merged[-1]
            merged[-1] = CircleArc(
                arc.center, arc.radius, last.start_angle, last.extent + piece.extent
            )
        else:
            merged.append(piece)
    return merged


def element_from_dict(data: dict[str, Any]) -> Element:
    """Deserialize an element from its dictionary form."""
    match data["type"]:
        case "line":
            return LineElement.from_dict(data)
        case "arc":
            return CircleArc.from_dict(data)
        case other:
            raise ValueError(f"Unknown element type: {other}")


def _arc_parameter(arc: CircleArc, point: Point) -> float | None:
    return arc.parameter_of_angle(arc.center.vector_to(point).angle())


def element_intersections(first: Element, second: Element) -> list[tuple[float, float]]:
    """Intersections of two atomic elements.

    Parallel lines and concentric arcs never intersect, even when they overlap.

    Returns:
        Pairs (t_first, t_second) of parameters on each element
    """
    result: list[tuple[float, float]] = []

    match first, second:
        case LineElement(), LineElement():
            params = line_line(first.origin, first.direction, second.origin, second.direction)
            if params is not None:
                s = _in_range(params[0], first.t0, first.t1)
                u = _in_range(params[1], second.t0, second.t1)
                if s is not None and u is not None:
                    result.append((s, u))

        case LineElement(), CircleArc():
            for s in line_circle(first.origin, first.direction, second.center, second.radius):
                s_in = _in_range(s, first.t0, first.t1)
                if s_in is None:
                    continue
                u = _arc_parameter(second, first.origin.translate(first.direction, s))
                if u is not None:
                    result.append((s_in, u))

        case CircleArc(), LineElement():
            result = [(t, s) for s, t in element_intersections(second, first)]

        case CircleArc(), CircleArc():
            for hit in circle_circle(first.center, first.radius, second.center, second.radius):
                s = _arc_parameter(first, hit)
                u = _arc_parameter(second, hit)
                if s is not None and u is not None:
                    result.append((s, u))

    return result
