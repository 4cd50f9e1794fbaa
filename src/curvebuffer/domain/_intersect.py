"""Internal intersection formulas for lines and circles.

This is an internal module containing helper functions for the element
classes. Lines are given as origin + parameter * direction, circles as
center and radius. Not intended for public use.
"""

import math

from curvebuffer.domain.point import Point, Vector
from curvebuffer.exceptions import ColinearPointsError

# Relative threshold under which two directions are treated as parallel
PARALLEL_EPSILON = 1e-12


def line_line(
    origin1: Point, direction1: Vector, origin2: Point, direction2: Vector
) -> tuple[float, float] | None:
    """Intersect two supporting lines.

    Args:
        origin1: Origin of the first line
        direction1: Direction of the first line
        origin2: Origin of the second line
        direction2: Direction of the second line

    Returns:
        Pair (s, u) such that origin1 + s*direction1 == origin2 + u*direction2,
        or None for parallel lines
    """
    denom = direction1.cross(direction2)
    if abs(denom) <= PARALLEL_EPSILON * direction1.norm() * direction2.norm():
        return None

    diff = origin1.vector_to(origin2)
    s = diff.cross(direction2) / denom
    u = diff.cross(direction1) / denom
    return s, u


def line_circle(origin: Point, direction: Vector, center: Point, radius: float) -> list[float]:
    """Intersect a line with a circle.

    Returns:
        Line parameters of the intersections (0, 1 or 2 values)
    """
    a = direction.dot(direction)
    if a == 0.0:
        return []

    offset = center.vector_to(origin)
    b = 2.0 * offset.dot(direction)
    c = offset.dot(offset) - radius * radius
    disc = b * b - 4.0 * a * c

    # Tangent lines produce a slightly negative discriminant in floating point
    if disc < 0.0:
        foot = -b / (2.0 * a)
        gap = abs(origin.translate(direction, foot).distance(center) - radius)
        if gap <= 1e-9 * max(1.0, radius):
            return [foot]
        return []

    root = math.sqrt(disc)
    if root == 0.0:
        return [-b / (2.0 * a)]
    return [(-b - root) / (2.0 * a), (-b + root) / (2.0 * a)]


def circle_circle(center1: Point, radius1: float, center2: Point, radius2: float) -> list[Point]:
    """Intersect two circles.

    Concentric circles never produce intersections, even when they coincide.

    Returns:
        Intersection points (0, 1 or 2 points)
    """
    dist = center1.distance(center2)
    if dist == 0.0:
        return []

    tol = 1e-9 * max(1.0, radius1, radius2)
    if dist > radius1 + radius2 + tol or dist < abs(radius1 - radius2) - tol:
        return []

    a = (radius1 * radius1 - radius2 * radius2 + dist * dist) / (2.0 * dist)
    h = math.sqrt(max(radius1 * radius1 - a * a, 0.0))

    axis = center1.vector_to(center2).scale(1.0 / dist)
    base = center1.translate(axis, a)
    if h == 0.0:
        return [base]

    normal = axis.rotate90()
    return [base.translate(normal, h), base.translate(normal, -h)]


def circumcenter(p1: Point, p2: Point, p3: Point) -> Point:
    """Center of the circle passing through three points.

    Raises:
        ColinearPointsError: If the three points are colinear
    """
    ax, ay = p1.x, p1.y
    bx, by = p2.x, p2.y
    cx, cy = p3.x, p3.y

    d = 2.0 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    scale = max(p1.distance(p2), p2.distance(p3), p1.distance(p3))
    if scale == 0.0 or abs(d) <= PARALLEL_EPSILON * scale * scale:
        raise ColinearPointsError(p1, p2, p3)

    a2 = ax * ax + ay * ay
    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    ux = (a2 * (by - cy) + b2 * (cy - ay) + c2 * (ay - by)) / d
    uy = (a2 * (cx - bx) + b2 * (ax - cx) + c2 * (bx - ax)) / d
    return Point(ux, uy)
