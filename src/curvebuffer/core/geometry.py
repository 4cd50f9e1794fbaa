"""Geometric helpers for buffer construction.

This module provides the small planar computations shared by the join, cap
and resolver services:
- Turn classification at vertices
- Intersection of two tangent lines
- Coverage tests against the bands swept by offset pieces, joins and caps

All functions are pure and stateless.
"""

import math

from curvebuffer.domain import CircleArc, Element, LineElement, Point, Vector
from curvebuffer.domain._intersect import line_line

# Relative threshold on the sine of the turn angle below which two
# tangents are considered aligned
ALIGNMENT_EPSILON = 1e-9


def is_u_turn(t_in: Vector, t_out: Vector) -> bool:
    """Check whether the outgoing tangent points back along the incoming one."""
    norm = t_in.norm() * t_out.norm()
    if norm == 0.0:
        return False
    return abs(t_in.cross(t_out)) <= ALIGNMENT_EPSILON * norm and t_in.dot(t_out) < 0.0


def is_convex_turn(t_in: Vector, t_out: Vector, distance: float) -> bool:
    """Check whether the offset at a vertex opens a gap that a join must fill.

    The turn is convex on the offset side when it bends away from it: a left
    turn for an offset on the right (positive distance), a right turn for an
    offset on the left. U-turns are convex on both sides.

    Args:
        t_in: Tangent at the end of the incoming piece
        t_out: Tangent at the start of the outgoing piece
        distance: Signed offset distance

    Returns:
        True if the turn is convex on the offset side
    """
    if is_u_turn(t_in, t_out):
        return True
    norm = t_in.norm() * t_out.norm()
    cross = t_in.cross(t_out)
    if abs(cross) <= ALIGNMENT_EPSILON * norm:
        return False
    return cross * distance > 0.0


def tangent_intersection(
    p1: Point, t1: Vector, p2: Point, t2: Vector
) -> tuple[Point, float, float] | None:
    """Intersect the tangent lines through p1 and p2.

    Args:
        p1: Point on the first line
        t1: Direction of the first line
        p2: Point on the second line
        t2: Direction of the second line

    Returns:
        Tuple (point, s, u) where point = p1 + s*t1 = p2 + u*t2, or None
        when the lines are parallel
    """
    params = line_line(p1, t1, p2, t2)
    if params is None:
        return None
    s, u = params
    return p1.translate(t1, s), s, u


def point_in_polygon(point: Point, polygon: list[Point]) -> bool:
    """Determine if a point is inside a polygon using ray casting.

    Args:
        point: The point to test
        polygon: Vertices of the polygon, in order

    Returns:
        True if point is inside polygon, False otherwise
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    x, y = point.x, point.y
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside
        j = i
    return inside


def segment_distance(point: Point, seg_start: Point, seg_end: Point) -> float:
    """Distance from a point to a line segment."""
    axis = seg_start.vector_to(seg_end)
    length_sq = axis.dot(axis)
    if length_sq == 0.0:
        return point.distance(seg_start)
    t = max(0.0, min(1.0, seg_start.vector_to(point).dot(axis) / length_sq))
    return point.distance(seg_start.translate(axis, t))


def strictly_inside_polygon(point: Point, polygon: list[Point], eps: float) -> bool:
    """Check that a point is inside a polygon and farther than eps from its edges."""
    if not point_in_polygon(point, polygon):
        return False
    edges = zip(polygon, polygon[1:] + polygon[:1])
    return all(segment_distance(point, a, b) > eps for a, b in edges)


def within_sweep(arc: CircleArc, angle: float, margin: float) -> bool:
    """Check that a polar angle around the arc center lies strictly inside the arc.

    Args:
        arc: Circle arc
        angle: Polar angle around the center of the arc
        margin: Angular slack kept from both extremities

    Returns:
        True if the angle is swept by the arc, away from its extremities
    """
    delta = angle - arc.start_angle if arc.extent > 0.0 else arc.start_angle - angle
    t = delta % (2.0 * math.pi)
    return margin < t < abs(arc.extent) - margin


def band_covers(piece: Element, point: Point, distance: float, eps: float) -> bool:
    """Check whether a point is strictly inside the band swept by the normals of a piece.

    The band of a segment is the rectangle of half-width distance around it.
    The band of an arc is the annular sector between radii r - d and r + d,
    plus the opposite sector when d exceeds r.

    Args:
        piece: Bounded atomic element of the original curve
        point: Point to test
        distance: Half-width of the band
        eps: Distance from the band border under which a point is not inside

    Returns:
        True if point is inside the band, away from its border
    """
    limit = distance - eps
    match piece:
        case LineElement():
            start = piece.first_point
            axis = start.vector_to(piece.last_point)
            length = axis.norm()
            if length <= eps:
                return False
            rel = start.vector_to(point)
            along = rel.dot(axis) / length
            across = abs(rel.cross(axis)) / length
            return eps < along < length - eps and across < limit
        case CircleArc():
            rel = piece.center.vector_to(point)
            rho = rel.norm()
            if rho <= eps:
                return piece.radius < limit
            margin = eps / rho
            angle = rel.angle()
            if abs(rho - piece.radius) < limit and within_sweep(piece, angle, margin):
                return True
            # Normals longer than the radius reach past the center
            return rho + piece.radius < limit and within_sweep(piece, angle + math.pi, margin)
        case _:
            return False


def joint_covers(anchor: Point, elements: tuple[Element, ...], point: Point, eps: float) -> bool:
    """Check whether a point is strictly inside the area a join or cap adds.

    Round joins and caps add the circular sector between their arc and the
    anchor. Straight ones add the polygon closed by the anchor.

    Args:
        anchor: Vertex or extremity the join or cap surrounds
        elements: Elements of the join or cap, in order
        point: Point to test
        eps: Distance from the border under which a point is not inside

    Returns:
        True if point is inside the added area
    """
    arcs = [e for e in elements if isinstance(e, CircleArc)]
    if arcs:
        for arc in arcs:
            rel = arc.center.vector_to(point)
            rho = rel.norm()
            if eps < rho < arc.radius - eps and within_sweep(arc, rel.angle(), eps / rho):
                return True
        return False
    if not elements:
        return False
    polygon = [anchor, elements[0].first_point] + [e.last_point for e in elements]
    return strictly_inside_polygon(point, polygon, eps)
