"""Join generation between consecutive offset pieces.

When the pieces of a curve are offset independently, a gap opens at every
vertex where the curve turns away from the offset side. A join factory fills
that gap with circulinear geometry:

- RoundJoinFactory: arc of radius |d| centered on the original vertex
- BevelJoinFactory: straight segment between the two offset endpoints
- MitreJoinFactory: two segments meeting where the offset tangents cross,
  falling back to a bevel beyond the mitre limit

On concave turns the offsets overlap instead of leaving a gap. Factories then
return nothing and the overlap is removed later by the resolver.
"""

import logging
from abc import ABC, abstractmethod

import structlog

from curvebuffer.core.geometry import is_convex_turn, tangent_intersection
from curvebuffer.domain import CircleArc, Element, LineElement, Point, Vector

logger = structlog.wrap_logger(logging.getLogger(__name__))


class JoinFactory(ABC):
    """Base class for join factories.

    Subclasses only build the geometry of a convex join; the decision of
    whether a join is needed at all is shared here.
    """

    def __init__(self, tolerance: float = 1e-9) -> None:
        """Initialize factory.

        Args:
            tolerance: Distance under which two offset endpoints are the same
        """
        self.tolerance = tolerance

    def create_join(
        self,
        end_point: Point,
        end_tangent: Vector,
        start_point: Point,
        start_tangent: Vector,
        vertex: Point,
        distance: float,
    ) -> tuple[Element, ...]:
        """Create the join between two consecutive offset pieces.

        Args:
            end_point: Last point of the offset of the incoming piece
            end_tangent: Tangent at the end of the incoming piece
            start_point: First point of the offset of the outgoing piece
            start_tangent: Tangent at the start of the outgoing piece
            vertex: Original point shared by both pieces
            distance: Signed offset distance, positive on the right

        Returns:
            Elements going from end_point to start_point, or an empty tuple
            for concave turns and coincident endpoints
        """
        eps = self.tolerance * max(1.0, abs(distance))
        if end_point.almost_equals(start_point, eps):
            return ()
        if not is_convex_turn(end_tangent, start_tangent, distance):
            return ()
        return self._make_join(end_point, end_tangent, start_point, start_tangent, vertex, distance)

    @abstractmethod
    def _make_join(
        self,
        end_point: Point,
        end_tangent: Vector,
        start_point: Point,
        start_tangent: Vector,
        vertex: Point,
        distance: float,
    ) -> tuple[Element, ...]:
        """Build the geometry of a convex join."""


class RoundJoinFactory(JoinFactory):
    """Circle arc joins, centered on the original vertex."""

    def _make_join(
        self,
        end_point: Point,
        end_tangent: Vector,
        start_point: Point,
        start_tangent: Vector,
        vertex: Point,
        distance: float,
    ) -> tuple[Element, ...]:
        # Offsets on the right turn around the vertex counter-clockwise
        arc = CircleArc.from_center(vertex, end_point, start_point, direct=distance > 0.0)
        return (arc,)


class BevelJoinFactory(JoinFactory):
    """Straight segment joins."""

    def _make_join(
        self,
        end_point: Point,
        end_tangent: Vector,
        start_point: Point,
        start_tangent: Vector,
        vertex: Point,
        distance: float,
    ) -> tuple[Element, ...]:
        return (LineElement.segment(end_point, start_point),)


class MitreJoinFactory(JoinFactory):
    """Sharp corner joins, extending both offsets until they meet.

    The mitre tip is accepted when it lies within mitre_limit * |d| of the
    original vertex; sharper corners are bevelled.
    """

    def __init__(self, mitre_limit: float = 4.0, tolerance: float = 1e-9) -> None:
        super().__init__(tolerance)
        if mitre_limit < 1.0:
            raise ValueError(f"Mitre limit must be at least 1, got {mitre_limit}")
        self.mitre_limit = mitre_limit

    def _make_join(
        self,
        end_point: Point,
        end_tangent: Vector,
        start_point: Point,
        start_tangent: Vector,
        vertex: Point,
        distance: float,
    ) -> tuple[Element, ...]:
        bevel = (LineElement.segment(end_point, start_point),)

        # Parallel tangents (U-turn): the lines never meet
        hit = tangent_intersection(end_point, end_tangent, start_point, start_tangent)
        if hit is None:
            return bevel

        tip, s, u = hit
        if s <= 0.0 or u >= 0.0:
            return bevel
        if tip.distance(vertex) > self.mitre_limit * abs(distance):
            logger.debug(
                "Mitre limit exceeded, using bevel",
                vertex=vertex.to_tuple(),
                tip_distance=round(tip.distance(vertex), 6),
            )
            return bevel

        return (LineElement.segment(end_point, tip), LineElement.segment(tip, start_point))
