"""Cap generation at the extremities of open curves.

A cap closes the buffer ring around one extremity. It starts at the offset
point on the right of the outward direction and ends at the offset point on
its left, so that the ring runs counter-clockwise around the extremity.
"""

import math
from abc import ABC, abstractmethod

from curvebuffer.domain import CircleArc, Element, LineElement, Point, Vector
from curvebuffer.exceptions import DegenerateCurveError


class CapFactory(ABC):
    """Base class for cap factories."""

    def create_cap(self, point: Point, direction: Vector, distance: float) -> tuple[Element, ...]:
        """Create the cap around an extremity.

        Args:
            point: Extremity of the original curve
            direction: Direction of the curve at the extremity, pointing outward
            distance: Buffer distance (its sign is ignored)

        Returns:
            Elements going from the right offset point to the left one

        Raises:
            DegenerateCurveError: If direction has zero length
        """
        if direction.norm() == 0.0:
            raise DegenerateCurveError(direction, "cap direction has zero length")
        unit = direction.normalize()
        return self._make_cap(point, unit, abs(distance))

    @abstractmethod
    def _make_cap(self, point: Point, unit: Vector, radius: float) -> tuple[Element, ...]:
        """Build the cap for a unit outward direction and positive radius."""


class RoundCapFactory(CapFactory):
    """Half-circle caps centered on the extremity."""

    def _make_cap(self, point: Point, unit: Vector, radius: float) -> tuple[Element, ...]:
        start_angle = unit.right_normal().angle()
        return (CircleArc(point, radius, start_angle, math.pi),)


class SquareCapFactory(CapFactory):
    """Caps projecting by the buffer distance beyond the extremity."""

    def _make_cap(self, point: Point, unit: Vector, radius: float) -> tuple[Element, ...]:
        normal = unit.right_normal()
        right = point.translate(normal, radius)
        left = point.translate(normal, -radius)
        right_out = right.translate(unit, radius)
        left_out = left.translate(unit, radius)
        return (
            LineElement.segment(right, right_out),
            LineElement.segment(right_out, left_out),
            LineElement.segment(left_out, left),
        )


class ButtCapFactory(CapFactory):
    """Flat caps, cut square at the extremity."""

    def _make_cap(self, point: Point, unit: Vector, radius: float) -> tuple[Element, ...]:
        normal = unit.right_normal()
        return (
            LineElement.segment(point.translate(normal, radius), point.translate(normal, -radius)),
        )
