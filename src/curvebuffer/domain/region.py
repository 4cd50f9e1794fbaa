"""Planar regions bounded by closed curves.

This module defines the result types of buffer computations:
- Boundary: An ordered set of closed, simple curves
- BufferDomain: A region described solely by its boundary

Boundary curves are oriented with the interior on their left: outer curves
run counter-clockwise, holes run clockwise.
"""

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from curvebuffer.domain.point import Box, Point, SimilarityTransform
from curvebuffer.domain.polycurve import PolyCurve


@dataclass(frozen=True, slots=True)
class Boundary:
    """Ordered set of closed curves delimiting a region.

    Attributes:
        curves: The boundary curves, each closed and simple
    """

    curves: tuple[PolyCurve, ...] = ()

    def __len__(self) -> int:
        return len(self.curves)

    def __iter__(self) -> Iterator[PolyCurve]:
        return iter(self.curves)

    def continuous_curves(self) -> list[PolyCurve]:
        """The boundary curves, as independent continuous curves."""
        return list(self.curves)

    def is_empty(self) -> bool:
        return len(self.curves) == 0

    def is_bounded(self) -> bool:
        return all(curve.is_bounded() for curve in self.curves)

    def length(self) -> float:
        return sum(curve.length() for curve in self.curves)

    def signed_area(self) -> float:
        return sum(curve.signed_area() for curve in self.curves)

    def winding_angle(self, point: Point) -> float:
        return sum(curve.winding_angle(point) for curve in self.curves)

    def distance(self, point: Point) -> float:
        return min((curve.distance(point) for curve in self.curves), default=math.inf)

    def bounding_box(self) -> Box:
        if not self.curves:
            return Box(0.0, 0.0, 0.0, 0.0)
        box = self.curves[0].bounding_box()
        for curve in self.curves[1:]:
            box = box.union(curve.bounding_box())
        return box

    def clip(self, box: Box) -> list[PolyCurve]:
        return [piece for curve in self.curves for piece in curve.clip(box)]

    def transform(self, trans: SimilarityTransform) -> "Boundary":
        return Boundary(tuple(curve.transform(trans) for curve in self.curves))

    def to_dict(self) -> dict[str, Any]:
        return {"curves": [curve.to_dict() for curve in self.curves]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Boundary":
        return cls(tuple(PolyCurve.from_dict(item) for item in data["curves"]))


class BufferDomain:
    """A planar region described by its boundary.

    Boundedness and emptiness are derived from the boundary, never stored.
    A domain without boundary curves is empty.

    Example:
        domain = BufferDomain([outer_ring, inner_ring.reverse()])
        domain.contains(Point(0.0, 0.0))
    """

    __slots__ = ("_boundary",)

    def __init__(self, boundary: Boundary | Iterable[PolyCurve] = ()) -> None:
        if not isinstance(boundary, Boundary):
            boundary = Boundary(tuple(boundary))
        self._boundary = boundary

    def __repr__(self) -> str:
        return f"BufferDomain(curves={len(self._boundary)}, area={self.area():.6g})"

    def boundary(self) -> Boundary:
        return self._boundary

    def is_empty(self) -> bool:
        return self._boundary.is_empty()

    def is_bounded(self) -> bool:
        """True when every boundary curve is bounded and the interior is finite.

        An interior on the left of counter-clockwise outer curves gives a
        non-negative total area; a negative one describes a complement.
        """
        return self._boundary.is_bounded() and self._boundary.signed_area() >= 0.0

    def area(self) -> float:
        return self._boundary.signed_area()

    def contains(self, point: Point) -> bool:
        """Check if point is inside the domain using the winding number.

        Points far away from a complement domain see a zero winding number
        and are inside, so unbounded domains count one extra turn.
        """
        if self.is_empty():
            return False
        turns = self._boundary.winding_angle(point) / (2.0 * math.pi)
        if not self.is_bounded():
            turns += 1.0
        return turns > 0.5

    def bounding_box(self) -> Box:
        return self._boundary.bounding_box()

    def transform(self, trans: SimilarityTransform) -> "BufferDomain":
        return BufferDomain(self._boundary.transform(trans))

    def to_dict(self) -> dict[str, Any]:
        return {"boundary": self._boundary.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BufferDomain":
        return cls(Boundary.from_dict(data["boundary"]))
