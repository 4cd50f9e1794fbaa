"""Assembly of parallel curves and buffer rings.

This module composes offsets of smooth pieces into continuous curves:

- create_continuous_parallel: offset every piece, join at vertices
- create_closed_offset: closed ring around an open curve, with caps
- create_parallel: the above for one curve or for independent curves

The curves produced here may cross themselves at concave turns. They are
raw material for SelfIntersectionResolver, which also receives the origin of
every element through parallel_pieces and closed_offset_pieces.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import structlog

from curvebuffer.core.caps import CapFactory, RoundCapFactory
from curvebuffer.core.joins import JoinFactory, RoundJoinFactory
from curvebuffer.domain import (
    CircleArc,
    Curve,
    Element,
    LineElement,
    Point,
    PolyCurve,
    PolyCurveBuilder,
    end_tangent,
    smooth_pieces,
)

logger = structlog.wrap_logger(logging.getLogger(__name__))


class PieceOrigin(str, Enum):
    """How an element of an assembled ring was produced."""

    OFFSET = "offset"
    CONNECTOR = "connector"
    JOIN = "join"
    CAP = "cap"


@dataclass(frozen=True, slots=True)
class Joint:
    """Join or cap built around a vertex or an extremity.

    Attributes:
        anchor: Vertex or extremity of the original curve
        elements: Elements of the join or cap, in order
    """

    anchor: Point
    elements: tuple[Element, ...]


@dataclass(frozen=True, slots=True)
class RingPiece:
    """Element of an assembled ring, tagged with its origin.

    Attributes:
        element: Atomic element of the ring
        origin: What produced the element
        joint: The join or cap the element belongs to, if any
    """

    element: Element
    origin: PieceOrigin
    joint: Joint | None = None


def _is_closed(curve: Curve) -> bool:
    return isinstance(curve, PolyCurve) and curve.closed


def _build(pieces: list[RingPiece], closed: bool) -> PolyCurve:
    return PolyCurveBuilder().extend(piece.element for piece in pieces).build(closed)


class BufferAssembler:
    """Builds parallel curves from joins and caps.

    Example:
        assembler = BufferAssembler(RoundJoinFactory(), RoundCapFactory())
        ring = assembler.create_closed_offset(polyline, 10.0)
    """

    def __init__(
        self,
        join_factory: JoinFactory | None = None,
        cap_factory: CapFactory | None = None,
        tolerance: float = 1e-9,
    ) -> None:
        """Initialize assembler.

        Args:
            join_factory: Factory for vertex joins (round if None)
            cap_factory: Factory for extremity caps (round if None)
            tolerance: Length under which an offset piece is dropped
        """
        self.join_factory = join_factory or RoundJoinFactory()
        self.cap_factory = cap_factory or RoundCapFactory()
        self.tolerance = tolerance

    def parallel_pieces(self, curve: Curve, distance: float) -> list[RingPiece]:
        """Tagged elements of the parallel of a continuous curve.

        Closed curves also get a join between their last and first pieces.
        When no join is needed but the offset endpoints differ (concave turn),
        two connector segments through the original vertex keep the result
        continuous. They follow the ends of the bands swept by both pieces.

        Args:
            curve: Continuous curve to offset
            distance: Signed distance, positive on the right

        Returns:
            Elements in order, each with its origin

        Raises:
            DegenerateCurveError: If a piece has a zero-length direction
        """
        pieces = smooth_pieces(curve)
        closed = _is_closed(curve)
        offsets = [piece.parallel(distance) for piece in pieces]

        result: list[RingPiece] = []
        for i, (piece, offset) in enumerate(zip(pieces, offsets)):
            if i > 0:
                result.extend(
                    self._junction(pieces[i - 1], offsets[i - 1], piece, offset, distance)
                )
            if offset.length() > self.tolerance:
                result.append(RingPiece(offset, PieceOrigin.OFFSET))

        if closed and pieces:
            result.extend(self._junction(pieces[-1], offsets[-1], pieces[0], offsets[0], distance))

        logger.debug(
            "Parallel assembled",
            pieces=len(pieces),
            elements=len(result),
            joins=sum(1 for p in result if p.origin is PieceOrigin.JOIN),
            distance=distance,
            closed=closed,
        )
        return result

    def create_continuous_parallel(self, curve: Curve, distance: float) -> PolyCurve:
        """Create the parallel of a continuous curve, with joins at vertices.

        Returns:
            Continuous parallel curve, closed if the input is closed
        """
        return _build(self.parallel_pieces(curve, distance), _is_closed(curve))

    def closed_offset_pieces(self, curve: Curve, distance: float) -> list[RingPiece]:
        """Tagged elements of the closed ring around an open curve.

        The ring is made of the right parallel, the cap at the last point,
        the parallel of the reversed curve, and the cap at the first point.
        It runs counter-clockwise around the curve.

        Args:
            curve: Open continuous curve
            distance: Buffer distance

        Returns:
            Elements in order, each with its origin
        """
        distance = abs(distance)
        if isinstance(curve, PolyCurve):
            forward = PolyCurve(curve.curves)
        else:
            forward = PolyCurve((curve,))
        backward = forward.reverse()

        return [
            *self.parallel_pieces(forward, distance),
            *self._cap(forward, distance),
            *self.parallel_pieces(backward, distance),
            *self._cap(backward, distance),
        ]

    def create_closed_offset(self, curve: Curve, distance: float) -> PolyCurve:
        """Create the closed ring around an open curve.

        Returns:
            Closed curve, possibly self-intersecting
        """
        return _build(self.closed_offset_pieces(curve, distance), closed=True)

    def create_parallel(
        self, curve: Curve | Iterable[Curve], distance: float
    ) -> PolyCurve | list[PolyCurve]:
        """Create parallels without joining across discontinuities.

        Args:
            curve: A continuous curve, or an iterable of independent curves
            distance: Signed distance, positive on the right

        Returns:
            One parallel for a single curve, one per curve otherwise
        """
        match curve:
            case LineElement() | CircleArc() | PolyCurve():
                return self.create_continuous_parallel(curve, distance)
            case _:
                return [self.create_continuous_parallel(item, distance) for item in curve]

    def _cap(self, curve: PolyCurve, distance: float) -> list[RingPiece]:
        """Cap around the last point of a curve."""
        point = curve.last_point
        cap = Joint(point, self.cap_factory.create_cap(point, end_tangent(curve), distance))
        return [RingPiece(element, PieceOrigin.CAP, cap) for element in cap.elements]

    def _junction(
        self,
        previous: Element,
        previous_offset: Element,
        following: Element,
        following_offset: Element,
        distance: float,
    ) -> list[RingPiece]:
        """Elements linking the offsets of two consecutive pieces."""
        end_point = previous_offset.last_point
        start_point = following_offset.first_point
        vertex = following.first_point
        # Tangents of the original pieces stay defined when an offset collapses
        join = self.join_factory.create_join(
            end_point,
            previous.tangent(previous.t1),
            start_point,
            following.tangent(following.t0),
            vertex,
            distance,
        )
        if join:
            joint = Joint(vertex, join)
            return [RingPiece(element, PieceOrigin.JOIN, joint) for element in join]
        eps = self.tolerance * max(1.0, abs(distance))
        if end_point.almost_equals(start_point, eps):
            return []
        # Concave turn: follow the ends of both bands through the vertex
        return [
            RingPiece(LineElement.segment(p1, p2), PieceOrigin.CONNECTOR)
            for p1, p2 in ((end_point, vertex), (vertex, start_point))
            if not p1.almost_equals(p2, eps)
        ]
