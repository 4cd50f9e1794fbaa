"""Unit tests for SelfIntersectionResolver."""

import math

import pytest

from curvebuffer.core.assembler import BufferAssembler
from curvebuffer.core.caps import ButtCapFactory
from curvebuffer.core.joins import BevelJoinFactory
from curvebuffer.core.resolver import SelfIntersectionResolver
from curvebuffer.domain import LineElement, Point, PolyCurve
from curvebuffer.exceptions import OpenBoundaryError


@pytest.fixture
def assembler() -> BufferAssembler:
    return BufferAssembler()


@pytest.fixture
def resolver() -> SelfIntersectionResolver:
    return SelfIntersectionResolver(tolerance=1e-6)


class TestSelfIntersectionResolver:
    """Tests for ring resolution."""

    def test_simple_ring_unchanged(
        self, assembler: BufferAssembler, resolver: SelfIntersectionResolver
    ) -> None:
        """A stadium has no self-intersection and comes out as one loop."""
        segment = LineElement.segment(Point(0, 0), Point(10, 0))
        ring = assembler.create_closed_offset(segment, 2.0)

        loops = resolver.resolve(ring, segment, 2.0)

        assert len(loops) == 1
        assert loops[0].closed
        assert loops[0].signed_area() == pytest.approx(40.0 + 4 * math.pi)

    def test_inner_side_of_small_ring(
        self, assembler: BufferAssembler, resolver: SelfIntersectionResolver
    ) -> None:
        """The inner parallel of a ring thinner than twice d is discarded."""
        square = PolyCurve.from_points(
            [Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)], closed=True
        )
        ring = assembler.create_continuous_parallel(square.reverse(), 1.5)

        assert resolver.resolve(ring, square, 1.5) == []

    def test_inner_side_of_large_ring(
        self, assembler: BufferAssembler, resolver: SelfIntersectionResolver
    ) -> None:
        """Overlapping inner offsets are trimmed back to a clockwise square."""
        square = PolyCurve.from_points(
            [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)], closed=True
        )
        ring = assembler.create_continuous_parallel(square.reverse(), 1.0)

        loops = resolver.resolve(ring, square, 1.0)

        assert len(loops) == 1
        assert loops[0].signed_area() == pytest.approx(-64.0)
        assert loops[0].length() == pytest.approx(32.0)

    def test_concave_turn_loop_removed(
        self, assembler: BufferAssembler, resolver: SelfIntersectionResolver
    ) -> None:
        """The overshoot at a sharp concave turn is cut away."""
        curve = PolyCurve.from_points([Point(0, 0), Point(10, 0), Point(10, 10)])
        ring = assembler.create_closed_offset(curve, 2.0)

        loops = resolver.resolve(ring, curve, 2.0)

        assert len(loops) == 1
        # Inner corner of the buffer sits at (8, 2)
        pieces = loops[0].smooth_pieces()
        corners = [p.first_point for p in pieces]
        assert any(c.almost_equals(Point(8, 2), 1e-6) for c in corners)

    def test_empty_ring(self, resolver: SelfIntersectionResolver) -> None:
        curve = LineElement.segment(Point(0, 0), Point(1, 0))
        assert resolver.resolve(PolyCurve(closed=True), curve, 1.0) == []

    def test_open_ring_raises(self, resolver: SelfIntersectionResolver) -> None:
        """Pieces that cannot be chained back to their start are an error."""
        curve = LineElement.segment(Point(0, 0), Point(10, 0))
        ring = PolyCurve.from_points([Point(0, -2), Point(10, -2)])

        with pytest.raises(OpenBoundaryError) as exc_info:
            resolver.resolve(ring, curve, 2.0)
        assert exc_info.value.gap == pytest.approx(10.0)
        assert exc_info.value.start.almost_equals(Point(0, -2), 1e-12)


class TestTaggedRings:
    """Tests for rings given as tagged elements."""

    def test_round_pieces_match_plain_ring(
        self, assembler: BufferAssembler, resolver: SelfIntersectionResolver
    ) -> None:
        curve = PolyCurve.from_points([Point(0, 0), Point(10, 0), Point(10, 10)])
        tagged = resolver.resolve(assembler.closed_offset_pieces(curve, 2.0), curve, 2.0)
        plain = resolver.resolve(assembler.create_closed_offset(curve, 2.0), curve, 2.0)

        assert len(tagged) == len(plain) == 1
        assert tagged[0].signed_area() == pytest.approx(plain[0].signed_area())

    def test_bevel_and_butt_pieces_kept(self, resolver: SelfIntersectionResolver) -> None:
        """Bevels and butt caps closer than d to the curve stay on the boundary."""
        assembler = BufferAssembler(BevelJoinFactory(), ButtCapFactory())
        curve = PolyCurve.from_points([Point(0, 0), Point(10, 0), Point(10, 10)])

        loops = resolver.resolve(assembler.closed_offset_pieces(curve, 2.0), curve, 2.0)

        assert len(loops) == 1
        assert loops[0].signed_area() == pytest.approx(78.0)
        corners = [p.first_point for p in loops[0].smooth_pieces()]
        assert any(c.almost_equals(Point(12, 0), 1e-6) for c in corners)
        assert any(c.almost_equals(Point(0, 2), 1e-6) for c in corners)

    def test_both_sides_resolved_together(
        self, assembler: BufferAssembler, resolver: SelfIntersectionResolver
    ) -> None:
        square = PolyCurve.from_points(
            [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)], closed=True
        )
        pieces = assembler.parallel_pieces(square, 1.0) + assembler.parallel_pieces(
            square.reverse(), 1.0
        )

        loops = resolver.resolve(pieces, square, 1.0)

        areas = sorted(loop.signed_area() for loop in loops)
        assert areas == pytest.approx([-64.0, 140.0 + math.pi])
