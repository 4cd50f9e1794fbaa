"""Unit tests for BufferAssembler."""

import math

import pytest

from curvebuffer.core.assembler import BufferAssembler, PieceOrigin
from curvebuffer.core.caps import ButtCapFactory, SquareCapFactory
from curvebuffer.core.joins import BevelJoinFactory
from curvebuffer.domain import CircleArc, LineElement, Point, PolyCurve
from curvebuffer.exceptions import DegenerateCurveError


def assert_continuous(curve: PolyCurve, eps: float = 1e-9) -> None:
    """Check that consecutive pieces share their extremities."""
    pieces = curve.smooth_pieces()
    for previous, following in zip(pieces, pieces[1:]):
        assert previous.last_point.almost_equals(following.first_point, eps)
    if curve.closed and pieces:
        assert pieces[-1].last_point.almost_equals(pieces[0].first_point, eps)


@pytest.fixture
def assembler() -> BufferAssembler:
    return BufferAssembler()


@pytest.fixture
def l_shape() -> PolyCurve:
    """Open polyline turning left at (10, 0)."""
    return PolyCurve.from_points([Point(0, 0), Point(10, 0), Point(10, 10)])


@pytest.fixture
def square() -> PolyCurve:
    """Counter-clockwise square ring of side 10."""
    return PolyCurve.from_points(
        [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)], closed=True
    )


class TestContinuousParallel:
    """Tests for BufferAssembler.create_continuous_parallel."""

    def test_aligned_pieces(self, assembler: BufferAssembler) -> None:
        """Aligned pieces meet exactly and need no join."""
        curve = PolyCurve.from_points([Point(0, 0), Point(5, 0), Point(10, 0)])
        parallel = assembler.create_continuous_parallel(curve, 1.0)
        assert len(parallel.smooth_pieces()) == 2
        assert parallel.first_point.almost_equals(Point(0, -1), 1e-12)
        assert parallel.last_point.almost_equals(Point(10, -1), 1e-12)

    def test_convex_vertex(self, assembler: BufferAssembler, l_shape: PolyCurve) -> None:
        """The outer side of a turn gets a round join."""
        parallel = assembler.create_continuous_parallel(l_shape, 2.0)
        pieces = parallel.smooth_pieces()

        assert len(pieces) == 3
        assert isinstance(pieces[1], CircleArc)
        assert parallel.first_point.almost_equals(Point(0, -2), 1e-12)
        assert parallel.last_point.almost_equals(Point(12, 10), 1e-12)
        assert parallel.length() == pytest.approx(20.0 + math.pi)
        assert_continuous(parallel)

    def test_concave_vertex(self, assembler: BufferAssembler, l_shape: PolyCurve) -> None:
        """The inner side of a turn is connected through the vertex."""
        parallel = assembler.create_continuous_parallel(l_shape, -2.0)
        pieces = parallel.smooth_pieces()

        assert len(pieces) == 4
        assert isinstance(pieces[1], LineElement)
        assert pieces[1].first_point.almost_equals(Point(10, 2), 1e-12)
        assert pieces[1].last_point.almost_equals(Point(10, 0), 1e-12)
        assert pieces[2].last_point.almost_equals(Point(8, 0), 1e-12)
        assert_continuous(parallel)

    def test_closed_curve(self, assembler: BufferAssembler, square: PolyCurve) -> None:
        """Closed curves also get a join at their start point."""
        parallel = assembler.create_continuous_parallel(square, 1.0)

        assert parallel.closed
        assert len(parallel.smooth_pieces()) == 8
        assert parallel.length() == pytest.approx(40.0 + 2 * math.pi)
        assert parallel.signed_area() == pytest.approx(140.0 + math.pi)
        assert_continuous(parallel)

    def test_bevel_joins(self, square: PolyCurve) -> None:
        assembler = BufferAssembler(join_factory=BevelJoinFactory())
        parallel = assembler.create_continuous_parallel(square, 1.0)

        assert all(isinstance(piece, LineElement) for piece in parallel.smooth_pieces())
        assert parallel.length() == pytest.approx(40.0 + 4 * math.sqrt(2.0))

    def test_collapsed_arc(self, assembler: BufferAssembler) -> None:
        """An arc offset onto its center vanishes."""
        arc = CircleArc(Point(0, 0), 2.0, 0.0, math.pi / 2)
        assert assembler.create_continuous_parallel(arc, -2.0).is_empty()

    def test_degenerate_piece(self, assembler: BufferAssembler) -> None:
        curve = PolyCurve((LineElement.segment(Point(1, 1), Point(1, 1)),))
        with pytest.raises(DegenerateCurveError):
            assembler.create_continuous_parallel(curve, 1.0)


class TestClosedOffset:
    """Tests for BufferAssembler.create_closed_offset."""

    def test_segment_ring(self, assembler: BufferAssembler) -> None:
        """A segment is surrounded by a stadium."""
        segment = LineElement.segment(Point(0, 0), Point(10, 0))
        ring = assembler.create_closed_offset(segment, 2.0)

        assert ring.closed
        assert len(ring.smooth_pieces()) == 4
        assert ring.signed_area() == pytest.approx(40.0 + 4 * math.pi)
        assert ring.length() == pytest.approx(20.0 + 4 * math.pi)
        assert_continuous(ring)

    def test_sign_ignored(self, assembler: BufferAssembler) -> None:
        segment = LineElement.segment(Point(0, 0), Point(10, 0))
        ring = assembler.create_closed_offset(segment, -2.0)
        assert ring.signed_area() == pytest.approx(40.0 + 4 * math.pi)

    def test_square_caps(self) -> None:
        assembler = BufferAssembler(cap_factory=SquareCapFactory())
        segment = LineElement.segment(Point(0, 0), Point(10, 0))
        ring = assembler.create_closed_offset(segment, 2.0)

        assert len(ring.smooth_pieces()) == 8
        assert ring.signed_area() == pytest.approx(14.0 * 4.0)
        assert_continuous(ring)


class TestCreateParallel:
    """Tests for BufferAssembler.create_parallel."""

    def test_single_curve(self, assembler: BufferAssembler, l_shape: PolyCurve) -> None:
        parallel = assembler.create_parallel(l_shape, 2.0)
        assert isinstance(parallel, PolyCurve)

    def test_several_curves(self, assembler: BufferAssembler, l_shape: PolyCurve) -> None:
        """Independent curves are offset independently."""
        other = LineElement.segment(Point(0, 20), Point(10, 20))
        parallels = assembler.create_parallel([l_shape, other], 2.0)

        assert isinstance(parallels, list)
        assert len(parallels) == 2
        assert parallels[1].first_point.almost_equals(Point(0, 18), 1e-12)


class TestRingPieces:
    """Tests for the origin tags of assembled elements."""

    def test_closed_offset_origins(self, l_shape: PolyCurve) -> None:
        assembler = BufferAssembler(BevelJoinFactory(), ButtCapFactory())
        pieces = assembler.closed_offset_pieces(l_shape, 2.0)

        assert [p.origin for p in pieces] == [
            PieceOrigin.OFFSET,
            PieceOrigin.JOIN,
            PieceOrigin.OFFSET,
            PieceOrigin.CAP,
            PieceOrigin.OFFSET,
            PieceOrigin.CONNECTOR,
            PieceOrigin.CONNECTOR,
            PieceOrigin.OFFSET,
            PieceOrigin.CAP,
        ]
        anchors = [p.joint.anchor for p in pieces if p.joint is not None]
        assert anchors[0].almost_equals(Point(10, 0), 1e-12)
        assert anchors[1].almost_equals(Point(10, 10), 1e-12)
        assert anchors[2].almost_equals(Point(0, 0), 1e-12)
        assert all(p.joint is None for p in pieces if p.origin is PieceOrigin.OFFSET)

    def test_concave_connectors_meet_vertex(self, l_shape: PolyCurve) -> None:
        """Connectors end and start at the original vertex."""
        pieces = BufferAssembler().parallel_pieces(l_shape, -2.0)
        connectors = [p.element for p in pieces if p.origin is PieceOrigin.CONNECTOR]

        assert len(connectors) == 2
        assert connectors[0].last_point.almost_equals(Point(10, 0), 1e-12)
        assert connectors[1].first_point.almost_equals(Point(10, 0), 1e-12)

    def test_pieces_build_same_ring(self, assembler: BufferAssembler, l_shape: PolyCurve) -> None:
        pieces = assembler.closed_offset_pieces(l_shape, 2.0)
        ring = assembler.create_closed_offset(l_shape, 2.0)
        assert [p.element for p in pieces] == list(ring.smooth_pieces())
