"""Integration tests computing buffers of complete shapes.

Every boundary produced with round joins and caps must stay exactly at the
buffer distance from the original curve.
"""

import math
from collections.abc import Iterator

import pytest

from curvebuffer.config import BufferConfig, CapStyle, JoinStyle
from curvebuffer.core import BufferCalculator
from curvebuffer.domain import BufferDomain, CircleArc, LineElement, Point, PolyCurve

DISTANCE_EPS = 1e-6


def polyline(*coords: tuple[float, float], closed: bool = False) -> PolyCurve:
    return PolyCurve.from_points([Point(x, y) for x, y in coords], closed=closed)


def sample_points(curve: PolyCurve, per_piece: int = 8) -> Iterator[Point]:
    """Points spread evenly along every smooth piece of a curve."""
    for piece in curve.smooth_pieces():
        for k in range(per_piece):
            yield piece.point(piece.t0 + (piece.t1 - piece.t0) * k / per_piece)


@pytest.fixture
def zigzag() -> PolyCurve:
    return polyline((50, 50), (50, 100), (100, 100), (100, 50), (150, 100), (150, 50))


@pytest.fixture
def notched_ring() -> PolyCurve:
    return polyline((100, 100), (200, 100), (200, 200), (150, 150), (100, 200), closed=True)


@pytest.fixture
def hook() -> PolyCurve:
    """Polyline folding back on itself at a sharp angle."""
    return polyline((200, 100), (100, 100), (180, 140))


@pytest.fixture
def calculator() -> BufferCalculator:
    return BufferCalculator.from_config()


def assert_boundary_at_distance(domain: BufferDomain, curve: PolyCurve, distance: float) -> None:
    for loop in domain.boundary():
        for point in sample_points(loop):
            assert curve.distance(point) == pytest.approx(distance, abs=DISTANCE_EPS)


def assert_closed_loops(domain: BufferDomain) -> None:
    """Every boundary loop is closed and has no gap between its pieces."""
    for loop in domain.boundary():
        assert loop.closed
        assert loop.first_point.almost_equals(loop.last_point, DISTANCE_EPS)
        pieces = loop.smooth_pieces()
        for previous, following in zip(pieces, pieces[1:] + pieces[:1]):
            assert previous.last_point.almost_equals(following.first_point, DISTANCE_EPS)


class TestZigzag:
    """Open polyline with alternating turns."""

    def test_single_boundary(self, calculator: BufferCalculator, zigzag: PolyCurve) -> None:
        domain = calculator.compute_buffer(zigzag, 20.0)

        assert not domain.is_empty()
        assert domain.is_bounded()
        assert len(domain.boundary()) == 1
        assert domain.area() > 0

    def test_boundary_distance(self, calculator: BufferCalculator, zigzag: PolyCurve) -> None:
        domain = calculator.compute_buffer(zigzag, 20.0)
        assert_boundary_at_distance(domain, zigzag, 20.0)
        assert_closed_loops(domain)

    def test_membership(self, calculator: BufferCalculator, zigzag: PolyCurve) -> None:
        domain = calculator.compute_buffer(zigzag, 20.0)

        assert domain.contains(Point(75, 100))
        assert domain.contains(Point(125, 75))
        # Inside the notch between the first two legs, 25 away from both
        assert not domain.contains(Point(75, 60))
        assert not domain.contains(Point(200, 75))


class TestNotchedRing:
    """Closed polyline with one concave vertex."""

    def test_outer_boundary_and_hole(
        self, calculator: BufferCalculator, notched_ring: PolyCurve
    ) -> None:
        domain = calculator.compute_buffer(notched_ring, 10.0)

        assert len(domain.boundary()) == 2
        assert domain.is_bounded()
        areas = sorted(loop.signed_area() for loop in domain.boundary())
        assert areas[0] < 0 < areas[1]

    def test_boundary_distance(
        self, calculator: BufferCalculator, notched_ring: PolyCurve
    ) -> None:
        domain = calculator.compute_buffer(notched_ring, 10.0)
        assert_boundary_at_distance(domain, notched_ring, 10.0)
        assert_closed_loops(domain)

    def test_membership(self, calculator: BufferCalculator, notched_ring: PolyCurve) -> None:
        domain = calculator.compute_buffer(notched_ring, 10.0)

        assert domain.contains(Point(150, 95))
        assert domain.contains(Point(150, 155))
        assert not domain.contains(Point(150, 125))
        assert not domain.contains(Point(150, 170))


class TestHook:
    """Open polyline with an acute turn."""

    def test_single_boundary(self, calculator: BufferCalculator, hook: PolyCurve) -> None:
        domain = calculator.compute_buffer(hook, 30.0)

        assert len(domain.boundary()) == 1
        assert domain.is_bounded()

    def test_boundary_distance(self, calculator: BufferCalculator, hook: PolyCurve) -> None:
        domain = calculator.compute_buffer(hook, 30.0)
        assert_boundary_at_distance(domain, hook, 30.0)
        assert_closed_loops(domain)


class TestInvariance:
    """Properties that hold whatever the shape."""

    @pytest.mark.parametrize("name", ["zigzag", "notched_ring", "hook"])
    def test_reversal(
        self, calculator: BufferCalculator, request: pytest.FixtureRequest, name: str
    ) -> None:
        """A curve and its reverse have the same buffer."""
        curve = request.getfixturevalue(name)
        forward = calculator.compute_buffer(curve, 12.0)
        backward = calculator.compute_buffer(curve.reverse(), 12.0)

        assert backward.area() == pytest.approx(forward.area(), rel=1e-9)
        assert len(backward.boundary()) == len(forward.boundary())

    def test_distance_monotonic(self, calculator: BufferCalculator, zigzag: PolyCurve) -> None:
        areas = [calculator.compute_buffer(zigzag, d).area() for d in (5.0, 10.0, 20.0)]
        assert areas == sorted(areas)

    def test_mitre_joins_outside_round(self, zigzag: PolyCurve) -> None:
        """Mitre boundaries never come closer to the curve than d."""
        calculator = BufferCalculator.from_config(
            BufferConfig(join_style=JoinStyle.MITRE, cap_style=CapStyle.SQUARE)
        )
        domain = calculator.compute_buffer(zigzag, 10.0)
        round_area = BufferCalculator.from_config().compute_buffer(zigzag, 10.0).area()

        assert len(domain.boundary()) == 1
        assert domain.area() > round_area
        for loop in domain.boundary():
            for point in sample_points(loop):
                assert zigzag.distance(point) >= 10.0 - DISTANCE_EPS

    def test_composite_with_arcs(self, calculator: BufferCalculator) -> None:
        """A rounded corner buffers like the corner with a round join."""
        curve = PolyCurve(
            (
                LineElement.segment(Point(0, 0), Point(50, 0)),
                CircleArc(Point(50, 20), 20.0, -math.pi / 2, math.pi / 2),
                LineElement.segment(Point(70, 20), Point(70, 70)),
            )
        )
        domain = calculator.compute_buffer(curve, 5.0)

        assert len(domain.boundary()) == 1
        assert_boundary_at_distance(domain, curve, 5.0)


class TestAllStyles:
    """Every join and cap style yields gap-free boundaries."""

    @pytest.mark.parametrize("join_style", list(JoinStyle))
    @pytest.mark.parametrize("cap_style", list(CapStyle))
    @pytest.mark.parametrize(
        ("name", "distance", "boundary_count"),
        [("zigzag", 20.0, 1), ("notched_ring", 10.0, 2), ("hook", 30.0, 1)],
    )
    def test_closed_boundaries(
        self,
        request: pytest.FixtureRequest,
        join_style: JoinStyle,
        cap_style: CapStyle,
        name: str,
        distance: float,
        boundary_count: int,
    ) -> None:
        curve = request.getfixturevalue(name)
        calculator = BufferCalculator.from_config(
            BufferConfig(join_style=join_style, cap_style=cap_style)
        )
        domain = calculator.compute_buffer(curve, distance)

        assert len(domain.boundary()) == boundary_count
        assert domain.area() > 0
        assert_closed_loops(domain)

    @pytest.mark.parametrize("name", ["zigzag", "hook"])
    def test_straight_styles_inside_round(
        self, calculator: BufferCalculator, request: pytest.FixtureRequest, name: str
    ) -> None:
        """Bevels and butt caps cut corners off the round buffer."""
        curve = request.getfixturevalue(name)
        straight = BufferCalculator.from_config(
            BufferConfig(join_style=JoinStyle.BEVEL, cap_style=CapStyle.BUTT)
        )

        assert 0 < straight.compute_buffer(curve, 12.0).area() < calculator.compute_buffer(
            curve, 12.0
        ).area()
