"""Unit tests for cap factories."""

import math

import pytest

from curvebuffer.core.caps import ButtCapFactory, RoundCapFactory, SquareCapFactory
from curvebuffer.domain import CircleArc, Point, Vector
from curvebuffer.exceptions import DegenerateCurveError

END = Point(10.0, 0.0)
EAST = Vector(1.0, 0.0)


class TestRoundCapFactory:
    """Tests for RoundCapFactory."""

    def test_half_circle(self) -> None:
        """The cap goes around the extremity, from right to left."""
        cap = RoundCapFactory().create_cap(END, EAST, 5.0)

        assert len(cap) == 1
        arc = cap[0]
        assert isinstance(arc, CircleArc)
        assert arc.center == END
        assert arc.extent == pytest.approx(math.pi)
        assert arc.first_point.almost_equals(Point(10, -5), 1e-9)
        assert arc.last_point.almost_equals(Point(10, 5), 1e-9)
        assert arc.point(arc.t1 / 2).almost_equals(Point(15, 0), 1e-9)

    def test_direction_not_normalized(self) -> None:
        cap = RoundCapFactory().create_cap(END, Vector(0.0, 4.0), 5.0)
        assert cap[0].first_point.almost_equals(Point(15, 0), 1e-9)
        assert cap[0].last_point.almost_equals(Point(5, 0), 1e-9)

    def test_negative_distance(self) -> None:
        """Caps only depend on the magnitude of the distance."""
        cap = RoundCapFactory().create_cap(END, EAST, -5.0)
        assert cap[0].radius == pytest.approx(5.0)
        assert cap[0].first_point.almost_equals(Point(10, -5), 1e-9)

    def test_zero_direction(self) -> None:
        with pytest.raises(DegenerateCurveError):
            RoundCapFactory().create_cap(END, Vector(0.0, 0.0), 5.0)


class TestSquareCapFactory:
    """Tests for SquareCapFactory."""

    def test_square_cap(self) -> None:
        cap = SquareCapFactory().create_cap(END, EAST, 5.0)

        corners = [cap[0].first_point] + [piece.last_point for piece in cap]
        expected = [Point(10, -5), Point(15, -5), Point(15, 5), Point(10, 5)]
        assert len(cap) == 3
        for actual, wanted in zip(corners, expected):
            assert actual.almost_equals(wanted, 1e-9)


class TestButtCapFactory:
    """Tests for ButtCapFactory."""

    def test_butt_cap(self) -> None:
        cap = ButtCapFactory().create_cap(END, EAST, 5.0)

        assert len(cap) == 1
        assert cap[0].first_point.almost_equals(Point(10, -5), 1e-9)
        assert cap[0].last_point.almost_equals(Point(10, 5), 1e-9)
