"""Unit tests for join factories."""

import math

import pytest

from curvebuffer.core.joins import BevelJoinFactory, MitreJoinFactory, RoundJoinFactory
from curvebuffer.domain import CircleArc, LineElement, Point, Vector

EAST = Vector(1.0, 0.0)
WEST = Vector(-1.0, 0.0)
NORTH = Vector(0.0, 1.0)
SOUTH = Vector(0.0, -1.0)
ORIGIN = Point(0.0, 0.0)


class TestRoundJoinFactory:
    """Tests for RoundJoinFactory."""

    @pytest.fixture
    def factory(self) -> RoundJoinFactory:
        return RoundJoinFactory()

    def test_left_turn_on_right_side(self, factory: RoundJoinFactory) -> None:
        """Turning left opens a gap on the right, filled by a quarter circle."""
        join = factory.create_join(Point(0, -10), EAST, Point(10, 0), NORTH, ORIGIN, 10.0)

        assert len(join) == 1
        arc = join[0]
        assert isinstance(arc, CircleArc)
        assert arc.center == ORIGIN
        assert arc.radius == pytest.approx(10.0)
        assert arc.extent == pytest.approx(math.pi / 2)
        assert arc.first_point.almost_equals(Point(0, -10), 1e-9)
        assert arc.last_point.almost_equals(Point(10, 0), 1e-9)

    def test_concave_turn(self, factory: RoundJoinFactory) -> None:
        """Turning right overlaps the offsets on the right: no join."""
        join = factory.create_join(Point(0, -10), EAST, Point(-10, 0), SOUTH, ORIGIN, 10.0)
        assert join == ()

    def test_aligned_pieces(self, factory: RoundJoinFactory) -> None:
        join = factory.create_join(Point(0, -10), EAST, Point(0, -10), EAST, ORIGIN, 10.0)
        assert join == ()

    def test_u_turn(self, factory: RoundJoinFactory) -> None:
        """A U-turn gets a half circle around the vertex."""
        join = factory.create_join(Point(0, -5), EAST, Point(0, 5), WEST, ORIGIN, 5.0)

        assert len(join) == 1
        arc = join[0]
        assert arc.extent == pytest.approx(math.pi)
        assert arc.point(arc.t1 / 2).almost_equals(Point(5, 0), 1e-9)

    def test_left_side(self, factory: RoundJoinFactory) -> None:
        """Negative distances join clockwise around the vertex."""
        join = factory.create_join(Point(0, 10), EAST, Point(10, 0), SOUTH, ORIGIN, -10.0)

        assert len(join) == 1
        arc = join[0]
        assert not arc.is_direct()
        assert arc.extent == pytest.approx(-math.pi / 2)
        assert arc.first_point.almost_equals(Point(0, 10), 1e-9)
        assert arc.last_point.almost_equals(Point(10, 0), 1e-9)


class TestBevelJoinFactory:
    """Tests for BevelJoinFactory."""

    def test_bevel_segment(self) -> None:
        join = BevelJoinFactory().create_join(
            Point(0, -10), EAST, Point(10, 0), NORTH, ORIGIN, 10.0
        )

        assert len(join) == 1
        assert isinstance(join[0], LineElement)
        assert join[0].first_point == Point(0, -10)
        assert join[0].last_point == Point(10, 0)

    def test_concave_turn(self) -> None:
        join = BevelJoinFactory().create_join(
            Point(0, -10), EAST, Point(-10, 0), SOUTH, ORIGIN, 10.0
        )
        assert join == ()


class TestMitreJoinFactory:
    """Tests for MitreJoinFactory."""

    def test_mitre_tip(self) -> None:
        """Offset lines are extended until they meet."""
        join = MitreJoinFactory().create_join(
            Point(0, -10), EAST, Point(10, 0), NORTH, ORIGIN, 10.0
        )

        assert len(join) == 2
        assert join[0].first_point.almost_equals(Point(0, -10), 1e-9)
        assert join[0].last_point.almost_equals(Point(10, -10), 1e-9)
        assert join[1].first_point.almost_equals(Point(10, -10), 1e-9)
        assert join[1].last_point.almost_equals(Point(10, 0), 1e-9)

    def test_mitre_limit_exceeded(self) -> None:
        """The tip of a right angle lies sqrt(2) * d away from the vertex."""
        join = MitreJoinFactory(mitre_limit=1.2).create_join(
            Point(0, -10), EAST, Point(10, 0), NORTH, ORIGIN, 10.0
        )
        assert len(join) == 1
        assert join[0].first_point == Point(0, -10)
        assert join[0].last_point == Point(10, 0)

    def test_u_turn_bevel(self) -> None:
        join = MitreJoinFactory().create_join(Point(0, -5), EAST, Point(0, 5), WEST, ORIGIN, 5.0)
        assert len(join) == 1
        assert isinstance(join[0], LineElement)

    def test_invalid_limit(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            MitreJoinFactory(mitre_limit=0.5)
