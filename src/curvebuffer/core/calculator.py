"""Buffer computation entry point.

BufferCalculator ties the join and cap factories, the assembler and the
self-intersection resolver together:

- closed curves: loops of the right parallel and of the parallel of
  the reversed curve, so that the domain interior stays on the left of
  every boundary curve
- open curves: loops of the ring built around the curve with caps

Key components:
- BufferCalculator: Configurable calculator
- BufferResult: Outcome of a computation that never raises on bad geometry
- get_default_instance: Shared round-join, round-cap calculator
"""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from curvebuffer.config import BufferConfig, CapStyle, GeometryConfig, JoinStyle
from curvebuffer.core.assembler import BufferAssembler
from curvebuffer.core.caps import ButtCapFactory, CapFactory, RoundCapFactory, SquareCapFactory
from curvebuffer.core.joins import (
    BevelJoinFactory,
    JoinFactory,
    MitreJoinFactory,
    RoundJoinFactory,
)
from curvebuffer.core.resolver import SelfIntersectionResolver
from curvebuffer.domain import BufferDomain, CircleArc, Curve, LineElement, PolyCurve
from curvebuffer.exceptions import GeometryError, InvalidDistanceError, UnboundedShapeError

logger = structlog.wrap_logger(logging.getLogger(__name__))


@dataclass(frozen=True, slots=True)
class BufferResult:
    """Outcome of a buffer computation.

    Attributes:
        domain: The buffer domain, or None if the computation failed
        failure: The geometric error that stopped the computation, if any
    """

    domain: BufferDomain | None = None
    failure: GeometryError | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def _as_polycurve(curve: Curve) -> PolyCurve:
    match curve:
        case PolyCurve():
            return curve
        case LineElement() | CircleArc():
            return PolyCurve((curve,))
        case _:
            raise TypeError(f"Cannot buffer object of type {type(curve).__name__}")


def create_join_factory(config: BufferConfig, tolerance: float = 1e-9) -> JoinFactory:
    """Create the join factory selected by a configuration."""
    match config.join_style:
        case JoinStyle.BEVEL:
            return BevelJoinFactory(tolerance)
        case JoinStyle.MITRE:
            return MitreJoinFactory(config.mitre_limit, tolerance)
        case _:
            return RoundJoinFactory(tolerance)


def create_cap_factory(config: BufferConfig) -> CapFactory:
    """Create the cap factory selected by a configuration."""
    match config.cap_style:
        case CapStyle.SQUARE:
            return SquareCapFactory()
        case CapStyle.BUTT:
            return ButtCapFactory()
        case _:
            return RoundCapFactory()


class BufferCalculator:
    """Computes buffers and parallels of circulinear curves.

    Instances hold no state besides their factories, so one calculator can
    serve any number of computations.

    Example:
        calculator = BufferCalculator(RoundJoinFactory(), RoundCapFactory())
        domain = calculator.compute_buffer(polyline, 20.0)
    """

    def __init__(
        self,
        join_factory: JoinFactory | None = None,
        cap_factory: CapFactory | None = None,
        tolerance: float = 1e-6,
        point_tolerance: float = 1e-9,
    ) -> None:
        """Initialize calculator.

        Args:
            join_factory: Factory for vertex joins (round if None)
            cap_factory: Factory for extremity caps (round if None)
            tolerance: Slack on the buffer distance when resolving rings
            point_tolerance: Distance under which offset endpoints coincide
        """
        self.join_factory = join_factory or RoundJoinFactory(point_tolerance)
        self.cap_factory = cap_factory or RoundCapFactory()
        self.tolerance = tolerance
        self.assembler = BufferAssembler(self.join_factory, self.cap_factory, point_tolerance)
        self.resolver = SelfIntersectionResolver(tolerance)

    @classmethod
    def from_config(
        cls,
        buffer_config: BufferConfig | None = None,
        geometry_config: GeometryConfig | None = None,
    ) -> "BufferCalculator":
        """Create a calculator from configuration models.

        Args:
            buffer_config: Join and cap styles (defaults if None)
            geometry_config: Tolerances (defaults if None)

        Returns:
            Configured calculator
        """
        buffer_config = buffer_config or BufferConfig()
        geometry_config = geometry_config or GeometryConfig()
        point_tolerance = geometry_config.almost_equal_tolerance
        return cls(
            create_join_factory(buffer_config, point_tolerance),
            create_cap_factory(buffer_config),
            tolerance=geometry_config.distance_tolerance,
            point_tolerance=point_tolerance,
        )

    def compute_buffer(self, curve: Curve, distance: float) -> BufferDomain:
        """Compute the region within distance of a curve.

        Args:
            curve: Atomic element or composite curve
            distance: Buffer distance, finite and non-negative

        Returns:
            Buffer domain; empty for a zero distance or an empty curve

        Raises:
            InvalidDistanceError: If distance is negative or not finite
            UnboundedShapeError: If the curve is unbounded
            DegenerateCurveError: If a piece has a zero-length direction
            OpenBoundaryError: If the resolved boundary cannot be closed
        """
        if not math.isfinite(distance) or distance < 0.0:
            raise InvalidDistanceError(distance)

        poly = _as_polycurve(curve)
        if not poly.is_bounded():
            raise UnboundedShapeError(curve, "buffer")
        if distance == 0.0 or poly.is_empty():
            return BufferDomain()

        if poly.closed:
            # Both sides are resolved together so that each one is cut where
            # it crosses the other
            outer = self.assembler.parallel_pieces(poly, distance)
            inner = self.assembler.parallel_pieces(poly.reverse(), distance)
            loops = self.resolver.resolve(outer + inner, poly, distance)
        else:
            ring = self.assembler.closed_offset_pieces(poly, distance)
            loops = self.resolver.resolve(ring, poly, distance)

        logger.debug(
            "Buffer computed",
            pieces=len(poly.smooth_pieces()),
            closed=poly.closed,
            distance=distance,
            boundary_curves=len(loops),
        )
        return BufferDomain(loops)

    def try_compute_buffer(self, curve: Curve, distance: float) -> BufferResult:
        """Compute a buffer, reporting geometric failures instead of raising.

        Returns:
            BufferResult with either a domain or the failure
        """
        try:
            return BufferResult(domain=self.compute_buffer(curve, distance))
        except GeometryError as e:
            logger.debug("Buffer computation failed", error=str(e), error_type=type(e).__name__)
            return BufferResult(failure=e)

    def create_continuous_parallel(self, curve: Curve, distance: float) -> PolyCurve:
        """Parallel of a continuous curve, with joins at vertices."""
        return self.assembler.create_continuous_parallel(curve, distance)

    def create_parallel(
        self, curve: Curve | Iterable[Curve], distance: float
    ) -> PolyCurve | list[PolyCurve]:
        """Parallel of a curve, or of each curve of a collection."""
        return self.assembler.create_parallel(curve, distance)

    def get_parallels(self, curve: Curve, distance: float) -> tuple[PolyCurve, PolyCurve]:
        """Raw parallels on both sides of an open curve.

        No self-intersection is removed, so the result is only simple for
        curves with small turn angles.

        Returns:
            Tuple of (right parallel, left parallel), both following the
            orientation of the curve
        """
        distance = abs(distance)
        return (
            self.assembler.create_continuous_parallel(curve, distance),
            self.assembler.create_continuous_parallel(curve, -distance),
        )


_default_instance: BufferCalculator | None = None


def get_default_instance() -> BufferCalculator:
    """Shared calculator using round joins and round caps."""
    global _default_instance
    if _default_instance is None:
        _default_instance = BufferCalculator(RoundJoinFactory(), RoundCapFactory())
    return _default_instance
