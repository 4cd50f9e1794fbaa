"""Exception hierarchy for curvebuffer."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from curvebuffer.domain.point import Point


class CurveBufferError(Exception):
    """Base exception for all curvebuffer errors."""

    pass


class GeometryError(CurveBufferError):
    """Errors in geometric constructions."""

    pass


class DegenerateCurveError(GeometryError):
    """A curve piece has no usable direction (zero-length vector or radius)."""

    def __init__(self, element: Any, reason: str) -> None:
        self.element = element
        self.reason = reason
        super().__init__(f"Degenerate curve {element!r}: {reason}")


class ColinearPointsError(GeometryError):
    """Three points that must define a circle turned out to be colinear."""

    def __init__(self, p1: "Point", p2: "Point", p3: "Point") -> None:
        self.p1 = p1
        self.p2 = p2
        self.p3 = p3
        super().__init__(
            f"Points {p1.to_tuple()}, {p2.to_tuple()}, {p3.to_tuple()} are colinear"
        )

    @property
    def points(self) -> tuple["Point", "Point", "Point"]:
        """The three offending points."""
        return (self.p1, self.p2, self.p3)


class UnboundedShapeError(GeometryError):
    """A bounded result was requested from an unbounded shape."""

    def __init__(self, shape: Any, operation: str) -> None:
        self.shape = shape
        self.operation = operation
        super().__init__(f"Cannot compute {operation} of unbounded shape {shape!r}")


class OpenBoundaryError(GeometryError):
    """A resolved boundary loop does not end where it starts."""

    def __init__(self, start: "Point", end: "Point") -> None:
        self.start = start
        self.end = end
        self.gap = start.distance(end)
        super().__init__(
            f"Boundary loop from {start.to_tuple()} ends at {end.to_tuple()} "
            f"(gap {self.gap:g})"
        )


class InvalidDistanceError(GeometryError, ValueError):
    """Buffer distance is negative or not finite."""

    def __init__(self, distance: float) -> None:
        self.distance = distance
        super().__init__(
            f"Buffer distance must be finite and non-negative, got {distance}"
        )


class CurveIOError(CurveBufferError):
    """Errors related to reading or writing curve files."""

    pass


class CurveLoadError(CurveIOError):
    """Error loading a curve file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load curves '{path}': {reason}")


class CurveSaveError(CurveIOError):
    """Error saving an output file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save '{path}': {reason}")
