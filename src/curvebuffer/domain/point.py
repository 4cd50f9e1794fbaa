"""Core value types for planar geometry.

This module defines the immutable value types shared by every curve:
- Point: A position in the plane
- Vector: A displacement or direction in the plane
- Box: An axis-aligned bounding box
- SimilarityTransform: Scale, rotation and translation applied to geometry
"""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts. Equality is exact; use
    almost_equals() for tolerant comparisons.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def almost_equals(self, other: "Point", eps: float) -> bool:
        """Check whether both coordinates differ by at most eps.

        Args:
            other: Point to compare with
            eps: Tolerance on each coordinate

        Returns:
            True if the points are equal within eps
        """
        return abs(self.x - other.x) <= eps and abs(self.y - other.y) <= eps

    def distance(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def translate(self, vector: "Vector", factor: float = 1.0) -> "Point":
        """Return the point moved by factor * vector."""
        return Point(self.x + factor * vector.x, self.y + factor * vector.y)

    def vector_to(self, other: "Point") -> "Vector":
        """Return the vector going from this point to other."""
        return Vector(other.x - self.x, other.y - self.y)

    @staticmethod
    def midpoint(p1: "Point", p2: "Point") -> "Point":
        """Return the middle of two points."""
        return Point((p1.x + p2.x) / 2.0, (p1.y + p2.y) / 2.0)

    @staticmethod
    def from_polar(center: "Point", radius: float, angle: float) -> "Point":
        """Create the point at given radius and angle around center."""
        return Point(
            center.x + radius * math.cos(angle),
            center.y + radius * math.sin(angle),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=data["x"], y=data["y"])


@dataclass(frozen=True, slots=True)
class Vector:
    """A displacement in 2D space.

    Attributes:
        x: X component
        y: Y component
    """

    x: float
    y: float

    def norm(self) -> float:
        """Euclidean length of the vector."""
        return math.hypot(self.x, self.y)

    def normalize(self) -> "Vector":
        """Return the unit vector with the same direction.

        Raises:
            ValueError: If the vector has zero length
        """
        length = self.norm()
        if length == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        return Vector(self.x / length, self.y / length)

    def dot(self, other: "Vector") -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vector") -> float:
        """Z component of the cross product (positive for a left turn)."""
        return self.x * other.y - self.y * other.x

    def angle(self) -> float:
        """Horizontal angle of the vector, in (-pi, pi]."""
        return math.atan2(self.y, self.x)

    def scale(self, factor: float) -> "Vector":
        """Return the vector multiplied by factor."""
        return Vector(self.x * factor, self.y * factor)

    def opposite(self) -> "Vector":
        """Return the vector pointing the other way."""
        return Vector(-self.x, -self.y)

    def rotate90(self) -> "Vector":
        """Rotate 90 degrees counter-clockwise: (x, y) -> (-y, x)."""
        return Vector(-self.y, self.x)

    def right_normal(self) -> "Vector":
        """Unit normal on the right side of the vector.

        Raises:
            ValueError: If the vector has zero length
        """
        unit = self.normalize()
        return Vector(unit.y, -unit.x)

    @staticmethod
    def from_angle(angle: float, length: float = 1.0) -> "Vector":
        """Create a vector from its angle and length."""
        return Vector(length * math.cos(angle), length * math.sin(angle))


@dataclass(frozen=True, slots=True)
class Box:
    """An axis-aligned box.

    Attributes:
        min_x: Left bound
        max_x: Right bound
        min_y: Bottom bound
        max_y: Top bound
    """

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def contains(self, point: Point, eps: float = 0.0) -> bool:
        """Check if the point lies inside the box or on its border."""
        return (
            self.min_x - eps <= point.x <= self.max_x + eps
            and self.min_y - eps <= point.y <= self.max_y + eps
        )

    def union(self, other: "Box") -> "Box":
        """Smallest box containing both boxes."""
        return Box(
            min(self.min_x, other.min_x),
            max(self.max_x, other.max_x),
            min(self.min_y, other.min_y),
            max(self.max_y, other.max_y),
        )

    def expand(self, margin: float) -> "Box":
        """Return the box grown by margin on every side."""
        return Box(
            self.min_x - margin,
            self.max_x + margin,
            self.min_y - margin,
            self.max_y + margin,
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def corners(self) -> tuple[Point, Point, Point, Point]:
        """Corners in counter-clockwise order, starting bottom-left."""
        return (
            Point(self.min_x, self.min_y),
            Point(self.max_x, self.min_y),
            Point(self.max_x, self.max_y),
            Point(self.min_x, self.max_y),
        )


@dataclass(frozen=True, slots=True)
class SimilarityTransform:
    """Uniform scaling, rotation and translation.

    Points are scaled and rotated around the origin, then translated.
    Circles map to circles, so every circulinear curve stays circulinear.

    Attributes:
        scale: Uniform scaling factor (must be positive)
        rotation: Rotation angle in radians, counter-clockwise
        tx: Translation along x
        ty: Translation along y
    """

    scale: float = 1.0
    rotation: float = 0.0
    tx: float = 0.0
    ty: float = 0.0

    def __post_init__(self) -> None:
        if not self.scale > 0.0:
            raise ValueError(f"Scale factor must be positive, got {self.scale}")

    @classmethod
    def translation(cls, tx: float, ty: float) -> "SimilarityTransform":
        return cls(tx=tx, ty=ty)

    @classmethod
    def rotation_around(cls, center: Point, angle: float) -> "SimilarityTransform":
        """Rotation by angle around an arbitrary center."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        tx = center.x - (cos_a * center.x - sin_a * center.y)
        ty = center.y - (sin_a * center.x + cos_a * center.y)
        return cls(rotation=angle, tx=tx, ty=ty)

    def apply_vector(self, vector: Vector) -> Vector:
        """Transform a vector (no translation)."""
        cos_a = math.cos(self.rotation)
        sin_a = math.sin(self.rotation)
        return Vector(
            self.scale * (cos_a * vector.x - sin_a * vector.y),
            self.scale * (sin_a * vector.x + cos_a * vector.y),
        )

    def apply(self, point: Point) -> Point:
        """Transform a point."""
        moved = self.apply_vector(Vector(point.x, point.y))
        return Point(moved.x + self.tx, moved.y + self.ty)
