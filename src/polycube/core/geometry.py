"""Integer 3D geometry primitives shared by shapes, the grid and the solver."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Point:
    """
    An integer (x, y, z) coordinate.

    Ordering is lexicographic on (x, y, z).  This is ROW_MAJOR order: the
    same order the Box scans for empty cells and the order a Shape sorts its
    points in.  The solver's single-anchor placement is only complete while
    those two orders agree, so neither may change alone.

    A Point is also used as a Position (translation offset), hence the
    arithmetic operators.
    """

    x: int
    y: int
    z: int

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y, self.z - other.z)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


# An anchor offset applied to every point of a shape.
Position = Point

ORIGIN = Point(0, 0, 0)


@dataclass(frozen=True)
class Size:
    """Bounding-box extents along each axis."""

    x: int
    y: int
    z: int

    @property
    def volume(self) -> int:
        """Number of cells in the bounding box."""
        return self.x * self.y * self.z

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def __repr__(self) -> str:
        return f"{self.x}x{self.y}x{self.z}"
