"""
Canonical polycube shapes.

A Shape is an immutable set of unit cells stored in canonical form:

  - translated so the minimum coordinate on every axis is 0
  - points sorted ascending in ROW_MAJOR (x, y, z) order
  - ``size`` holds the bounding-box extents (max coordinate + 1)

Canonicalization happens on construction, so every Shape a caller can see is
already normalized.  Equality, ordering and hashing use only the sorted point
tuple: two rotation paths that land on the same cells give equal Shapes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

from polycube.core.errors import PuzzleDefinitionError
from polycube.core.geometry import Point, Position, Size

PieceID = int

# Occupant value of a cell that no piece covers.
EMPTY: PieceID = 0


def _as_point(p: Point | Sequence[int]) -> Point:
    if isinstance(p, Point):
        return p
    x, y, z = p
    return Point(int(x), int(y), int(z))


@dataclass(frozen=True, order=True)
class Shape:
    """
    One orientation of a polycube piece.

    Attributes:
        points:   Canonical, sorted cell coordinates.
        piece_id: Logical piece this shape belongs to (not compared).
        size:     Bounding-box extents (derived, not compared).
        coords:   (n, 3) int array of ``points`` for vectorized placement.
    """

    points: tuple[Point, ...]
    piece_id: PieceID = field(default=EMPTY, compare=False)
    size: Size = field(init=False, compare=False, repr=False)
    coords: np.ndarray = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        raw = [_as_point(p) for p in self.points]
        if not raw:
            raise PuzzleDefinitionError("a shape needs at least one point")
        if len(set(raw)) != len(raw):
            raise PuzzleDefinitionError(f"duplicate points in shape: {raw}")

        min_x = min(p.x for p in raw)
        min_y = min(p.y for p in raw)
        min_z = min(p.z for p in raw)
        points = tuple(sorted(Point(p.x - min_x, p.y - min_y, p.z - min_z) for p in raw))
        size = Size(
            max(p.x for p in points) + 1,
            max(p.y for p in points) + 1,
            max(p.z for p in points) + 1,
        )
        coords = np.array([p.as_tuple() for p in points], dtype=np.int64)
        coords.flags.writeable = False

        object.__setattr__(self, "points", points)
        object.__setattr__(self, "size", size)
        object.__setattr__(self, "coords", coords)

    @classmethod
    def from_points(
        cls, points: Iterable[Point | Sequence[int]], piece_id: PieceID = EMPTY,
    ) -> Shape:
        """Build a canonical shape from arbitrary (possibly offset) points."""
        return cls(tuple(_as_point(p) for p in points), piece_id)

    # ── Canonical form ───────────────────────────────────────────────────

    def normalize(self) -> Shape:
        """Return the canonical form of this shape (a no-op for any Shape)."""
        return Shape(self.points, self.piece_id)

    @property
    def anchor_point(self) -> Point:
        """Lexicographically smallest point; the one the solver anchors."""
        return self.points[0]

    @property
    def cell_count(self) -> int:
        return len(self.points)

    def __len__(self) -> int:
        return len(self.points)

    def translated(self, position: Position) -> tuple[Point, ...]:
        """Cells covered when the shape is placed at *position*."""
        return tuple(p + position for p in self.points)

    # ── Rotations (90° clockwise, re-canonicalized) ──────────────────────

    def rotate_x(self) -> Shape:
        return Shape(tuple(Point(p.x, p.z, -p.y) for p in self.points), self.piece_id)

    def rotate_y(self) -> Shape:
        return Shape(tuple(Point(p.z, p.y, -p.x) for p in self.points), self.piece_id)

    def rotate_z(self) -> Shape:
        return Shape(tuple(Point(p.y, -p.x, p.z) for p in self.points), self.piece_id)

    def rotate(self, axis: str) -> Shape:
        """Rotate about ``"x"``, ``"y"`` or ``"z"``."""
        if axis == "x":
            return self.rotate_x()
        if axis == "y":
            return self.rotate_y()
        if axis == "z":
            return self.rotate_z()
        raise ValueError(f"Unknown rotation axis: {axis!r}")

    def with_piece_id(self, piece_id: PieceID) -> Shape:
        return Shape(self.points, piece_id)

    def __repr__(self) -> str:
        cells = " ".join(repr(p) for p in self.points)
        return f"Shape(id={self.piece_id}, size={self.size!r}, points=[{cells}])"
