"""
Box — the 3D occupancy grid the solver fills.

The grid is one flat numpy buffer of piece ids (EMPTY = 0) indexed as

    (x * Y + y) * Z + z

so walking the buffer front to back is exactly the ROW_MAJOR scan order
(x outer, y middle, z inner).  Nothing outside this module touches raw
indices; callers go through the Box operations:

  Queries:
    .is_out_of_bounds(cell)        — outside [0, dim) on some axis
    .is_occupied(cell)             — cell holds a piece id (walls count)
    .occupant(cell)                — piece id or EMPTY; raises outside
    .find_next_empty_cell(start)   — first empty cell at or after start
    .next_cell(cell)               — row-major successor

  Mutation (strict LIFO):
    .try_place(shape, anchor)      — all-or-nothing placement
    .remove_last()                 — undo the most recent placement

  Snapshots:
    .snapshot()                    — immutable Solution
    .copy()                        — independent Box for branching callers
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from polycube.core.errors import CellOutOfBoundsError, GridInvariantError, PuzzleDefinitionError
from polycube.core.geometry import Point, Position, Size
from polycube.core.shape import EMPTY, PieceID, Shape


@dataclass(frozen=True)
class PlacedPiece:
    """A shape together with the anchor it was placed at."""

    shape: Shape
    position: Position

    @property
    def piece_id(self) -> PieceID:
        return self.shape.piece_id

    @property
    def cells(self) -> tuple[Point, ...]:
        return self.shape.translated(self.position)

    def to_dict(self) -> dict[str, Any]:
        return {
            "piece_id": self.piece_id,
            "position": list(self.position.as_tuple()),
            "points": [list(p.as_tuple()) for p in self.shape.points],
        }


@dataclass(frozen=True)
class Solution:
    """
    Immutable snapshot of a completely filled box.

    Attributes:
        dims:       Box extents.
        placements: Placed pieces in placement (search) order.
        grid:       Read-only (X, Y, Z) array of piece ids.
    """

    dims: Size
    placements: tuple[PlacedPiece, ...]
    grid: np.ndarray = field(compare=False, repr=False)

    def occupant(self, cell: Point) -> PieceID:
        if not all(0 <= c < d for c, d in zip(cell.as_tuple(), self.dims.as_tuple())):
            raise CellOutOfBoundsError(f"cell {cell!r} outside box {self.dims!r}")
        return int(self.grid[cell.x, cell.y, cell.z])

    @property
    def occupied_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    @property
    def piece_ids(self) -> list[PieceID]:
        return [p.piece_id for p in self.placements]

    def placement_of(self, piece_id: PieceID) -> Optional[PlacedPiece]:
        for placed in self.placements:
            if placed.piece_id == piece_id:
                return placed
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "dims": list(self.dims.as_tuple()),
            "placements": [p.to_dict() for p in self.placements],
            "grid": self.grid.tolist(),
        }


class Box:
    """
    Mutable occupancy grid with a LIFO stack of placed pieces.

    Invariant: every cell holds the id of the placed piece covering it, and
    popping the top placement restores the previous occupancy exactly.
    """

    __slots__ = ("dims", "_cells", "_placements")

    def __init__(self, dims: Size | tuple[int, int, int]) -> None:
        if not isinstance(dims, Size):
            dims = Size(*dims)
        if dims.x <= 0 or dims.y <= 0 or dims.z <= 0:
            raise PuzzleDefinitionError(f"box dimensions must be positive, got {dims!r}")
        self.dims: Size = dims
        self._cells: np.ndarray = np.zeros(dims.volume, dtype=np.int32)
        self._placements: list[PlacedPiece] = []

    # ── Index arithmetic ─────────────────────────────────────────────────

    def _index(self, cell: Point) -> int:
        return (cell.x * self.dims.y + cell.y) * self.dims.z + cell.z

    def _cell_at(self, index: int) -> Point:
        yz = self.dims.y * self.dims.z
        x, rest = divmod(index, yz)
        y, z = divmod(rest, self.dims.z)
        return Point(x, y, z)

    def _first_index_from(self, start: Point) -> Optional[int]:
        """Index of the smallest in-box cell >= *start*, or None past the end."""
        x, y, z = start.as_tuple()
        if x < 0:
            return 0
        if x >= self.dims.x:
            return None
        if y < 0:
            y, z = 0, 0
        elif y >= self.dims.y:
            x, y, z = x + 1, 0, 0
        elif z < 0:
            z = 0
        elif z >= self.dims.z:
            y, z = y + 1, 0
            if y == self.dims.y:
                x, y = x + 1, 0
        if x >= self.dims.x:
            return None
        return self._index(Point(x, y, z))

    def _flat_indices(self, shape: Shape, anchor: Position) -> Optional[np.ndarray]:
        """Flat indices of the placed cells, or None if any is out of bounds."""
        cells = shape.coords + np.array(anchor.as_tuple(), dtype=np.int64)
        if (cells < 0).any() or (cells >= np.array(self.dims.as_tuple())).any():
            return None
        return (cells[:, 0] * self.dims.y + cells[:, 1]) * self.dims.z + cells[:, 2]

    # ── Queries ──────────────────────────────────────────────────────────

    def is_out_of_bounds(self, cell: Point) -> bool:
        return not (
            0 <= cell.x < self.dims.x
            and 0 <= cell.y < self.dims.y
            and 0 <= cell.z < self.dims.z
        )

    def is_occupied(self, cell: Point) -> bool:
        """True for a filled cell; cells outside the box count as walls."""
        if self.is_out_of_bounds(cell):
            return True
        return bool(self._cells[self._index(cell)] != EMPTY)

    def occupant(self, cell: Point) -> PieceID:
        if self.is_out_of_bounds(cell):
            raise CellOutOfBoundsError(f"cell {cell!r} outside box {self.dims!r}")
        return int(self._cells[self._index(cell)])

    @property
    def placements(self) -> tuple[PlacedPiece, ...]:
        return tuple(self._placements)

    @property
    def filled_count(self) -> int:
        return int(np.count_nonzero(self._cells))

    @property
    def volume(self) -> int:
        return self.dims.volume

    def is_full(self) -> bool:
        return self.filled_count == self.volume

    def occupancy(self) -> np.ndarray:
        """Copy of the occupancy as an (X, Y, Z) array."""
        return self._cells.reshape(self.dims.as_tuple()).copy()

    def find_next_empty_cell(self, start: Point) -> Optional[Point]:
        """
        First empty cell at or after *start* in ROW_MAJOR order.

        Cells before *start* are never examined; the caller guarantees they
        are already filled.  Returns None when nothing is empty from *start*
        onward (including a *start* past the last cell).  A *start* outside
        the box begins at the first in-box cell that is not before it.
        """
        offset = self._first_index_from(start)
        if offset is None:
            return None
        empties = np.flatnonzero(self._cells[offset:] == EMPTY)
        if empties.size == 0:
            return None
        return self._cell_at(offset + int(empties[0]))

    def next_cell(self, cell: Point) -> Point:
        """Row-major successor; z wraps into y, y wraps into x."""
        x, y, z = cell.x, cell.y, cell.z + 1
        if z == self.dims.z:
            z = 0
            y += 1
            if y == self.dims.y:
                y = 0
                x += 1
        return Point(x, y, z)

    # ── Mutation ─────────────────────────────────────────────────────────

    def try_place(self, shape: Shape, anchor: Position) -> bool:
        """
        Place *shape* translated by *anchor* if every cell is in bounds and
        empty.  Nothing is written when the placement fails.
        """
        indices = self._flat_indices(shape, anchor)
        if indices is None:
            return False
        if (self._cells[indices] != EMPTY).any():
            return False
        self._cells[indices] = shape.piece_id
        self._placements.append(PlacedPiece(shape, anchor))
        return True

    def remove_last(self) -> PlacedPiece:
        """Pop the most recent placement and clear its cells."""
        if not self._placements:
            raise GridInvariantError("remove_last() on an empty placement stack")
        placed = self._placements[-1]
        indices = self._flat_indices(placed.shape, placed.position)
        if indices is None or (self._cells[indices] != placed.piece_id).any():
            raise GridInvariantError(
                f"occupancy mismatch clearing piece {placed.piece_id} at {placed.position!r}"
            )
        self._cells[indices] = EMPTY
        self._placements.pop()
        return placed

    # ── Snapshots ────────────────────────────────────────────────────────

    def snapshot(self) -> Solution:
        grid = self.occupancy()
        grid.flags.writeable = False
        return Solution(dims=self.dims, placements=tuple(self._placements), grid=grid)

    def copy(self) -> Box:
        clone = Box(self.dims)
        clone._cells = self._cells.copy()
        clone._placements = list(self._placements)
        return clone

    def __repr__(self) -> str:
        return (
            f"Box({self.dims!r}, pieces={len(self._placements)}, "
            f"filled={self.filled_count}/{self.volume})"
        )
