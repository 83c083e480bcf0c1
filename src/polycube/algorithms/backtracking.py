"""
Exhaustive backtracking search for exact polycube packings.

One recursion level = one piece placed.  At each level the solver takes the
first empty cell in ROW_MAJOR order and tries, for every still-available
piece and each of its orientations, exactly one placement: the orientation's
smallest point (``shape.points[0]``) lands on that empty cell.

That single anchor is complete, not a heuristic.  Every cell before the empty
cell is already filled, so whichever piece covers the empty cell cannot have
any cell before it; its smallest cell is therefore the empty cell itself.
This holds only because the scan order and the Shape point order are the
same total order (see ``geometry.Point``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence

from polycube.core.box import Box, Solution
from polycube.core.config import PuzzleDefinition
from polycube.core.errors import PuzzleDefinitionError, SearchInvariantError
from polycube.core.geometry import ORIGIN, Point, Size
from polycube.core.orientations import OrientationSet

logger = logging.getLogger(__name__)


@dataclass
class SearchStats:
    """Counters for one search run."""

    nodes_visited: int = 0
    placements_tried: int = 0
    placements_made: int = 0
    dead_ends: int = 0
    solutions_found: int = 0
    cancelled: bool = False

    def to_dict(self) -> dict:
        return {
            "nodes_visited": self.nodes_visited,
            "placements_tried": self.placements_tried,
            "placements_made": self.placements_made,
            "dead_ends": self.dead_ends,
            "solutions_found": self.solutions_found,
            "cancelled": self.cancelled,
        }


class BacktrackingSolver:
    """
    Depth-first exact-cover search over a Box.

    Args:
        dims:             Box extents (X, Y, Z).
        orientation_sets: One OrientationSet per logical piece, in the order
                          pieces are tried.
        should_stop:      Optional callable polled before every candidate
                          placement; returning True unwinds the search.

    Usage:
        solver = BacktrackingSolver.from_definition(puzzle)
        first = next(solver.iter_solutions(), None)
    """

    def __init__(
        self,
        dims: Size | tuple[int, int, int],
        orientation_sets: Sequence[OrientationSet],
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> None:
        if not isinstance(dims, Size):
            dims = Size(*dims)
        if dims.x <= 0 or dims.y <= 0 or dims.z <= 0:
            raise PuzzleDefinitionError(f"box dimensions must be positive, got {dims!r}")
        ids = [s.piece_id for s in orientation_sets]
        if len(set(ids)) != len(ids):
            raise PuzzleDefinitionError(f"each piece may appear only once, got ids {ids}")
        if any(i <= 0 for i in ids):
            raise PuzzleDefinitionError(f"piece ids must be positive, got {ids}")

        self.dims: Size = dims
        self.orientation_sets: tuple[OrientationSet, ...] = tuple(orientation_sets)
        self.should_stop = should_stop
        self.stats = SearchStats()

    @classmethod
    def from_definition(
        cls,
        definition: PuzzleDefinition,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> BacktrackingSolver:
        return cls(definition.dims, definition.orientation_sets(), should_stop=should_stop)

    # ── Public API ───────────────────────────────────────────────────────

    @property
    def piece_cell_total(self) -> int:
        return sum(s.cell_count for s in self.orientation_sets)

    def iter_solutions(self) -> Iterator[Solution]:
        """
        Lazily yield every complete packing, each exactly once.

        Each call starts a fresh search with its own Box and resets
        ``stats``.  Stop iterating whenever enough solutions were seen.
        """
        self.stats = SearchStats()

        if any(len(s) == 0 for s in self.orientation_sets):
            logger.info("a piece has no orientation that fits the box; no solutions")
            return
        if self.piece_cell_total != self.dims.volume:
            logger.info(
                "piece cells (%d) != box volume (%d); no exact packing exists",
                self.piece_cell_total, self.dims.volume,
            )
            return

        box = Box(self.dims)
        available = tuple(range(len(self.orientation_sets)))
        yield from self._search(box, available, ORIGIN)

        if self.stats.cancelled:
            logger.info("search cancelled after %d nodes", self.stats.nodes_visited)

    def solve(
        self,
        max_solutions: Optional[int] = None,
        on_solution: Optional[Callable[[Solution], None]] = None,
    ) -> list[Solution]:
        """
        Collect solutions, optionally capped and reported through a callback.

        Args:
            max_solutions: Stop after this many (None = all).
            on_solution:   Called with each solution as it is found.
        """
        solutions: list[Solution] = []
        for solution in self.iter_solutions():
            solutions.append(solution)
            if on_solution is not None:
                on_solution(solution)
            if max_solutions is not None and len(solutions) >= max_solutions:
                break
        return solutions

    def count_solutions(self) -> int:
        return sum(1 for _ in self.iter_solutions())

    # ── Search ───────────────────────────────────────────────────────────

    def _search(
        self, box: Box, available: tuple[int, ...], scan_from: Point,
    ) -> Iterator[Solution]:
        self.stats.nodes_visited += 1

        if not available:
            if not box.is_full():
                raise SearchInvariantError(
                    f"all pieces placed but only {box.filled_count}/{box.volume} cells filled"
                )
            self.stats.solutions_found += 1
            logger.debug("solution %d found", self.stats.solutions_found)
            yield box.snapshot()
            return

        empty_cell = box.find_next_empty_cell(scan_from)
        if empty_cell is None:
            raise SearchInvariantError(
                f"box is full but {len(available)} piece(s) remain to be placed"
            )
        next_scan = box.next_cell(empty_cell)

        had_child = False
        for slot, set_index in enumerate(available):
            remaining = available[:slot] + available[slot + 1:]
            for shape in self.orientation_sets[set_index]:
                if self.should_stop is not None and self.should_stop():
                    self.stats.cancelled = True
                if self.stats.cancelled:
                    return

                anchor = empty_cell - shape.anchor_point
                self.stats.placements_tried += 1
                if not box.try_place(shape, anchor):
                    continue

                had_child = True
                self.stats.placements_made += 1
                yield from self._search(box, remaining, next_scan)
                box.remove_last()

        if not had_child:
            self.stats.dead_ends += 1
