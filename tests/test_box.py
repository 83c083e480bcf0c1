"""
Tests for the Box occupancy grid.

Run with:
    python -m pytest tests/test_box.py -v

Tests cover:
- Bounds / occupancy queries, including cells outside the box
- try_place is all-or-nothing (out of bounds, overlap)
- push/pop round trip restores the grid exactly
- remove_last invariant violations are fatal
- Empty-cell scan: order, resumption, monotonicity
- Scan order and canonical point order are the same order
- Snapshots are immutable and independent
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from polycube.core.box import Box
from polycube.core.errors import (
    CellOutOfBoundsError,
    GridInvariantError,
    InvariantViolation,
    PuzzleDefinitionError,
)
from polycube.core.geometry import ORIGIN, Point, Size
from polycube.core.shape import EMPTY, Shape


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def box():
    """Empty 2x3x2 box."""
    return Box((2, 3, 2))


@pytest.fixture
def domino_z():
    """Two cells stacked along z."""
    return Shape.from_points([(0, 0, 0), (0, 0, 1)], piece_id=1)


@pytest.fixture
def ell():
    """Three-cell L in the xy plane."""
    return Shape.from_points([(0, 0, 0), (1, 0, 0), (0, 1, 0)], piece_id=2)


def all_cells(dims):
    return [Point(x, y, z) for x in range(dims[0]) for y in range(dims[1]) for z in range(dims[2])]


# ---------------------------------------------------------------------------
# 1. Construction and queries
# ---------------------------------------------------------------------------

class TestQueries:
    @pytest.mark.parametrize("dims", [(0, 1, 1), (1, -1, 1), (1, 1, 0)])
    def test_non_positive_dims_rejected(self, dims):
        with pytest.raises(PuzzleDefinitionError):
            Box(dims)

    def test_new_box_is_empty(self, box):
        assert box.dims == Size(2, 3, 2)
        assert box.filled_count == 0
        assert box.placements == ()
        assert not any(box.is_occupied(c) for c in all_cells((2, 3, 2)))

    @pytest.mark.parametrize("cell,expected", [
        (Point(0, 0, 0), False),
        (Point(1, 2, 1), False),
        (Point(2, 0, 0), True),
        (Point(0, 3, 0), True),
        (Point(0, 0, 2), True),
        (Point(-1, 0, 0), True),
    ])
    def test_out_of_bounds(self, box, cell, expected):
        assert box.is_out_of_bounds(cell) is expected

    @pytest.mark.parametrize("cell", [
        Point(0, 0, -1),
        Point(-1, 0, 0),
        Point(2, 0, 0),
        Point(5, 5, 5),
    ])
    def test_outside_cells_read_as_walls(self, box, cell):
        # (0, 0, -1) must not wrap round to the last cell of the buffer
        assert box.try_place(Shape.from_points([(0, 0, 0)], piece_id=1), ORIGIN)
        assert box.is_occupied(cell) is True

    @pytest.mark.parametrize("cell", [Point(0, 0, -1), Point(5, 5, 5), Point(0, 3, 0)])
    def test_occupant_outside_raises(self, box, cell):
        with pytest.raises(CellOutOfBoundsError):
            box.occupant(cell)

    def test_out_of_bounds_error_is_index_error(self):
        assert issubclass(CellOutOfBoundsError, IndexError)


# ---------------------------------------------------------------------------
# 2. Placement
# ---------------------------------------------------------------------------

class TestPlacement:
    def test_place_marks_cells(self, box, ell):
        assert box.try_place(ell, Point(0, 1, 1))
        assert box.occupant(Point(0, 1, 1)) == 2
        assert box.occupant(Point(1, 1, 1)) == 2
        assert box.occupant(Point(0, 2, 1)) == 2
        assert box.occupant(Point(0, 0, 0)) == EMPTY
        assert box.filled_count == 3
        assert box.placements[-1].position == Point(0, 1, 1)

    @pytest.mark.parametrize("anchor", [Point(1, 0, 0), Point(0, 2, 0), Point(-1, 0, 0)])
    def test_out_of_bounds_leaves_grid_untouched(self, box, ell, domino_z, anchor):
        box.try_place(domino_z, Point(0, 0, 0))
        before = box.occupancy()
        stack_before = box.placements

        assert not box.try_place(ell, anchor)
        assert np.array_equal(box.occupancy(), before)
        assert box.placements == stack_before

    def test_overlap_leaves_grid_untouched(self, box, ell, domino_z):
        assert box.try_place(domino_z, Point(1, 0, 0))
        before = box.occupancy()

        # ell at origin covers (1, 0, 0), already taken
        assert not box.try_place(ell, ORIGIN)
        assert np.array_equal(box.occupancy(), before)
        assert len(box.placements) == 1

    def test_push_pop_round_trip(self, box, ell, domino_z):
        before = box.occupancy()
        shapes = [
            (domino_z, Point(0, 0, 0)),
            (ell.with_piece_id(3), Point(0, 1, 0)),
            (ell.with_piece_id(4), Point(0, 1, 1)),
        ]
        for shape, anchor in shapes:
            assert box.try_place(shape, anchor)

        for shape, anchor in reversed(shapes):
            removed = box.remove_last()
            assert removed.shape == shape
            assert removed.position == anchor

        assert np.array_equal(box.occupancy(), before)
        assert box.placements == ()


# ---------------------------------------------------------------------------
# 3. Invariant violations
# ---------------------------------------------------------------------------

class TestInvariants:
    def test_pop_empty_stack(self, box):
        with pytest.raises(GridInvariantError):
            box.remove_last()

    def test_invariant_errors_are_assertions(self):
        assert issubclass(GridInvariantError, InvariantViolation)
        assert issubclass(GridInvariantError, AssertionError)

    def test_occupancy_mismatch_on_clear(self, box, domino_z):
        box.try_place(domino_z, ORIGIN)
        # Corrupt one cell behind the Box's back
        box._cells[0] = EMPTY
        with pytest.raises(GridInvariantError):
            box.remove_last()


# ---------------------------------------------------------------------------
# 4. Empty-cell scan
# ---------------------------------------------------------------------------

class TestScan:
    def test_empty_box_scan_starts_at_origin(self, box):
        assert box.find_next_empty_cell(ORIGIN) == ORIGIN

    def test_skips_filled_cells(self, box, domino_z):
        box.try_place(domino_z, ORIGIN)
        assert box.find_next_empty_cell(ORIGIN) == Point(0, 1, 0)

    def test_full_box_returns_none(self, domino_z):
        small = Box((1, 1, 2))
        small.try_place(domino_z, ORIGIN)
        assert small.find_next_empty_cell(ORIGIN) is None

    def test_start_past_last_cell(self, box):
        assert box.find_next_empty_cell(Point(2, 0, 0)) is None

    @pytest.mark.parametrize("start", [
        Point(0, 0, -1),
        Point(-3, 7, 7),
        Point(0, -1, 1),
        Point(0, 1, -2),
        Point(0, 1, 2),
        Point(0, 3, 0),
        Point(1, 2, 5),
        Point(1, 3, 0),
    ])
    def test_start_outside_box(self, box, ell, start):
        """Outside starts resume at the first empty in-box cell not before them."""
        box.try_place(ell, ORIGIN)
        expected = next(
            (c for c in sorted(all_cells((2, 3, 2))) if c >= start and not box.is_occupied(c)),
            None,
        )
        found = box.find_next_empty_cell(start)
        assert found == expected
        if found is not None:
            assert found >= start
            assert not box.is_out_of_bounds(found)

    def test_monotonic(self, box, ell):
        box.try_place(ell, Point(0, 1, 1))
        for start in all_cells((2, 3, 2)):
            found = box.find_next_empty_cell(start)
            if found is not None:
                assert found >= start
                assert not box.is_occupied(found)

    @pytest.mark.parametrize("cell,expected", [
        (Point(0, 0, 0), Point(0, 0, 1)),
        (Point(0, 0, 1), Point(0, 1, 0)),
        (Point(0, 2, 1), Point(1, 0, 0)),
        (Point(1, 2, 1), Point(2, 0, 0)),
    ])
    def test_next_cell_wraps(self, box, cell, expected):
        assert box.next_cell(cell) == expected

    def test_scan_order_matches_point_order(self, box):
        """Walking next_cell visits cells in exactly sorted Point order."""
        walked = []
        cell = ORIGIN
        while not box.is_out_of_bounds(cell):
            walked.append(cell)
            cell = box.next_cell(cell)
        assert walked == sorted(all_cells((2, 3, 2)))

    def test_scan_visits_empty_cells_in_point_order(self, box, ell):
        box.try_place(ell, ORIGIN)
        found = []
        cell = box.find_next_empty_cell(ORIGIN)
        while cell is not None:
            found.append(cell)
            cell = box.find_next_empty_cell(box.next_cell(cell))
        expected = sorted(c for c in all_cells((2, 3, 2)) if not box.is_occupied(c))
        assert found == expected


# ---------------------------------------------------------------------------
# 5. Snapshots and copies
# ---------------------------------------------------------------------------

class TestSnapshots:
    def test_snapshot_is_read_only(self, box, ell):
        box.try_place(ell, ORIGIN)
        snap = box.snapshot()
        with pytest.raises(ValueError):
            snap.grid[0, 0, 0] = 9

    def test_snapshot_independent_of_later_moves(self, box, ell):
        box.try_place(ell, ORIGIN)
        snap = box.snapshot()
        box.remove_last()
        assert snap.occupant(ORIGIN) == 2
        assert snap.occupied_count == 3
        assert snap.piece_ids == [2]
        assert snap.placement_of(2).position == ORIGIN
        assert snap.placement_of(7) is None

    def test_snapshot_occupant_outside_raises(self, box, ell):
        box.try_place(ell, ORIGIN)
        snap = box.snapshot()
        for cell in (Point(0, 0, -1), Point(2, 0, 0)):
            with pytest.raises(CellOutOfBoundsError):
                snap.occupant(cell)

    def test_copy_is_independent(self, box, ell, domino_z):
        box.try_place(ell, ORIGIN)
        clone = box.copy()
        clone.try_place(domino_z, Point(1, 2, 0))
        assert box.filled_count == 3
        assert clone.filled_count == 5
        assert len(box.placements) == 1

    def test_snapshot_to_dict(self, box, ell):
        box.try_place(ell, ORIGIN)
        d = box.snapshot().to_dict()
        assert d["dims"] == [2, 3, 2]
        assert d["placements"][0]["piece_id"] == 2
        assert d["placements"][0]["position"] == [0, 0, 0]
