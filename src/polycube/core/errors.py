"""
Error taxonomy for the polycube packer.

  PuzzleDefinitionError — the caller handed in a puzzle that cannot be
                          searched (empty piece, bad dimensions, ...).
                          Raised before any search starts.
  CellOutOfBoundsError  — a grid query named a cell outside the box.
  InvariantViolation    — the push/pop discipline of the grid or the search
                          state machine is broken.  Fatal: never caught
                          inside the package.

A search dead end (no piece fits an empty cell) is not an error.
"""


class PuzzleDefinitionError(ValueError):
    """Puzzle input is invalid and was rejected before searching."""


class CellOutOfBoundsError(IndexError):
    """A cell lookup fell outside the box extents."""


class InvariantViolation(AssertionError):
    """Base class for broken internal invariants."""


class GridInvariantError(InvariantViolation):
    """Placement stack underflow or occupancy mismatch on removal."""


class SearchInvariantError(InvariantViolation):
    """The backtracking state machine reached an impossible state."""
