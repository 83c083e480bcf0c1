"""Core types: geometry, canonical shapes, orientations, the occupancy grid and config."""

from polycube.core.box import Box, PlacedPiece, Solution
from polycube.core.config import PieceSpec, PuzzleDefinition, RunConfig, dump_puzzle, load_puzzle
from polycube.core.errors import (
    CellOutOfBoundsError,
    GridInvariantError,
    InvariantViolation,
    PuzzleDefinitionError,
    SearchInvariantError,
)
from polycube.core.geometry import ORIGIN, Point, Position, Size
from polycube.core.orientations import ROTATION_WORDS, OrientationSet, all_rotations, apply_rotation
from polycube.core.shape import EMPTY, PieceID, Shape

__all__ = [
    # Geometry
    "Point",
    "Position",
    "Size",
    "ORIGIN",
    # Shapes
    "Shape",
    "PieceID",
    "EMPTY",
    "OrientationSet",
    "ROTATION_WORDS",
    "all_rotations",
    "apply_rotation",
    # Grid
    "Box",
    "PlacedPiece",
    "Solution",
    # Config
    "PieceSpec",
    "PuzzleDefinition",
    "RunConfig",
    "load_puzzle",
    "dump_puzzle",
    # Errors
    "CellOutOfBoundsError",
    "PuzzleDefinitionError",
    "InvariantViolation",
    "GridInvariantError",
    "SearchInvariantError",
]
