"""Exhaustive solver for packing polycube pieces into a rectangular box."""

from polycube.algorithms.backtracking import BacktrackingSolver, SearchStats
from polycube.core import (
    Box,
    OrientationSet,
    PieceSpec,
    Point,
    PuzzleDefinition,
    Shape,
    Size,
    Solution,
    all_rotations,
    load_puzzle,
)

__version__ = "0.1.0"

__all__ = [
    "BacktrackingSolver",
    "SearchStats",
    "Box",
    "OrientationSet",
    "PieceSpec",
    "Point",
    "PuzzleDefinition",
    "Shape",
    "Size",
    "Solution",
    "all_rotations",
    "load_puzzle",
]
