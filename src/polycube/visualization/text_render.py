"""
Plain-text rendering of solutions and orientation sets.

Layout of ``render_grid``: one line per x; on each line one string per
z layer, each string listing the y cells, layers separated by two spaces.
Empty cells print as ``.``.  Piece labels come from the caller; the core
never names pieces.
"""

from typing import Mapping, Optional

from polycube.core.box import Solution
from polycube.core.orientations import OrientationSet
from polycube.core.shape import EMPTY

EMPTY_LABEL = "."


def _label(piece_id: int, labels: Optional[Mapping[int, str]]) -> str:
    if piece_id == EMPTY:
        return EMPTY_LABEL
    if labels is None:
        return str(piece_id)
    return labels.get(piece_id, str(piece_id))


def render_grid(solution: Solution, labels: Optional[Mapping[int, str]] = None) -> str:
    dims = solution.dims
    lines = []
    for x in range(dims.x):
        layers = []
        for z in range(dims.z):
            layers.append("".join(
                _label(int(solution.grid[x, y, z]), labels) for y in range(dims.y)
            ))
        lines.append("  ".join(layers))
    return "\n".join(lines)


def describe_solution(solution: Solution, labels: Optional[Mapping[int, str]] = None) -> str:
    """Header, one line per placed piece, then the grid."""
    lines = [f"Box: {solution.dims!r}, pieces: {len(solution.placements)}"]
    for placed in solution.placements:
        cells = " ".join(repr(p) for p in placed.shape.points)
        lines.append(
            f"  {_label(placed.piece_id, labels)} at {placed.position!r} "
            f"size {placed.shape.size!r}: {cells}"
        )
    lines.append(render_grid(solution, labels))
    return "\n".join(lines)


def describe_orientations(
    orientation_set: OrientationSet, labels: Optional[Mapping[int, str]] = None,
) -> str:
    name = _label(orientation_set.piece_id, labels)
    lines = [f"Piece {name}: {len(orientation_set)} orientation(s)"]
    for shape in orientation_set:
        lines.append(f"  {shape!r}")
    return "\n".join(lines)
