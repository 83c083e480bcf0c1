"""
Orientation generation for polycube pieces.

Every proper rotation of the cube is written as a word over the three
primitive quarter turns of ``Shape``.  The 24 words are built as

    R ∘ Zᵏ   for R in FACE_TURNS, k in 0..3

(roll k times about z first, then turn the face).  FACE_TURNS sends the
original +z axis to six different directions, and Zᵏ keeps +z fixed, so all
24 words are distinct group elements: the table is the whole rotation group.
All primitives have determinant +1, so no word is a reflection.

OrientationSet holds the deduplicated, sorted result.  Symmetric pieces give
fewer than 24 members because different words land on equal Shapes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from polycube.core.errors import PuzzleDefinitionError
from polycube.core.shape import PieceID, Shape

logger = logging.getLogger(__name__)

# Images of +z: +z, +y, -z, -y, +x, -x.
FACE_TURNS: tuple[tuple[str, ...], ...] = (
    (),
    ("x",),
    ("x", "x"),
    ("x", "x", "x"),
    ("y",),
    ("y", "y", "y"),
)

ROTATION_WORDS: tuple[tuple[str, ...], ...] = tuple(
    ("z",) * k + face for face in FACE_TURNS for k in range(4)
)


def apply_rotation(shape: Shape, word: Iterable[str]) -> Shape:
    """Apply a rotation word, left to right."""
    for axis in word:
        shape = shape.rotate(axis)
    return shape


@dataclass(frozen=True)
class OrientationSet:
    """
    All geometrically distinct orientations of one logical piece.

    Attributes:
        piece_id: Logical piece shared by every member.
        shapes:   Distinct canonical shapes, sorted ascending.
    """

    piece_id: PieceID
    shapes: tuple[Shape, ...]

    @classmethod
    def from_shapes(cls, piece_id: PieceID, shapes: Iterable[Shape]) -> OrientationSet:
        unique = {s.with_piece_id(piece_id) for s in shapes}
        return cls(piece_id=piece_id, shapes=tuple(sorted(unique)))

    @classmethod
    def pinned(cls, shape: Shape) -> OrientationSet:
        """A set restricted to the single given orientation."""
        return cls(piece_id=shape.piece_id, shapes=(shape,))

    @property
    def cell_count(self) -> int:
        """Cells per orientation (0 for an empty, fully filtered set)."""
        return self.shapes[0].cell_count if self.shapes else 0

    def __iter__(self) -> Iterator[Shape]:
        return iter(self.shapes)

    def __len__(self) -> int:
        return len(self.shapes)

    def __contains__(self, shape: object) -> bool:
        return shape in self.shapes


def all_rotations(shape: Shape, max_height: Optional[int] = None) -> OrientationSet:
    """
    Every distinct orientation of *shape* under the 24 cube rotations.

    Args:
        shape:      Base orientation of the piece.
        max_height: If given, drop orientations whose z-extent exceeds it.
                    Valid pruning only when the target box is exactly this
                    tall; taller orientations could never be placed.

    Returns:
        OrientationSet with 1–24 members (possibly fewer, or none, after
        height filtering).
    """
    if max_height is not None and max_height <= 0:
        raise PuzzleDefinitionError(f"max_height must be positive, got {max_height}")

    rotated = [apply_rotation(shape, word) for word in ROTATION_WORDS]
    if max_height is not None:
        rotated = [s for s in rotated if s.size.z <= max_height]

    result = OrientationSet.from_shapes(shape.piece_id, rotated)
    logger.debug(
        "piece %d: %d distinct orientations (max_height=%s)",
        shape.piece_id, len(result), max_height,
    )
    return result
