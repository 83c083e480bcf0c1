"""Built-in puzzle catalogs."""

from typing import Callable

from polycube.core.config import PieceSpec, PuzzleDefinition


def _pieces(spec: list[tuple[str, list[tuple[int, int, int]]]]) -> list[PieceSpec]:
    return [
        PieceSpec(id=i, label=label, points=points)
        for i, (label, points) in enumerate(spec, start=1)
    ]


def six_piece_4x4x2() -> PuzzleDefinition:
    """Six pieces A–F (32 cells in total) into a 4×4×2 box."""
    return PuzzleDefinition(
        name="six-piece-4x4x2",
        box=(4, 4, 2),
        pieces=_pieces([
            ("C", [(0, 0, 0), (1, 0, 0), (1, 1, 0), (1, 1, 1)]),
            ("D", [(0, 0, 0), (1, 0, 0), (2, 0, 0), (0, 0, 1)]),
            ("B", [(0, 0, 0), (1, 0, 0), (2, 0, 0), (2, 1, 0), (2, 1, 1)]),
            ("F", [(0, 0, 0), (2, 0, 0), (0, 1, 0), (1, 1, 0), (2, 1, 0), (2, 0, 1)]),
            ("A", [(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1), (1, 0, 1), (0, 1, 1)]),
            ("E", [(0, 0, 0), (1, 0, 0), (2, 0, 0), (0, 1, 0), (1, 1, 0), (2, 1, 0), (2, 0, 1)]),
        ]),
    )


def single_cube() -> PuzzleDefinition:
    """A single unit cube in a 1×1×1 box."""
    return PuzzleDefinition(
        name="single-cube",
        box=(1, 1, 1),
        pieces=_pieces([("A", [(0, 0, 0)])]),
    )


def soma_3x3x3() -> PuzzleDefinition:
    """The seven Soma pieces (27 cells) into a 3×3×3 cube."""
    return PuzzleDefinition(
        name="soma-3x3x3",
        box=(3, 3, 3),
        pieces=_pieces([
            ("V", [(0, 0, 0), (1, 0, 0), (0, 1, 0)]),
            ("L", [(0, 0, 0), (1, 0, 0), (2, 0, 0), (0, 1, 0)]),
            ("T", [(0, 0, 0), (1, 0, 0), (2, 0, 0), (1, 1, 0)]),
            ("Z", [(0, 0, 0), (1, 0, 0), (1, 1, 0), (2, 1, 0)]),
            ("A", [(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 0, 1)]),
            ("B", [(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 1, 1)]),
            ("P", [(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1)]),
        ]),
    )


# Map of puzzle names to factories
BUILTIN_PUZZLES: dict[str, Callable[[], PuzzleDefinition]] = {
    "six-piece-4x4x2": six_piece_4x4x2,
    "single-cube": single_cube,
    "soma-3x3x3": soma_3x3x3,
}


def get_puzzle(name: str) -> PuzzleDefinition:
    """
    Build a built-in puzzle by name.

    Raises:
        ValueError: If the name is not recognized
    """
    if name not in BUILTIN_PUZZLES:
        raise ValueError(
            f"Unknown puzzle: {name}. "
            f"Available: {list(BUILTIN_PUZZLES.keys())}"
        )
    return BUILTIN_PUZZLES[name]()
