"""
Puzzle definitions and run configuration.

Classes:
    PieceSpec         — one piece: id, cells, optional display label / pin
    PuzzleDefinition  — box dimensions plus the ordered piece catalog
    RunConfig         — tuneable parameters of a single solver run

PieceSpec and PuzzleDefinition are pydantic models so that a malformed
puzzle is rejected on construction, before any search starts.  Puzzles can
also be loaded from YAML with ``load_puzzle``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from polycube.core.errors import PuzzleDefinitionError
from polycube.core.geometry import Size
from polycube.core.orientations import OrientationSet, all_rotations
from polycube.core.shape import Shape

# Upper bound on piece ids.
MAX_PIECE_ID = 2**15 - 1


class PieceSpec(BaseModel):
    """A piece given as any one of its orientations (points need not be canonical)."""

    id: int = Field(ge=1, le=MAX_PIECE_ID, description="Logical piece id (0 is reserved for empty)")
    points: list[tuple[int, int, int]] = Field(min_length=1, description="Unit cells of the piece")
    label: Optional[str] = Field(default=None, description="Display name, ignored by the solver")
    fixed_orientation: bool = Field(
        default=False,
        description="Restrict the piece to exactly the given orientation",
    )

    @field_validator("points")
    @classmethod
    def check_unique_points(cls, v: list[tuple[int, int, int]]) -> list[tuple[int, int, int]]:
        if len(set(v)) != len(v):
            raise ValueError("piece points must be unique")
        return v

    def to_shape(self) -> Shape:
        return Shape.from_points(self.points, piece_id=self.id)

    def orientations(self, max_height: Optional[int] = None) -> OrientationSet:
        """Orientation set for this piece, honouring ``fixed_orientation``."""
        shape = self.to_shape()
        if self.fixed_orientation:
            return OrientationSet.pinned(shape)
        return all_rotations(shape, max_height=max_height)


class PuzzleDefinition(BaseModel):
    """
    A box to fill and the pieces to fill it with.

    Attributes:
        name:            Human-readable puzzle name.
        box:             (X, Y, Z) dimensions, all positive.
        pieces:          Ordered catalog; order fixes the search order.
        prune_by_height: Drop orientations taller than the box (z-extent).
    """

    name: str = "puzzle"
    box: tuple[int, int, int]
    pieces: list[PieceSpec] = Field(min_length=1)
    prune_by_height: bool = True

    @field_validator("box")
    @classmethod
    def check_positive_box(cls, v: tuple[int, int, int]) -> tuple[int, int, int]:
        if any(d <= 0 for d in v):
            raise ValueError(f"box dimensions must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def check_unique_ids(self) -> PuzzleDefinition:
        ids = [p.id for p in self.pieces]
        if len(set(ids)) != len(ids):
            raise ValueError(f"piece ids must be unique, got {ids}")
        return self

    @property
    def dims(self) -> Size:
        return Size(*self.box)

    @property
    def volume(self) -> int:
        return self.dims.volume

    @property
    def piece_cell_total(self) -> int:
        return sum(len(p.points) for p in self.pieces)

    @property
    def labels(self) -> dict[int, str]:
        """Display label per piece id (defaults to the id itself)."""
        return {p.id: p.label or str(p.id) for p in self.pieces}

    def orientation_sets(self) -> list[OrientationSet]:
        """One OrientationSet per piece, in catalog order."""
        max_height = self.box[2] if self.prune_by_height else None
        return [p.orientations(max_height=max_height) for p in self.pieces]


def load_puzzle(path: Path | str) -> PuzzleDefinition:
    """
    Load a puzzle definition from a YAML file.

    Raises:
        PuzzleDefinitionError: If the file is missing or not a YAML mapping.
        pydantic.ValidationError: If the content violates the model.
    """
    path = Path(path)
    if not path.is_file():
        raise PuzzleDefinitionError(f"Puzzle file not found: {path}")

    with path.open() as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise PuzzleDefinitionError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise PuzzleDefinitionError(f"Puzzle file {path} must contain a mapping")
    data.setdefault("name", path.stem)
    return PuzzleDefinition.model_validate(data)


def dump_puzzle(definition: PuzzleDefinition, path: Path | str) -> None:
    """Write a puzzle definition as YAML (inverse of ``load_puzzle``)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = definition.model_dump(mode="json")
    with path.open("w") as f:
        yaml.safe_dump(data, f, sort_keys=False)


@dataclass
class RunConfig:
    """
    All tuneable parameters for a single solver run.

    max_solutions=None means enumerate every solution.
    """

    max_solutions: Optional[int] = 1
    results_dir: str = "results"
    send_telegram_updates: bool = False
    progress_every: int = 100
    print_solutions: int = 1
    verbose: bool = False

    def to_dict(self) -> dict:
        return {
            "max_solutions": self.max_solutions,
            "results_dir": self.results_dir,
            "send_telegram_updates": self.send_telegram_updates,
            "progress_every": self.progress_every,
            "print_solutions": self.print_solutions,
            "verbose": self.verbose,
        }

    @classmethod
    def from_dict(cls, d: dict) -> RunConfig:
        return cls(**d)
