"""
Tests for puzzle definitions, YAML loading and run configuration.

Run with:
    python -m pytest tests/test_config.py -v
"""

import os
import sys

import pytest
from pydantic import ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from polycube.core.config import (
    PieceSpec,
    PuzzleDefinition,
    RunConfig,
    dump_puzzle,
    load_puzzle,
)
from polycube.core.errors import PuzzleDefinitionError
from polycube.core.geometry import Size
from polycube.runner.catalog import BUILTIN_PUZZLES, get_puzzle, six_piece_4x4x2

SOMA_YAML = os.path.join(os.path.dirname(__file__), "..", "puzzles", "soma-3x3x3.yaml")


# ---------------------------------------------------------------------------
# 1. Validation (fail fast, before search)
# ---------------------------------------------------------------------------

class TestValidation:
    def test_empty_piece_rejected(self):
        with pytest.raises(ValidationError):
            PieceSpec(id=1, points=[])

    def test_duplicate_points_rejected(self):
        with pytest.raises(ValidationError):
            PieceSpec(id=1, points=[(0, 0, 0), (0, 0, 0)])

    def test_reserved_id_rejected(self):
        with pytest.raises(ValidationError):
            PieceSpec(id=0, points=[(0, 0, 0)])

    @pytest.mark.parametrize("box", [(0, 1, 1), (1, -2, 1), (1, 1, 0)])
    def test_non_positive_box_rejected(self, box):
        with pytest.raises(ValidationError):
            PuzzleDefinition(box=box, pieces=[PieceSpec(id=1, points=[(0, 0, 0)])])

    def test_no_pieces_rejected(self):
        with pytest.raises(ValidationError):
            PuzzleDefinition(box=(1, 1, 1), pieces=[])

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError):
            PuzzleDefinition(
                box=(2, 1, 1),
                pieces=[PieceSpec(id=1, points=[(0, 0, 0)]), PieceSpec(id=1, points=[(0, 0, 0)])],
            )


# ---------------------------------------------------------------------------
# 2. Derived values
# ---------------------------------------------------------------------------

class TestDefinition:
    def test_dims_and_volume(self):
        definition = six_piece_4x4x2()
        assert definition.dims == Size(4, 4, 2)
        assert definition.volume == 32

    def test_labels_default_to_id(self):
        definition = PuzzleDefinition(box=(1, 1, 1), pieces=[PieceSpec(id=5, points=[(0, 0, 0)])])
        assert definition.labels == {5: "5"}

    def test_prune_by_height_toggle(self):
        rod = [(0, 0, 0), (1, 0, 0)]
        pruned = PuzzleDefinition(box=(2, 1, 1), pieces=[PieceSpec(id=1, points=rod)])
        unpruned = PuzzleDefinition(box=(2, 1, 1), pieces=[PieceSpec(id=1, points=rod)], prune_by_height=False)
        assert len(pruned.orientation_sets()[0]) == 2
        assert len(unpruned.orientation_sets()[0]) == 3

    def test_fixed_orientation_is_canonical_input(self):
        spec = PieceSpec(id=2, points=[(3, 3, 3), (3, 4, 3)], fixed_orientation=True)
        (shape,) = spec.orientations().shapes
        assert shape == spec.to_shape()
        assert shape.piece_id == 2


# ---------------------------------------------------------------------------
# 3. YAML loading
# ---------------------------------------------------------------------------

class TestYaml:
    def test_load_bundled_puzzle(self):
        definition = load_puzzle(SOMA_YAML)
        assert definition.name == "soma-3x3x3"
        assert definition.box == (3, 3, 3)
        assert len(definition.pieces) == 7
        assert definition.piece_cell_total == 27
        pinned = [p for p in definition.pieces if p.fixed_orientation]
        assert len(pinned) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(PuzzleDefinitionError):
            load_puzzle(tmp_path / "nope.yaml")

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(PuzzleDefinitionError):
            load_puzzle(path)

    def test_invalid_content(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("box: [2, 2, 0]\npieces:\n  - {id: 1, points: [[0, 0, 0]]}\n")
        with pytest.raises(ValidationError):
            load_puzzle(path)

    def test_name_defaults_to_file_stem(self, tmp_path):
        path = tmp_path / "tiny.yaml"
        path.write_text("box: [1, 1, 1]\npieces:\n  - {id: 1, points: [[0, 0, 0]]}\n")
        assert load_puzzle(path).name == "tiny"

    def test_dump_then_load(self, tmp_path):
        path = tmp_path / "six.yaml"
        dump_puzzle(six_piece_4x4x2(), path)
        assert load_puzzle(path) == six_piece_4x4x2()


# ---------------------------------------------------------------------------
# 4. Catalog and run config
# ---------------------------------------------------------------------------

class TestCatalogAndRunConfig:
    @pytest.mark.parametrize("name", sorted(BUILTIN_PUZZLES))
    def test_builtin_volumes_match(self, name):
        definition = get_puzzle(name)
        assert definition.name == name
        assert definition.piece_cell_total == definition.volume

    def test_unknown_puzzle(self):
        with pytest.raises(ValueError, match="Unknown puzzle"):
            get_puzzle("pentomino-6x10")

    def test_run_config_dict(self):
        config = RunConfig(max_solutions=None, results_dir="out", verbose=True)
        assert RunConfig.from_dict(config.to_dict()) == config
