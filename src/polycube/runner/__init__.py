"""Puzzle catalogs and the command-line runner."""

from polycube.runner.catalog import BUILTIN_PUZZLES, get_puzzle
from polycube.runner.solve import PuzzleRunner, configure_logging, main, run_puzzle

__all__ = ["BUILTIN_PUZZLES", "get_puzzle", "PuzzleRunner", "configure_logging", "main", "run_puzzle"]
