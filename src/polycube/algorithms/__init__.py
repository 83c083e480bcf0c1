"""Search algorithms."""

from polycube.algorithms.backtracking import BacktrackingSolver, SearchStats

__all__ = ["BacktrackingSolver", "SearchStats"]
