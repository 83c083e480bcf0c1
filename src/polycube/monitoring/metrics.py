"""Metrics tracking and export for polycube search runs.

Provides dataclasses for tracking search metrics and utilities for
exporting results to JSON and CSV formats.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from polycube.algorithms.backtracking import SearchStats
from polycube.core.box import Solution

CSV_FIELDS = [
    "solution_index", "placement_order", "piece_id", "label",
    "x", "y", "z", "points", "found_after_seconds",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SolutionRecord:
    """One found solution, flattened for export.

    Attributes:
        solution_index: 1-based order in which the solution was found.
        placements: Per-piece dicts (piece_id, label, position, points).
        found_after_seconds: Seconds since the search started.
        nodes_at_find: Search nodes visited when it was found.
    """

    solution_index: int
    placements: list[dict[str, Any]]
    found_after_seconds: float
    nodes_at_find: int

    @classmethod
    def from_solution(
        cls,
        index: int,
        solution: Solution,
        labels: dict[int, str],
        found_after_seconds: float,
        nodes_at_find: int,
    ) -> SolutionRecord:
        placements = []
        for placed in solution.placements:
            d = placed.to_dict()
            d["label"] = labels.get(placed.piece_id, str(placed.piece_id))
            placements.append(d)
        return cls(index, placements, found_after_seconds, nodes_at_find)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SearchMetrics:
    """Aggregate metrics for one puzzle search.

    Attributes:
        run_id: Unique identifier for the run.
        puzzle_name: Name of the puzzle definition.
        box_dims: (X, Y, Z) of the box.
        piece_count: Number of pieces in the catalog.
        orientation_counts: Orientations kept per piece label.
        max_solutions: Requested cap (None = all).
        solutions_found: Solutions consumed by the runner.
        nodes_visited: Search nodes (recursion levels entered).
        placements_tried: Candidate placements attempted.
        placements_made: Candidate placements that fit.
        dead_ends: Nodes with no fitting candidate.
        cancelled: Whether the search was stopped early.
        runtime_seconds: Wall-clock runtime.
        started_at: Run start timestamp.
        completed_at: Run completion timestamp (None if running).
        solutions: Per-solution records.
    """

    run_id: str
    puzzle_name: str
    box_dims: tuple[int, int, int]
    piece_count: int
    orientation_counts: dict[str, int] = field(default_factory=dict)
    max_solutions: int | None = None
    solutions_found: int = 0
    nodes_visited: int = 0
    placements_tried: int = 0
    placements_made: int = 0
    dead_ends: int = 0
    cancelled: bool = False
    runtime_seconds: float = 0.0
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None
    solutions: list[SolutionRecord] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> float:
        return (_utcnow() - self.started_at).total_seconds()

    def add_solution(self, record: SolutionRecord) -> None:
        """Add a solution record to the run.

        Example:
            >>> m = SearchMetrics("run_001", "single-cube", (1, 1, 1), 1)
            >>> m.add_solution(SolutionRecord(1, [], 0.0, 2))
            >>> m.solutions_found
            1
        """
        self.solutions.append(record)
        self.solutions_found += 1

    def update_from_stats(self, stats: SearchStats) -> None:
        """Copy the solver's counters (solutions_found stays the consumed count)."""
        counters = stats.to_dict()
        counters.pop("solutions_found")
        for name, value in counters.items():
            setattr(self, name, value)

    def mark_complete(self) -> None:
        """Mark the run complete and calculate final runtime."""
        self.completed_at = _utcnow()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamps."""
        d = asdict(self)
        d["box_dims"] = list(self.box_dims)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["solutions"] = [s.to_dict() for s in self.solutions]
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to summary dictionary without per-solution details."""
        d = self.to_dict()
        del d["solutions"]
        return d


def export_to_json(metrics: SearchMetrics, output_path: Path | str, include_solutions: bool = True) -> None:
    """Export search metrics to a JSON file.

    Args:
        metrics: SearchMetrics instance to export.
        output_path: Path to output JSON file.
        include_solutions: If False, write the summary only.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_solutions else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: SearchMetrics, output_path: Path | str) -> None:
    """Export one row per placed piece per solution.

    An empty run still writes the header row.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for record in metrics.solutions:
            for order, placed in enumerate(record.placements):
                x, y, z = placed["position"]
                writer.writerow({
                    "solution_index": record.solution_index,
                    "placement_order": order,
                    "piece_id": placed["piece_id"],
                    "label": placed["label"],
                    "x": x,
                    "y": y,
                    "z": z,
                    "points": json.dumps(placed["points"]),
                    "found_after_seconds": f"{record.found_after_seconds:.6f}",
                })


def print_summary(metrics: SearchMetrics) -> str:
    """Generate a human-readable summary of search metrics.

    Returns:
        Formatted multi-line summary string.

    Example:
        >>> m = SearchMetrics("run_001", "single-cube", (1, 1, 1), 1)
        >>> "Puzzle: single-cube" in print_summary(m)
        True
    """
    dims = " x ".join(str(d) for d in metrics.box_dims)
    cap = "all" if metrics.max_solutions is None else str(metrics.max_solutions)
    orientations = ", ".join(f"{k}={v}" for k, v in metrics.orientation_counts.items())
    lines = [
        "=" * 60,
        f"Run: {metrics.run_id}",
        f"Puzzle: {metrics.puzzle_name}",
        "=" * 60,
        f"Box: {dims}",
        f"Pieces: {metrics.piece_count}",
        f"Orientations: {orientations}",
        "",
        "Search Statistics:",
        f"  Solutions:        {metrics.solutions_found} (cap: {cap})",
        f"  Nodes visited:    {metrics.nodes_visited}",
        f"  Placements tried: {metrics.placements_tried}",
        f"  Placements made:  {metrics.placements_made}",
        f"  Dead ends:        {metrics.dead_ends}",
        f"  Cancelled:        {metrics.cancelled}",
        "",
        f"Runtime: {metrics.runtime_seconds:.3f} seconds",
        "",
        f"Started:   {metrics.started_at.isoformat()}",
        f"Completed: {metrics.completed_at.isoformat() if metrics.completed_at else 'In Progress'}",
        "=" * 60,
    ]
    return "\n".join(lines)
