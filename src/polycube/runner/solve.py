"""Main runner for polycube packing searches."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from polycube.algorithms.backtracking import BacktrackingSolver
from polycube.core.box import Solution
from polycube.core.config import PuzzleDefinition, RunConfig, load_puzzle
from polycube.monitoring.metrics import (
    SearchMetrics,
    SolutionRecord,
    export_to_csv,
    export_to_json,
    print_summary,
)
from polycube.monitoring.telegram_notifier import (
    format_error,
    format_final_summary,
    format_search_start,
    format_solution_milestone,
    send_telegram,
)
from polycube.runner.catalog import BUILTIN_PUZZLES, get_puzzle
from polycube.visualization.text_render import describe_solution

logger = logging.getLogger(__name__)


class PuzzleRunner:
    """
    Orchestrates one search: builds the solver, consumes solutions up to the
    configured cap, collects metrics, saves results and sends progress
    updates.
    """

    def __init__(self, config: RunConfig | None = None):
        """
        Initialize puzzle runner.

        Args:
            config: Run parameters (default: RunConfig())
        """
        self.config = config or RunConfig()
        self.results_dir = Path(self.config.results_dir)
        self.results_dir.mkdir(parents=True, exist_ok=True)

    async def run(self, definition: PuzzleDefinition) -> tuple[SearchMetrics, list[Solution]]:
        """
        Search one puzzle.

        Returns:
            (metrics, solutions) where solutions holds the consumed solutions

        Flow:
            1. Build orientation sets and the solver
            2. Send start notification
            3. Iterate solutions until exhausted or the cap is reached,
               sending a milestone every ``progress_every`` solutions
            4. Mark complete, save results, send final summary

        Errors are reported through Telegram (when enabled) and re-raised.
        """
        run_id = f"{definition.name}_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
        try:
            return await self._search(definition, run_id)
        except Exception as e:
            logger.exception("%s: search failed", run_id)
            if self.config.send_telegram_updates:
                await send_telegram(format_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    context={"puzzle": definition.name, "run_id": run_id},
                ))
            raise

    async def _search(
        self, definition: PuzzleDefinition, run_id: str,
    ) -> tuple[SearchMetrics, list[Solution]]:
        solver = BacktrackingSolver.from_definition(definition)
        labels = definition.labels

        metrics = SearchMetrics(
            run_id=run_id,
            puzzle_name=definition.name,
            box_dims=definition.box,
            piece_count=len(definition.pieces),
            orientation_counts={labels[s.piece_id]: len(s) for s in solver.orientation_sets},
            max_solutions=self.config.max_solutions,
        )

        if self.config.send_telegram_updates:
            await send_telegram(format_search_start(
                puzzle_name=definition.name,
                box_dims=definition.box,
                piece_count=len(definition.pieces),
                max_solutions=self.config.max_solutions,
            ))

        solutions: list[Solution] = []
        started = time.perf_counter()
        for solution in solver.iter_solutions():
            solutions.append(solution)
            metrics.add_solution(SolutionRecord.from_solution(
                index=len(solutions),
                solution=solution,
                labels=labels,
                found_after_seconds=time.perf_counter() - started,
                nodes_at_find=solver.stats.nodes_visited,
            ))

            if (
                self.config.send_telegram_updates
                and self.config.progress_every > 0
                and len(solutions) % self.config.progress_every == 0
            ):
                await send_telegram(format_solution_milestone(
                    solutions_found=len(solutions),
                    nodes_visited=solver.stats.nodes_visited,
                    elapsed_seconds=metrics.elapsed_seconds,
                ))

            if self.config.max_solutions is not None and len(solutions) >= self.config.max_solutions:
                break

        metrics.update_from_stats(solver.stats)
        metrics.mark_complete()
        logger.info("%s: %d solution(s) in %.3fs", run_id, len(solutions), metrics.runtime_seconds)

        self._save_results(metrics)

        if self.config.send_telegram_updates:
            await send_telegram(format_final_summary(
                puzzle_name=definition.name,
                solutions_found=metrics.solutions_found,
                nodes_visited=metrics.nodes_visited,
                runtime_seconds=metrics.runtime_seconds,
                cancelled=metrics.cancelled,
            ))

        print(print_summary(metrics))
        for solution in solutions[: self.config.print_solutions]:
            print(describe_solution(solution, labels))
            print()

        return metrics, solutions

    def _save_results(self, metrics: SearchMetrics) -> None:
        """Save metrics to JSON and per-placement CSV."""
        json_path = self.results_dir / f"{metrics.run_id}.json"
        export_to_json(metrics, json_path, include_solutions=True)

        csv_path = self.results_dir / f"{metrics.run_id}_placements.csv"
        export_to_csv(metrics, csv_path)

        print(f"Saved results to {json_path} and {csv_path}")


def configure_logging(config: RunConfig) -> None:
    """Install a console handler; the package logs at DEBUG when verbose."""
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("polycube").setLevel(logging.DEBUG if config.verbose else logging.INFO)


async def run_puzzle(definition: PuzzleDefinition, config: RunConfig | None = None) -> SearchMetrics:
    runner = PuzzleRunner(config)
    metrics, _ = await runner.run(definition)
    return metrics


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Pack polycube pieces into a box")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--puzzle",
        choices=sorted(BUILTIN_PUZZLES),
        default="six-piece-4x4x2",
        help="Built-in puzzle to solve (default: six-piece-4x4x2)",
    )
    source.add_argument(
        "--file",
        type=Path,
        help="YAML puzzle definition to solve instead of a built-in puzzle",
    )
    parser.add_argument(
        "--max-solutions",
        type=int,
        default=1,
        help="Stop after this many solutions; 0 enumerates all (default: 1)",
    )
    parser.add_argument(
        "--results-dir",
        default="results",
        help="Directory for JSON/CSV output (default: results)",
    )
    parser.add_argument(
        "--print-solutions",
        type=int,
        default=1,
        help="How many solutions to print (default: 1)",
    )
    parser.add_argument(
        "--notify",
        action="store_true",
        help="Send Telegram progress updates (needs TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    config = RunConfig(
        max_solutions=args.max_solutions or None,
        results_dir=args.results_dir,
        send_telegram_updates=args.notify,
        print_solutions=args.print_solutions,
        verbose=args.verbose,
    )
    configure_logging(config)

    definition = load_puzzle(args.file) if args.file else get_puzzle(args.puzzle)

    metrics = asyncio.run(run_puzzle(definition, config))
    print(f"\nFound {metrics.solutions_found} solution(s)")
    return 0 if metrics.solutions_found else 1


if __name__ == "__main__":
    raise SystemExit(main())
