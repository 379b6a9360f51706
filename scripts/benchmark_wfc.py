#!/usr/bin/env python3
"""Benchmark terrain generation and pathfinding performance."""

from __future__ import annotations

import argparse
import json
import random
import time
from pathlib import Path

from wavemap import config
from wavemap.environment.catalog import default_catalog, normalize_adjacency
from wavemap.environment.generators.wfc_solver import WFCSolver, attempt_stats
from wavemap.util.pathfinding import find_path

GRID_SIZES: tuple[int, ...] = (10, 25, 50, 75, 100)


class WFCBenchmark:
    """Benchmark runner for the solver and the A* pathfinder."""

    def __init__(self, iterations: int) -> None:
        self.iterations = iterations
        self.categories = default_catalog()
        normalize_adjacency(self.categories)
        self.results: dict[str, dict[str, float]] = {}

    def _run_case(self, size: int) -> tuple[float, float]:
        """Return average solve and corner-to-corner path time in milliseconds."""
        solve_total = 0.0
        path_total = 0.0

        for i in range(self.iterations):
            rng = random.Random((size * 1_000) + i)
            solver = WFCSolver(self.categories, size, rng)

            start = time.perf_counter()
            grid = solver.solve(max_attempts=None)
            solve_total += time.perf_counter() - start

            start = time.perf_counter()
            find_path(grid, (0, 0), (size - 1, size - 1), config.DEFAULT_TILE_SIZE)
            path_total += time.perf_counter() - start

        return (
            (solve_total / self.iterations) * 1000.0,
            (path_total / self.iterations) * 1000.0,
        )

    def run(self) -> None:
        """Run all configured grid-size benchmarks."""
        print("WFC Benchmark")
        print("=" * 56)
        print(f"Iterations per size: {self.iterations}")
        print()
        print(
            f"{'Size':>10} {'Solve (ms)':>12} {'Path (ms)':>12} "
            f"{'Attempts':>10} {'Worst':>7}"
        )
        print("-" * 56)

        for size in GRID_SIZES:
            attempt_stats.clear()
            solve_ms, path_ms = self._run_case(size)

            size_key = f"{size}x{size}"
            self.results[size_key] = {
                "solve_ms": solve_ms,
                "path_ms": path_ms,
                "attempts_p50": attempt_stats.p50,
                "attempts_max": attempt_stats.max,
            }

            print(
                f"{size_key:>10} {solve_ms:12.2f} {path_ms:12.2f} "
                f"{attempt_stats.p50:10.1f} {attempt_stats.max:7.0f}"
            )

    def save_results(self, filename: str) -> None:
        """Save benchmark output to a JSON file."""
        with Path(filename).open("w") as f:
            json.dump(self.results, f, indent=2)
        print(f"\nSaved benchmark results to {filename}")

    def compare_with_baseline(self, baseline_file: str) -> None:
        """Compare current run with a saved baseline JSON file."""
        try:
            with Path(baseline_file).open() as f:
                baseline: dict[str, dict[str, float]] = json.load(f)
        except FileNotFoundError:
            print(f"\nBaseline file not found: {baseline_file}")
            return

        print(f"\nComparison vs baseline: {baseline_file}")
        print("=" * 64)

        for size_key, current in self.results.items():
            if size_key not in baseline:
                continue

            old_solve = baseline[size_key].get("solve_ms", 0.0)
            new_solve = current["solve_ms"]
            if old_solve <= 0:
                continue

            delta_pct = ((new_solve - old_solve) / old_solve) * 100.0
            speed_ratio = old_solve / new_solve if new_solve > 0 else 0.0
            trend = "faster" if speed_ratio > 1.0 else "slower"

            print(
                f"{size_key:>10}: {new_solve:8.2f}ms "
                f"vs {old_solve:8.2f}ms | {speed_ratio:5.2f}x {trend} "
                f"({delta_pct:+6.1f}%)"
            )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark WFC terrain generation")
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of runs per grid size (default: 5)",
    )
    parser.add_argument("--save", type=str, help="Save current results to JSON")
    parser.add_argument(
        "--compare",
        type=str,
        help="Compare current results against baseline JSON",
    )
    args = parser.parse_args(argv)

    benchmark = WFCBenchmark(iterations=args.iterations)
    benchmark.run()

    if args.save:
        benchmark.save_results(args.save)

    if args.compare:
        benchmark.compare_with_baseline(args.compare)


if __name__ == "__main__":
    main()
