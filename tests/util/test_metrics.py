import random

import numpy as np

from wavemap.environment.catalog import TerrainCategory
from wavemap.environment.generators.wfc_solver import attempt_stats, solve
from wavemap.util.metrics import MostRecentNVar


class TestMostRecentNVar:
    def test_empty_stats_report_zero(self) -> None:
        var = MostRecentNVar(num_samples=10)
        assert var.sample_count == 0
        assert var.p50 == 0.0
        assert var.max == 0.0

    def test_median_and_max_before_wrapping(self) -> None:
        var = MostRecentNVar(num_samples=10)
        for attempts in (1, 3, 2, 7):
            var.record(attempts)
        assert var.sample_count == 4
        assert var.p50 == 2.5
        assert var.max == 7.0

    def test_old_values_fall_out_of_the_window(self) -> None:
        var = MostRecentNVar(num_samples=3)
        for attempts in (50, 1, 2, 3, 4):
            var.record(attempts)
        assert var.sample_count == 3
        assert np.array_equal(var.window(), [2.0, 3.0, 4.0])
        assert var.max == 4.0

    def test_clear(self) -> None:
        var = MostRecentNVar(num_samples=4)
        for attempts in range(6):
            var.record(attempts)
        var.clear()
        assert var.sample_count == 0
        assert len(var.window()) == 0


def test_every_successful_solve_is_recorded(
    two_biomes: list[TerrainCategory],
) -> None:
    for seed in range(3):
        grid = solve(two_biomes, 3, rng=random.Random(seed))
        assert grid.attempts == 1

    assert attempt_stats.sample_count == 3
    assert attempt_stats.p50 == 1.0
