#!/usr/bin/env python
"""
Tests for the Uno benchmark.

Runs tiny benchmarks so the whole pipeline (seeding, games, result table,
CSV and heatmap output) is exercised in a few seconds.
"""
import os
import shutil
import tempfile
import unittest

import matplotlib
matplotlib.use("Agg")
import pandas as pd

from benchmark import main, plot_results, run_benchmark, simulate_uno_game, spawn_seeds


class TestBenchmark(unittest.TestCase):
    """Test case for the benchmark helpers."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir)

    def test_spawn_seeds(self):
        seeds = spawn_seeds(42, 5)
        self.assertEqual(len(seeds), 5)
        self.assertEqual(len(set(seeds)), 5)
        self.assertEqual(seeds, spawn_seeds(42, 5))

    def test_simulate_random_game(self):
        result = simulate_uno_game((0, 0), seed=1)
        self.assertIn(result, (0, 1))
        self.assertEqual(result, simulate_uno_game((0, 0), seed=1))

    def test_simulate_searching_game(self):
        self.assertIn(simulate_uno_game((2, 0), seed=3), (0, 1))
        self.assertIn(simulate_uno_game((2, 2), seed=3, hidden=True), (0, 1))

    def test_run_benchmark(self):
        results = run_benchmark([0, 2], samples=2, seed=7, progress=False)

        self.assertIsInstance(results, pd.DataFrame)
        self.assertEqual(results.shape, (2, 2))
        self.assertEqual(list(results.index), [0, 2])
        self.assertEqual(list(results.columns), [0, 2])
        self.assertTrue(((results >= 0) & (results <= 2)).all().all())

        again = run_benchmark([0, 2], samples=2, seed=7, progress=False)
        pd.testing.assert_frame_equal(results, again)

    def test_invalid_samples(self):
        with self.assertRaises(ValueError):
            run_benchmark([0], samples=0, progress=False)

    def test_plot_results(self):
        results = run_benchmark([0], samples=1, seed=1, progress=False)
        path = os.path.join(self.test_dir, "uno.png")
        plot_results(results, 1, path)
        self.assertTrue(os.path.exists(path))

    def test_main_writes_csv(self):
        path = os.path.join(self.test_dir, "uno.csv")
        main(["--budgets", "0", "--samples", "1", "--seed", "2", "--workers", "1", "--output", path])

        results = pd.read_csv(path, index_col=0)
        self.assertEqual(results.shape, (1, 1))


if __name__ == "__main__":
    unittest.main()
