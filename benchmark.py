#!/usr/bin/env python
"""
Playing strength benchmark for the MCTS engine on Uno.

Every pair of iteration budgets plays a number of two-player Uno games; a
budget of 0 stands for a player that moves uniformly at random. Games are
independent, so they run in a process pool, each with its own seed spawned
from one master seed.

Example usage:
    python benchmark.py --budgets 0 32 128 1024 --samples 50 --output uno.csv
    python benchmark.py --budgets 0 64 --samples 20 --plot uno.png --hidden
"""
import os
import random
import logging
import argparse
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from tqdm import tqdm

from mcts_engine.games.uno import Uno, GameState
from mcts_engine.mcts.config import MCTSConfig
from mcts_engine.mcts.search import MCTS


def simulate_uno_game(budgets: Tuple[int, int], seed: int, hidden: bool = False) -> int:
    """
    Play one two-player Uno game.

    Args:
        budgets: Iteration budget of player 0 and player 1 (0 = random mover)
        seed: Seed for dealing, drawing and searching
        hidden: Whether each player's search hides the opponent's hand

    Returns:
        1 if player 0 wins, 0 otherwise
    """
    rng = random.Random(seed)
    game = Uno.standard(num_players=2, rng=rng)

    while True:
        player = game.player_turn
        budget = budgets[player]
        if budget > 0:
            engine = MCTS(player, MCTSConfig(iterations=budget), rng=rng)
            move = engine.decide(game.observed_by(player) if hidden else game)
        else:
            move = rng.choice(game.possible_moves())

        if game.place_move(move) is GameState.WIN:
            return 1 if game.player_turn == 0 else 0


def spawn_seeds(seed: Optional[int], count: int) -> List[int]:
    """Independent integer seeds for count games."""
    sequence = np.random.SeedSequence(seed)
    return [int(child.generate_state(1)[0]) for child in sequence.spawn(count)]


def run_benchmark(
    budgets: Sequence[int],
    samples: int,
    seed: Optional[int] = None,
    workers: int = 1,
    hidden: bool = False,
    progress: bool = True
) -> pd.DataFrame:
    """
    Play every pair of budgets against each other.

    Args:
        budgets: Iteration budgets to compare
        samples: Games per pair
        seed: Master seed (None = fresh entropy)
        workers: Worker processes (1 = run in this process)
        hidden: Whether searches hide the opponent's hand
        progress: Whether to show a progress bar

    Returns:
        DataFrame of player 0 wins, indexed by player 0 budget with one
        column per player 1 budget
    """
    if samples <= 0:
        raise ValueError("samples must be positive")

    tasks = [(i, j) for i in range(len(budgets)) for j in range(len(budgets)) for _ in range(samples)]
    seeds = spawn_seeds(seed, len(tasks))
    wins = np.zeros((len(budgets), len(budgets)), dtype=int)

    pbar = tqdm(total=len(tasks), desc="Benchmark", disable=not progress)
    if workers > 1:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(simulate_uno_game, (budgets[i], budgets[j]), task_seed, hidden): (i, j)
                for (i, j), task_seed in zip(tasks, seeds)
            }
            for future in as_completed(futures):
                i, j = futures[future]
                wins[i, j] += future.result()
                pbar.update(1)
    else:
        for (i, j), task_seed in zip(tasks, seeds):
            wins[i, j] += simulate_uno_game((budgets[i], budgets[j]), task_seed, hidden)
            pbar.update(1)
    pbar.close()

    results = pd.DataFrame(wins, index=list(budgets), columns=list(budgets))
    results.index.name = "player0_budget"
    results.columns.name = "player1_budget"
    return results


def plot_results(results: pd.DataFrame, samples: int, path: str) -> None:
    """
    Save a heatmap of player 0 win rates.

    Args:
        results: Output of run_benchmark()
        samples: Games per pair
        path: Image file to write
    """
    rates = results.to_numpy() / samples

    plt.figure(figsize=(8, 6))
    plt.imshow(rates, cmap="viridis", vmin=0.0, vmax=1.0)
    plt.colorbar(label="Player 0 win rate")
    plt.xticks(range(len(results.columns)), results.columns)
    plt.yticks(range(len(results.index)), results.index)
    plt.xlabel("Player 1 iterations")
    plt.ylabel("Player 0 iterations")
    plt.title("Uno win rate by MCTS budget")
    for i in range(rates.shape[0]):
        for j in range(rates.shape[1]):
            plt.text(j, i, f"{rates[i, j]:.2f}", ha="center", va="center", color="white")
    plt.savefig(path)
    plt.close()


def parse_args(argv=None):
    """Parse command-line arguments for the benchmark."""
    parser = argparse.ArgumentParser(description="Benchmark MCTS budgets against each other on Uno")

    parser.add_argument("--budgets", type=int, nargs="+", default=[0, 32, 128, 1024],
                        help="Iteration budgets to compare (0 = random player)")
    parser.add_argument("--samples", type=int, default=50,
                        help="Games per pair of budgets")
    parser.add_argument("--seed", type=int, default=None,
                        help="Master random seed")
    parser.add_argument("--workers", type=int, default=os.cpu_count() or 1,
                        help="Number of worker processes")
    parser.add_argument("--hidden", action="store_true",
                        help="Hide the opponent's hand from each search")
    parser.add_argument("--output", type=str, default="uno.csv",
                        help="CSV file for the win matrix")
    parser.add_argument("--plot", type=str, default=None,
                        help="Optional PNG heatmap of win rates")
    parser.add_argument("--verbose", action="store_true",
                        help="Log every search decision")

    return parser.parse_args(argv)


def main(argv=None):
    """Main function."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    results = run_benchmark(args.budgets, args.samples, seed=args.seed,
                            workers=args.workers, hidden=args.hidden)
    print(results)

    results.to_csv(args.output)
    print(f"Wrote results to {args.output}")

    if args.plot:
        plot_results(results, args.samples, args.plot)
        print(f"Wrote heatmap to {args.plot}")


if __name__ == "__main__":
    main()
