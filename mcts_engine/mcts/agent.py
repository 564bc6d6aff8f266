"""
Monte Carlo Tree Search Agent.

This module provides the MCTSAgent class, a ready-to-use player that picks
moves for any Game with a fresh MCTS engine per decision, and keeps
statistics about its searches.
"""
from dataclasses import replace
from typing import Dict, List, Optional, Tuple, Any, Callable
import time
import random
import json

from mcts_engine.core.constants import DEFAULT_MCTS_ITERATIONS, DEFAULT_MCTS_EXPLORATION
from mcts_engine.core.game import Game, describe_move
from mcts_engine.mcts.config import MCTSConfig
from mcts_engine.mcts.search import (
    MCTS, count_nodes, get_action_statistics, get_principal_variation
)


class MCTSAgent:
    """
    Monte Carlo Tree Search agent.

    The agent owns one random source, seeded from config.seed, and hands it
    to every engine it creates, so a seeded agent plays reproducibly.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        verbose: bool = False
    ):
        """
        Initialize an MCTS agent.

        Args:
            config: MCTS configuration parameters
            name: Name of the agent
            verbose: Whether to print detailed information after each search
        """
        self.config = config or MCTSConfig()
        self.name = name
        self.verbose = verbose
        self.rng = random.Random(self.config.seed)

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all moves and their statistics
        self.action_history: List[Tuple[Any, Dict[str, Any]]] = []

        # Engine of the last search
        self.last_search: Optional[MCTS] = None

    def select_action(self, game: Game, player: Any) -> Any:
        """
        Select a move using Monte Carlo Tree Search.

        Args:
            game: Current position; not mutated
            player: Player making the decision

        Returns:
            Selected move
        """
        valid_moves = game.possible_moves()
        if not valid_moves:
            raise ValueError(f"No legal moves for player {player}")

        # If there's only one valid move, no need to search
        if len(valid_moves) == 1:
            self.last_stats = {"iterations": 0, "forced_move": True}
            self.last_search = None
            return valid_moves[0]

        start_time = time.time()
        engine = MCTS(player, config=self.config, rng=self.rng)
        move = engine.decide(game)
        elapsed = time.time() - start_time

        stats: Dict[str, Any] = {
            "iterations": engine.iterations_run,
            "time_elapsed": elapsed,
            "iterations_per_second": engine.iterations_run / max(0.001, elapsed),
            "node_count": count_nodes(engine.tree),
            "max_depth": engine.tree.depth(),
            "action_visits": {},
            "action_rewards": {},
        }
        for move_str, move_stats in get_action_statistics(engine).items():
            stats["action_visits"][move_str] = move_stats["visits"]
            stats["action_rewards"][move_str] = move_stats["value"]

        self.last_stats = stats
        self.last_search = engine
        self.action_history.append((move, stats))

        if self.verbose:
            self._print_search_info(move, stats)

        return move

    def _print_search_info(self, move: Any, stats: Dict[str, Any]) -> None:
        print(f"\n{self.name} selected: {describe_move(move)}")
        print(f"Iterations: {stats['iterations']}")
        print(f"Time: {stats['time_elapsed']:.3f}s ({stats['iterations_per_second']:.1f} it/s)")
        print(f"Nodes: {stats['node_count']}")
        print(f"Max depth: {stats['max_depth']}")

        # Print top moves by visit count
        print("\nTop moves:")
        moves_by_visits = sorted(
            stats['action_visits'].items(),
            key=lambda x: x[1],
            reverse=True
        )
        for i, (move_str, visits) in enumerate(moves_by_visits[:5]):
            value = stats['action_rewards'].get(move_str, 0.0)
            print(f"{i+1}. {move_str} - {visits} visits, {value:.3f} value")

    def get_action_callback(self) -> Callable[[Game, Any], Any]:
        """
        Get a callback function for selecting moves.

        Returns:
            Callback taking a game and a player and returning a move
        """
        return lambda game, player: self.select_action(game, player)

    def get_last_statistics(self) -> Dict[str, Any]:
        """Get statistics from the most recent search."""
        return self.last_stats

    def get_principal_variation(self) -> List[Tuple[Any, float]]:
        """
        Get the principal variation (most visited path) from the last search.

        Returns:
            List of (move, value) pairs, empty if the last move was forced
        """
        if self.last_search is None:
            return []

        return get_principal_variation(self.last_search.tree)

    def get_action_statistics(self) -> Dict[str, Dict[str, float]]:
        if self.last_search is None:
            return {}

        return get_action_statistics(self.last_search)

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.action_history = []
        self.last_search = None

    def save_statistics(self, filename: str) -> None:
        """
        Write every searched decision to a JSON file.

        Per-move breakdowns are left out; forced moves were never searched
        and do not appear.

        Args:
            filename: Path of the JSON file
        """
        decisions = [
            dict({"move": describe_move(move)},
                 **{key: value for key, value in stats.items() if not isinstance(value, dict)})
            for move, stats in self.action_history
        ]

        with open(filename, 'w') as f:
            json.dump({
                "agent_name": self.name,
                "config": self.config.to_dict(),
                "decisions": decisions,
                "total_actions": len(decisions),
            }, f, indent=2)

    def __str__(self) -> str:
        return f"{self.name} (MCTS, {self.config.iterations} iterations)"


class MCTSAgentFactory:
    """Named agents at the preset search budgets of MCTSConfig."""

    @staticmethod
    def create_fast(seed: Optional[int] = None) -> MCTSAgent:
        return MCTSAgent(replace(MCTSConfig.fast(), seed=seed), name="Fast MCTS")

    @staticmethod
    def create_standard(seed: Optional[int] = None) -> MCTSAgent:
        return MCTSAgent(replace(MCTSConfig.default(), seed=seed), name="Standard MCTS")

    @staticmethod
    def create_strong(seed: Optional[int] = None) -> MCTSAgent:
        return MCTSAgent(replace(MCTSConfig.deep(), seed=seed), name="Strong MCTS")

    @staticmethod
    def create_custom(
        iterations: int = DEFAULT_MCTS_ITERATIONS,
        time_limit: Optional[float] = None,
        exploration_weight: float = DEFAULT_MCTS_EXPLORATION,
        seed: Optional[int] = None,
        name: str = "Custom MCTS"
    ) -> MCTSAgent:
        """
        Create an agent with its own search budget.

        Args:
            iterations: Iterations per decision
            time_limit: Optional cap in seconds per decision
            exploration_weight: UCT exploration constant
            seed: Seed for the agent's random source

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(iterations=iterations, exploration_weight=exploration_weight,
                            time_limit=time_limit, seed=seed)
        return MCTSAgent(config, name=name)
