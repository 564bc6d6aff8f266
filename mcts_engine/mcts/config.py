"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the MCTS engine:
the iteration budget, the UCT exploration constant, and optional limits
on decision time and rollout length.
"""
from dataclasses import dataclass, fields
from typing import Optional, ClassVar

from mcts_engine.core.constants import DEFAULT_MCTS_ITERATIONS, DEFAULT_MCTS_EXPLORATION


@dataclass
class MCTSConfig:
    """
    Search budget and UCT tuning for MCTS decisions.

    One config can be shared by any number of engines; invalid values
    raise ValueError on construction.
    """
    # Search budget
    iterations: int = DEFAULT_MCTS_ITERATIONS
    """Iterations per decision"""

    exploration_weight: float = DEFAULT_MCTS_EXPLORATION
    """UCT exploration constant (default is sqrt(2))"""

    time_limit: Optional[float] = None
    """Optional wall-clock cap on one decision in seconds (None = budget only)"""

    max_rollout_depth: Optional[int] = None
    """Optional cap on moves per rollout (None = play until the game ends)"""

    # Randomness
    seed: Optional[int] = None
    """Seed for the random source used by agents (None = unseeded)"""

    # Constants
    INFINITE_VALUE: ClassVar[float] = float('inf')
    """UCT priority of a child that has never been visited"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.iterations <= 0:
            raise ValueError("iterations must be positive")

        if self.exploration_weight < 0:
            raise ValueError("exploration_weight must not be negative")

        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit must be positive or None")

        if self.max_rollout_depth is not None and self.max_rollout_depth <= 0:
            raise ValueError("max_rollout_depth must be positive or None")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """Small budget for quick games and tests."""
        return cls(iterations=128)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """Large budget for strong play."""
        return cls(iterations=4096)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Build a configuration from a mapping such as a saved to_dict().

        Keys that are not configuration fields are ignored.
        """
        names = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in config_dict.items() if key in names})

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = ", ".join(f"{name}={value}" for name, value in self.to_dict().items())
        return f"MCTSConfig({params})"
