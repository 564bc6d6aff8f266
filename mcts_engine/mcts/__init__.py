"""
Monte Carlo Tree Search (MCTS) engine.

This package searches any game implementing mcts_engine.core.Game. Each
iteration of a decision works on a fresh clone of the position:

1. Selection: Starting from the root node, select child nodes using UCT until
   reaching a leaf or a move that ends the game.
2. Expansion: Add the legal moves of the leaf as children and step into one
   at random. For imperfect information games, a node whose children miss
   some of the moves legal in this clone is expanded with just those moves.
3. Simulation: From there, play random moves to the end of the game.
4. Backpropagation: Credit every node on the path with the rollout result
   plus the step scores below it.

After the iteration budget, the most visited child of the root is the move.
"""

from mcts_engine.mcts.node import MCTSNode, MCTSTree
from mcts_engine.mcts.agent import MCTSAgent, MCTSAgentFactory
from mcts_engine.mcts.search import (
    MCTS,
    uct_score,
    count_nodes,
    get_principal_variation,
    get_action_statistics
)
from mcts_engine.mcts.export import tree_to_graph, to_dot, write_dot
from mcts_engine.mcts.config import MCTSConfig

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    iterations=1000,          # Number of MCTS iterations per move
    time_limit=None,          # Optional time limit in seconds (None = no limit)
    max_rollout_depth=None,   # Play rollouts until the game ends
)

__all__ = [
    'MCTS',
    'MCTSAgent',
    'MCTSAgentFactory',
    'MCTSNode',
    'MCTSTree',
    'MCTSConfig',
    'uct_score',
    'count_nodes',
    'get_principal_variation',
    'get_action_statistics',
    'tree_to_graph',
    'to_dot',
    'write_dot',
    'DEFAULT_CONFIG'
]
