"""
MCTS Engine - Monte Carlo Tree Search for turn-based games.

This package provides a game-agnostic MCTS engine, including support for games
of imperfect information, along with tic-tac-toe and Uno implementations to
search over.
"""

__version__ = "0.1.0"
__author__ = "MCTS Engine Team"

# Make key components available at package level
from mcts_engine.core.game import Game, MoveScore
from mcts_engine.mcts.search import MCTS
from mcts_engine.mcts.config import MCTSConfig
from mcts_engine.mcts.agent import MCTSAgent

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))
