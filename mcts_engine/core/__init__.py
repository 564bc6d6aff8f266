"""
MCTS Engine Core Package

This package contains the pieces every game and the search engine share:
- The Game contract and the MoveScore outcome tag
- Error types
- Constants

All core components can be imported directly from this package.
"""

# Game contract
from mcts_engine.core.game import (
    Game, MoveScore, ScoreKind, describe_move
)

# Errors
from mcts_engine.core.exceptions import (
    MCTSError, GameError, InvalidMove, GameAlreadyEnded, InvalidPosition,
    DeckExhausted, NoLegalMoves, TreeError, InvalidNodeIndex
)

# Constants
from mcts_engine.core.constants import (
    DEFAULT_MCTS_ITERATIONS, DEFAULT_MCTS_EXPLORATION, ROOT_INDEX
)

__all__ = [
    # Game contract
    'Game', 'MoveScore', 'ScoreKind', 'describe_move',

    # Errors
    'MCTSError', 'GameError', 'InvalidMove', 'GameAlreadyEnded',
    'InvalidPosition', 'DeckExhausted', 'NoLegalMoves',
    'TreeError', 'InvalidNodeIndex',

    # Constants
    'DEFAULT_MCTS_ITERATIONS', 'DEFAULT_MCTS_EXPLORATION', 'ROOT_INDEX',
]
