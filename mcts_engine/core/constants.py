"""
Constants shared by the search engine and the bundled games.

This module defines search defaults, the tic-tac-toe board geometry and the
makeup of the Uno deck.
"""
import math
from typing import Final, List, Tuple


# Search defaults
DEFAULT_MCTS_ITERATIONS: Final[int] = 1000
DEFAULT_MCTS_EXPLORATION: Final[float] = math.sqrt(2)  # UCT1 constant
ROOT_INDEX: Final[int] = 0


# Tic-tac-toe
BOARD_SIZE: Final[int] = 3
BOARD_CELLS: Final[int] = BOARD_SIZE * BOARD_SIZE

# Every line that wins the game, diagonals first
WINNING_LINES: Final[List[Tuple[int, int, int]]] = [
    (0, 4, 8), (2, 4, 6),
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
]

TICTACTOE_WIN_SCORE: Final[float] = 1.0
TICTACTOE_LOSS_SCORE: Final[float] = -3.0
TICTACTOE_DRAW_SCORE: Final[float] = 0.5


# Uno
UNO_HAND_SIZE: Final[int] = 7
UNO_MIN_PLAYERS: Final[int] = 2
UNO_MAX_PLAYERS: Final[int] = 10

# Copies of each card per colour in the standard deck
UNO_ZERO_COPIES: Final[int] = 1
UNO_NUMBER_COPIES: Final[int] = 2  # 1 through 9
UNO_ACTION_COPIES: Final[int] = 2  # Draw-2, Reverse, Skip
UNO_WILD_COPIES: Final[int] = 2    # per wild kind, not per colour
UNO_DRAW_PENALTY: Final[int] = 2
UNO_WILD_DRAW_PENALTY: Final[int] = 4

UNO_WIN_SCORE: Final[float] = 1.0
UNO_LOSS_SCORE: Final[float] = 0.0
