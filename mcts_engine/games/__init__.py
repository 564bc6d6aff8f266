"""
Games bundled with the engine.

- TicTacToe: perfect information grid game
- Uno: imperfect information card game
"""

from mcts_engine.games.tictactoe import TicTacToe, Mark, WinState
from mcts_engine.games.uno import (
    Uno, UnoMove, Card, CardKind, Colour, GameState, standard_deck
)

__all__ = [
    'TicTacToe', 'Mark', 'WinState',
    'Uno', 'UnoMove', 'Card', 'CardKind', 'Colour', 'GameState', 'standard_deck',
]
