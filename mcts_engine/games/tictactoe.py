"""
Tic-tac-toe, a perfect information game for the MCTS engine.

Cells are numbered 0-8 row by row. Mark A moves first. A move that completes
any line wins, even when it fills the last cell; completing two lines at once
is still a single win.
"""
from __future__ import annotations
from enum import Enum, auto
from typing import List, Optional
import random

from mcts_engine.core.constants import (
    BOARD_CELLS, BOARD_SIZE, WINNING_LINES,
    TICTACTOE_WIN_SCORE, TICTACTOE_LOSS_SCORE, TICTACTOE_DRAW_SCORE
)
from mcts_engine.core.exceptions import GameAlreadyEnded, InvalidMove, InvalidPosition
from mcts_engine.core.game import Game, MoveScore


class Mark(Enum):
    """The two players."""
    A = "A"
    B = "B"

    @property
    def other(self) -> Mark:
        return Mark.B if self is Mark.A else Mark.A

    def __str__(self) -> str:
        return self.value


class WinState(Enum):
    """Outcome of placing a mark."""
    WIN = auto()
    DRAW = auto()
    CONTINUE = auto()


class TicTacToe(Game[int, WinState, Mark]):
    """3x3 tic-tac-toe."""
    IS_PERFECT_INFORMATION = True

    def __init__(self):
        self.board: List[Optional[Mark]] = [None] * BOARD_CELLS
        self.player_turn = Mark.A
        self.game_ended = False
        self.result = WinState.CONTINUE

    @property
    def winner(self) -> Optional[Mark]:
        """The winning mark, or None while playing or after a draw."""
        if self.result is WinState.WIN:
            return self.player_turn
        return None

    def _has_line(self, mark: Mark) -> bool:
        return any(all(self.board[cell] is mark for cell in line) for line in WINNING_LINES)

    def end_state(self) -> WinState:
        """
        Evaluate the board after the current player's mark was placed.

        Returns:
            WIN if the player to move owns a full line, DRAW on a full board,
            CONTINUE otherwise
        """
        if self._has_line(self.player_turn):
            return WinState.WIN
        if all(cell is not None for cell in self.board):
            return WinState.DRAW
        return WinState.CONTINUE

    def possible_moves(self) -> List[int]:
        if self.game_ended:
            return []
        return [i for i, cell in enumerate(self.board) if cell is None]

    def place_move(self, move: int) -> WinState:
        if self.game_ended:
            raise GameAlreadyEnded()

        if not isinstance(move, int) or not 0 <= move < BOARD_CELLS:
            raise InvalidPosition(move, self.possible_moves())

        if self.board[move] is not None:
            raise InvalidMove(move, self.possible_moves())

        self.board[move] = self.player_turn
        state = self.end_state()
        if state is WinState.CONTINUE:
            self.player_turn = self.player_turn.other
        else:
            # The turn stays with the player who ended the game
            self.game_ended = True
            self.result = state
        return state

    def score_state(self, state: WinState, player: Mark) -> MoveScore:
        if state is WinState.WIN:
            if self.player_turn is player:
                return MoveScore.terminal(TICTACTOE_WIN_SCORE)
            return MoveScore.terminal(TICTACTOE_LOSS_SCORE)
        if state is WinState.DRAW:
            return MoveScore.terminal(TICTACTOE_DRAW_SCORE)
        return MoveScore.non_terminal(0.0)

    def clone(self, rng: Optional[random.Random] = None) -> TicTacToe:
        game = TicTacToe()
        game.board = list(self.board)
        game.player_turn = self.player_turn
        game.game_ended = self.game_ended
        game.result = self.result
        return game

    def render(self) -> str:
        rows = []
        for row in range(BOARD_SIZE):
            cells = self.board[row * BOARD_SIZE:(row + 1) * BOARD_SIZE]
            rows.append("".join("-" if cell is None else str(cell) for cell in cells))
        return "\n".join(rows)

    def __str__(self) -> str:
        return self.render()
