"""
The game contract consumed by the search engine.

Any turn-based game can be searched by implementing the Game abstract base
class. The engine only ever talks to a game through four things:

- possible_moves(): the legal moves for the player to move
- place_move(move): apply a move in place and return an outcome token
- score_state(token, player): turn an outcome token into a MoveScore
- clone(): an independent copy to run one search iteration on

plus the IS_PERFECT_INFORMATION class flag, which tells the engine whether the
legal moves at a tree position can change between clones.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, ClassVar, Generic, Hashable, List, Optional, TypeVar
import copy
import random


MoveT = TypeVar("MoveT", bound=Hashable)
StateT = TypeVar("StateT")
PlayerT = TypeVar("PlayerT")


class ScoreKind(Enum):
    """Kind of outcome produced by applying a move."""
    NONE = auto()  # Root placeholder, no move applied yet
    NON_TERMINAL = auto()
    TERMINAL = auto()


@dataclass(frozen=True)
class MoveScore:
    """
    Tri-state result of applying a move, seen from one player's perspective.

    TERMINAL carries the final value of the game, NON_TERMINAL an intermediate
    reward credited for that step. NONE only ever tags the root of a traversal.
    """
    kind: ScoreKind
    value: float = 0.0

    @classmethod
    def terminal(cls, value: float) -> MoveScore:
        return cls(ScoreKind.TERMINAL, float(value))

    @classmethod
    def non_terminal(cls, value: float = 0.0) -> MoveScore:
        return cls(ScoreKind.NON_TERMINAL, float(value))

    @classmethod
    def none(cls) -> MoveScore:
        return cls(ScoreKind.NONE, 0.0)

    @property
    def is_terminal(self) -> bool:
        return self.kind is ScoreKind.TERMINAL

    @property
    def score(self) -> float:
        """Numeric value used for backpropagation (0 for NONE)."""
        if self.kind is ScoreKind.NONE:
            return 0.0
        return self.value

    def __str__(self) -> str:
        if self.kind is ScoreKind.NONE:
            return "None"
        name = "Terminal" if self.is_terminal else "NonTerminal"
        return f"{name}({self.value:g})"


class Game(ABC, Generic[MoveT, StateT, PlayerT]):
    """
    Abstract base class for games playable by the MCTS engine.

    Moves must be hashable and comparable with ==, since the engine matches
    the moves of existing tree children against freshly computed legal moves.
    """
    IS_PERFECT_INFORMATION: ClassVar[bool] = True

    @abstractmethod
    def possible_moves(self) -> List[MoveT]:
        """
        Get the legal moves for the player to move.

        Returns:
            List of legal moves; empty only when there is no legal continuation
        """
        pass

    @abstractmethod
    def place_move(self, move: MoveT) -> StateT:
        """
        Apply a move for the player to move, mutating the game in place.

        Args:
            move: Move to apply

        Returns:
            Opaque outcome token, to be interpreted by score_state()

        Raises:
            InvalidMove: If the move is not currently legal
            GameAlreadyEnded: If the game has already finished
        """
        pass

    @abstractmethod
    def score_state(self, state: StateT, player: PlayerT) -> MoveScore:
        """
        Score an outcome token from the perspective of a player.

        Args:
            state: Outcome token returned by place_move()
            player: Player whose perspective the score is for

        Returns:
            MoveScore; a terminal score ends the simulation
        """
        pass

    def clone(self, rng: Optional[random.Random] = None) -> Game[MoveT, StateT, PlayerT]:
        """
        Create a fully independent copy of the game.

        Games that resample hidden state or draw at random take the copy's
        randomness from rng when one is given, leaving the original's
        random state untouched.

        Args:
            rng: Random source for the copy's hidden state (unused here)

        Returns:
            Deep copy of the game
        """
        return copy.deepcopy(self)

    def __str__(self) -> str:
        return f"{type(self).__name__}(moves={self.possible_moves()!r})"


def describe_move(move: Any) -> str:
    """Human readable form of a move, with the root placeholder shown as '-'."""
    return "-" if move is None else str(move)
