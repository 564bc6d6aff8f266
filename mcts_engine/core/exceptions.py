"""
Error types raised by games and by the search tree.

Game contract failures derive from GameError; arena lookups that fall outside
the tree raise TreeError subclasses. Neither is retried by the engine: a game
that rejects a move the engine took from its own possible_moves() is broken,
and the decision is aborted.
"""


class MCTSError(Exception):
    """Base class for all errors raised by this package."""


class GameError(MCTSError):
    """A game rejected an operation."""


class InvalidMove(GameError):
    """The move is not legal in the current position."""

    def __init__(self, move, legal_moves=None):
        self.move = move
        self.legal_moves = legal_moves
        message = f"invalid move: {move!r}"
        if legal_moves is not None:
            message += f", legal moves: {list(legal_moves)!r}"
        super().__init__(message)


class GameAlreadyEnded(GameError):
    """A move was placed after the game finished."""

    def __init__(self, message: str = "game has already ended"):
        super().__init__(message)


class InvalidPosition(InvalidMove):
    """A move refers to a board position that does not exist."""

    def __init__(self, move, legal_moves=None):
        super().__init__(move, legal_moves)
        self.args = (f"invalid position provided: {move!r}",)


class DeckExhausted(GameError):
    """Not enough cards left to deal, even after reshuffling the discard pile."""


class NoLegalMoves(MCTSError):
    """A non-terminal position offered no moves to expand or roll out."""


class TreeError(MCTSError):
    """Base class for search tree errors."""


class InvalidNodeIndex(TreeError, IndexError):
    """A node index does not refer to a node in the tree."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"no node with index {index}")
