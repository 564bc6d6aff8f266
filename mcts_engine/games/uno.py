"""
Uno, an imperfect information card game for the MCTS engine.

Every card drawn is picked at random from the deck, weighted by how many
copies remain, so two clones of the same position soon hold different hands
and offer different moves at the same tree node. When an observer is given,
cloning also resamples every other player's hand from the cards that player
cannot see, so each clone is a fresh guess at the hidden state.

Rules:
- Number cards match the current colour or the number on top of the pile
- Draw-2, Reverse and Skip match the current colour
- Wild and Wild-Draw-4 can always be played and declare a colour
- Action and wild cards cannot be played as the last card
- A player with nothing playable must pick up a card instead
- Draw-2 and Wild-Draw-4 add to a penalty the next player either stacks with
  another drawing card or pays before their move takes effect
- Emptying one's hand wins
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional
import copy
import random

from mcts_engine.core.constants import (
    UNO_HAND_SIZE, UNO_MIN_PLAYERS, UNO_MAX_PLAYERS,
    UNO_ZERO_COPIES, UNO_NUMBER_COPIES, UNO_ACTION_COPIES, UNO_WILD_COPIES,
    UNO_DRAW_PENALTY, UNO_WILD_DRAW_PENALTY, UNO_WIN_SCORE, UNO_LOSS_SCORE
)
from mcts_engine.core.exceptions import DeckExhausted, GameAlreadyEnded, InvalidMove
from mcts_engine.core.game import Game, MoveScore


class Colour(Enum):
    """Card colours."""
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"

    def __str__(self) -> str:
        return self.value


class CardKind(Enum):
    """Kinds of Uno cards."""
    NUMBER = auto()
    DRAW = auto()
    REVERSE = auto()
    SKIP = auto()
    WILD = auto()


@dataclass(frozen=True)
class Card:
    """
    A single Uno card.

    value is the face number of a number card, the penalty of a Draw-2 or
    Wild-Draw-4, and 0 otherwise. Wild cards have no colour.
    """
    kind: CardKind
    colour: Optional[Colour] = None
    value: int = 0

    @classmethod
    def number(cls, colour: Colour, value: int) -> Card:
        return cls(CardKind.NUMBER, colour, value)

    @classmethod
    def draw(cls, colour: Colour) -> Card:
        return cls(CardKind.DRAW, colour, UNO_DRAW_PENALTY)

    @classmethod
    def reverse(cls, colour: Colour) -> Card:
        return cls(CardKind.REVERSE, colour)

    @classmethod
    def skip(cls, colour: Colour) -> Card:
        return cls(CardKind.SKIP, colour)

    @classmethod
    def wild(cls, value: int = 0) -> Card:
        return cls(CardKind.WILD, None, value)

    @property
    def is_penalty(self) -> bool:
        """Whether playing this card makes the next player draw."""
        return self.kind in (CardKind.DRAW, CardKind.WILD) and self.value > 0

    def __str__(self) -> str:
        if self.kind is CardKind.NUMBER:
            return f"{self.colour}-{self.value}"
        if self.kind is CardKind.WILD:
            return "wild-draw4" if self.value else "wild"
        return f"{self.colour}-{self.kind.name.lower()}"


@dataclass(frozen=True)
class UnoMove:
    """
    A move: play a card (declaring a colour for wilds) or pick up a card.

    card is None for picking up.
    """
    card: Optional[Card] = None
    colour: Optional[Colour] = None

    @classmethod
    def play(cls, card: Card, colour: Optional[Colour] = None) -> UnoMove:
        return cls(card, colour if card.kind is CardKind.WILD else card.colour)

    @classmethod
    def pick_up(cls) -> UnoMove:
        return cls(None, None)

    @property
    def is_pick_up(self) -> bool:
        return self.card is None

    def __str__(self) -> str:
        if self.card is None:
            return "draw"
        if self.card.kind is CardKind.WILD:
            return f"play-{self.card}-{self.colour}"
        return f"play-{self.card}"


class GameState(Enum):
    """Outcome of a move."""
    WIN = auto()
    CONTINUE = auto()


def standard_deck() -> Dict[Card, int]:
    """
    Build the standard deck as card counts.

    Returns:
        Dictionary mapping each card to its number of copies
    """
    deck: Dict[Card, int] = {}
    for colour in Colour:
        deck[Card.number(colour, 0)] = UNO_ZERO_COPIES
        for value in range(1, 10):
            deck[Card.number(colour, value)] = UNO_NUMBER_COPIES
        deck[Card.draw(colour)] = UNO_ACTION_COPIES
        deck[Card.reverse(colour)] = UNO_ACTION_COPIES
        deck[Card.skip(colour)] = UNO_ACTION_COPIES
    deck[Card.wild(0)] = UNO_WILD_COPIES
    deck[Card.wild(UNO_WILD_DRAW_PENALTY)] = UNO_WILD_COPIES
    return deck


def _add_cards(counts: Dict[Card, int], card: Card, n: int = 1) -> None:
    counts[card] = counts.get(card, 0) + n


def _remove_card(counts: Dict[Card, int], card: Card) -> None:
    remaining = counts.get(card, 0) - 1
    if remaining < 0:
        raise ValueError(f"card not present: {card}")
    if remaining == 0:
        del counts[card]
    else:
        counts[card] = remaining


def _weighted_pick(counts: Dict[Card, int], rng: random.Random, number_only: bool = False) -> Optional[Card]:
    """Pick a card at random weighted by its count, or None if none qualifies."""
    cards = [c for c, n in counts.items()
             if n > 0 and (not number_only or c.kind is CardKind.NUMBER)]
    if not cards:
        return None
    return rng.choices(cards, weights=[counts[c] for c in cards])[0]


class Uno(Game[UnoMove, GameState, int]):
    """
    Uno for two or more players.

    Players are numbered from 0. Player 0 moves first.
    """
    IS_PERFECT_INFORMATION = False

    def __init__(
        self,
        deck: Optional[Dict[Card, int]] = None,
        num_players: int = 2,
        hand_size: int = UNO_HAND_SIZE,
        rng: Optional[random.Random] = None,
        observer: Optional[int] = None,
    ):
        """
        Deal a new game.

        Args:
            deck: Card counts to deal from (the standard deck when omitted)
            num_players: Number of players
            hand_size: Cards dealt to each player
            rng: Random source for every draw (unseeded when omitted)
            observer: Player whose view clones keep; other hands are
                      resampled on every clone (None = no resampling)
        """
        if not UNO_MIN_PLAYERS <= num_players <= UNO_MAX_PLAYERS:
            raise ValueError(f"Number of players must be between {UNO_MIN_PLAYERS} and {UNO_MAX_PLAYERS}")
        if observer is not None and not 0 <= observer < num_players:
            raise ValueError(f"observer must be a player between 0 and {num_players - 1}")

        self.rng = rng if rng is not None else random.Random()
        self.deck: Dict[Card, int] = dict(deck) if deck is not None else standard_deck()
        self.hands: List[Dict[Card, int]] = [{} for _ in range(num_players)]
        self.discard: List[Card] = []
        self.player_turn = 0
        self.reversed = False
        self.pending_draw = 0
        self.depth = 0
        self.game_ended = False
        self.observer = observer

        for player in range(num_players):
            self.draw_cards(player, hand_size)

        first_card = self.draw_hand(1, number_only=True)
        self.discard = [first_card[0]]
        self.current_colour: Colour = first_card[0].colour

    @classmethod
    def standard(cls, num_players: int = 2, rng: Optional[random.Random] = None,
                 observer: Optional[int] = None) -> Uno:
        """Deal a game from the standard deck with hands of seven."""
        return cls(standard_deck(), num_players, UNO_HAND_SIZE, rng=rng, observer=observer)

    @classmethod
    def from_position(
        cls,
        hands: List[List[Card]],
        top_card: Card,
        deck: Optional[Dict[Card, int]] = None,
        current_colour: Optional[Colour] = None,
        player_turn: int = 0,
        rng: Optional[random.Random] = None,
        observer: Optional[int] = None,
    ) -> Uno:
        """
        Set up a game in a given position without dealing.

        Args:
            hands: Cards held by each player
            top_card: Card on top of the discard pile
            deck: Remaining deck (empty when omitted)
            current_colour: Colour in play (the top card's colour when omitted)
            player_turn: Player to move
            rng: Random source for every draw
            observer: See __init__

        Returns:
            Uno game
        """
        game = cls.__new__(cls)
        game.rng = rng if rng is not None else random.Random()
        game.deck = dict(deck) if deck is not None else {}
        game.hands = []
        for cards in hands:
            hand: Dict[Card, int] = {}
            for card in cards:
                _add_cards(hand, card)
            game.hands.append(hand)
        game.discard = [top_card]
        game.current_colour = current_colour or top_card.colour
        if game.current_colour is None:
            raise ValueError("current_colour is required when the top card is wild")
        game.player_turn = player_turn
        game.reversed = False
        game.pending_draw = 0
        game.depth = 0
        game.game_ended = False
        game.observer = observer
        return game

    @property
    def num_players(self) -> int:
        return len(self.hands)

    @property
    def top_card(self) -> Card:
        return self.discard[-1]

    @property
    def winner(self) -> Optional[int]:
        return self.player_turn if self.game_ended else None

    def hand_size(self, player: int) -> int:
        return sum(self.hands[player].values())

    def total_cards(self) -> int:
        """Cards in the deck, in hands and on the discard pile."""
        return (sum(self.deck.values())
                + sum(self.hand_size(p) for p in range(self.num_players))
                + len(self.discard))

    def shift_discard_into_deck(self) -> None:
        """Return every card below the top of the discard pile to the deck."""
        for card in self.discard[:-1]:
            _add_cards(self.deck, card)
        self.discard = self.discard[-1:]

    def draw_hand(self, count: int, number_only: bool = False) -> List[Card]:
        """
        Take cards out of the deck at random.

        Args:
            count: Number of cards to take
            number_only: Only take number cards

        Returns:
            Drawn cards

        Raises:
            DeckExhausted: If the deck runs out even after reshuffling; the
                           cards taken so far go back to the deck
        """
        drawn = []
        reshuffled = False
        while len(drawn) < count:
            card = _weighted_pick(self.deck, self.rng, number_only)
            if card is None:
                if reshuffled:
                    for drawn_card in drawn:
                        _add_cards(self.deck, drawn_card)
                    raise DeckExhausted(f"not enough cards to deal: require {count}, drew {len(drawn)}")
                self.shift_discard_into_deck()
                reshuffled = True
                continue
            _remove_card(self.deck, card)
            drawn.append(card)
        return drawn

    def draw_cards(self, player: int, count: int) -> None:
        for card in self.draw_hand(count):
            _add_cards(self.hands[player], card)

    def determinize(self, observer: int) -> None:
        """
        Resample every hand but the observer's from the cards it cannot see.

        Hand sizes are kept; the deck becomes whatever is left over.

        Args:
            observer: Player whose hand stays as it is
        """
        pool = dict(self.deck)
        for player, hand in enumerate(self.hands):
            if player != observer:
                for card, n in hand.items():
                    _add_cards(pool, card, n)

        for player in range(self.num_players):
            if player == observer:
                continue
            size = self.hand_size(player)
            hand: Dict[Card, int] = {}
            for _ in range(size):
                card = _weighted_pick(pool, self.rng)
                _remove_card(pool, card)
                _add_cards(hand, card)
            self.hands[player] = hand

        self.deck = pool

    def _copy(self, rng: random.Random) -> Uno:
        game = copy.copy(self)
        game.deck = dict(self.deck)
        game.hands = [dict(hand) for hand in self.hands]
        game.discard = list(self.discard)
        game.rng = rng
        return game

    def clone(self, rng: Optional[random.Random] = None) -> Uno:
        """
        Copy the game, resampling hidden hands when an observer is set.

        Args:
            rng: Source the copy is seeded from; the game's own generator is
                 advanced instead when omitted

        Returns:
            Independent copy with its own generator
        """
        source = rng if rng is not None else self.rng
        game = self._copy(random.Random(source.getrandbits(64)))
        if game.observer is not None:
            game.determinize(game.observer)
        return game

    def observed_by(self, player: Optional[int]) -> Uno:
        """
        Copy of the game whose clones hide every hand but one player's.

        Args:
            player: Player whose hand stays visible (None = no hidden hands)

        Returns:
            Copy of the game with the observer set; hands are not resampled
            until it is cloned
        """
        game = self._copy(copy.deepcopy(self.rng))
        game.observer = player
        return game

    def possible_moves(self) -> List[UnoMove]:
        if self.game_ended:
            return []

        hand = self.hands[self.player_turn]
        cards_in_hand = self.hand_size(self.player_turn)
        if cards_in_hand == 0:
            return []

        is_last_card = cards_in_hand == 1
        top = self.top_card

        moves = []
        for card, n in hand.items():
            if n <= 0:
                continue
            if card.kind is CardKind.NUMBER:
                # Same colour or same number
                if card.colour is self.current_colour or (
                        top.kind is CardKind.NUMBER and card.value == top.value):
                    moves.append(UnoMove.play(card))
            elif is_last_card:
                continue
            elif card.kind is CardKind.WILD:
                for colour in Colour:
                    moves.append(UnoMove.play(card, colour))
            elif card.colour is self.current_colour:
                moves.append(UnoMove.play(card))

        # Nothing playable: pick up instead
        if not moves:
            moves.append(UnoMove.pick_up())
        return moves

    def place_move(self, move: UnoMove) -> GameState:
        if self.game_ended:
            raise GameAlreadyEnded()

        legal_moves = self.possible_moves()
        if move not in legal_moves:
            raise InvalidMove(move, legal_moves)

        card = move.card
        paid_penalty = False
        if self.pending_draw > 0 and not (card is not None and card.is_penalty):
            self.draw_cards(self.player_turn, self.pending_draw)
            self.pending_draw = 0
            paid_penalty = True

        next_turn_scale = 1
        if card is None:
            if not paid_penalty:
                self.draw_cards(self.player_turn, 1)
        else:
            _remove_card(self.hands[self.player_turn], card)
            self.discard.append(card)
            self.current_colour = move.colour
            if card.kind is CardKind.REVERSE:
                self.reversed = not self.reversed
            elif card.kind is CardKind.SKIP:
                next_turn_scale = 2
            if card.is_penalty:
                self.pending_draw += card.value

        self.depth += 1

        if self.hand_size(self.player_turn) == 0:
            self.game_ended = True
            return GameState.WIN

        self.next_player(next_turn_scale)
        return GameState.CONTINUE

    def next_player(self, scale: int = 1) -> None:
        step = -scale if self.reversed else scale
        self.player_turn = (self.player_turn + step) % self.num_players

    def score_state(self, state: GameState, player: int) -> MoveScore:
        if state is GameState.WIN:
            return MoveScore.terminal(UNO_WIN_SCORE if self.player_turn == player else UNO_LOSS_SCORE)
        return MoveScore.non_terminal(0.0)

    def __str__(self) -> str:
        hand = sorted(str(card) for card, n in self.hands[self.player_turn].items() for _ in range(n))
        moves = ", ".join(str(m) for m in self.possible_moves())
        return (f"player {self.player_turn}\n"
                f"top: {self.top_card} (colour {self.current_colour}, pending {self.pending_draw})\n"
                f"moves: {moves}\n"
                f"hand: {', '.join(hand)}")
