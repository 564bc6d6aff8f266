#!/usr/bin/env python
"""
Tests for the bundled games.

This script checks the rules of both games the engine is exercised on:
1. Tic-tac-toe: legal moves, wins (including double wins), draws and errors
2. Uno: deck makeup, legal moves, penalties, turn order, hidden hands
"""
import random
import unittest

from mcts_engine.core.exceptions import (
    DeckExhausted, GameAlreadyEnded, InvalidMove, InvalidPosition
)
from mcts_engine.core.game import MoveScore
from mcts_engine.games.tictactoe import Mark, TicTacToe, WinState
from mcts_engine.games.uno import (
    Card, CardKind, Colour, GameState, Uno, UnoMove, standard_deck
)


def play(game, moves):
    """Apply moves in order and return their outcomes."""
    return [game.place_move(move) for move in moves]


class TestTicTacToe(unittest.TestCase):
    """Test case for tic-tac-toe rules."""

    def setUp(self):
        self.game = TicTacToe()

    def test_initial_state(self):
        self.assertEqual(self.game.possible_moves(), list(range(9)))
        self.assertIs(self.game.player_turn, Mark.A)
        self.assertIsNone(self.game.winner)

    def test_turns_alternate(self):
        self.game.place_move(4)
        self.assertIs(self.game.player_turn, Mark.B)
        self.game.place_move(0)
        self.assertIs(self.game.player_turn, Mark.A)
        self.assertIs(self.game.board[4], Mark.A)
        self.assertIs(self.game.board[0], Mark.B)

    def test_possible_moves_exclude_occupied_cells(self):
        rng = random.Random(42)
        for _ in range(50):
            game = TicTacToe()
            while not game.game_ended:
                moves = game.possible_moves()
                for move in moves:
                    self.assertIsNone(game.board[move])
                game.place_move(rng.choice(moves))
            self.assertEqual(game.possible_moves(), [])

    def test_occupied_cell_is_invalid(self):
        self.game.place_move(4)
        with self.assertRaises(InvalidMove):
            self.game.place_move(4)

    def test_out_of_range_cell_is_invalid_position(self):
        for move in (-1, 9):
            with self.assertRaises(InvalidPosition):
                self.game.place_move(move)
            with self.assertRaises(InvalidMove):
                self.game.place_move(move)
        self.assertEqual(self.game.possible_moves(), list(range(9)))

    def test_row_win(self):
        outcomes = play(self.game, [0, 3, 1, 4, 2])
        self.assertEqual(outcomes[-1], WinState.WIN)
        self.assertIs(self.game.winner, Mark.A)
        self.assertEqual(self.game.score_state(WinState.WIN, Mark.A), MoveScore.terminal(1.0))
        self.assertEqual(self.game.score_state(WinState.WIN, Mark.B), MoveScore.terminal(-3.0))

    def test_second_player_win(self):
        play(self.game, [0, 2, 1, 4, 3])
        self.assertEqual(self.game.place_move(6), WinState.WIN)
        self.assertIs(self.game.winner, Mark.B)

    def test_no_win_without_complete_line(self):
        # A holds 4, 8 and 6 but both diagonals are broken by B
        outcomes = play(self.game, [4, 0, 8, 2, 6])
        self.assertTrue(all(o is WinState.CONTINUE for o in outcomes))
        self.assertFalse(self.game.game_ended)

    def test_double_win_on_last_cell_is_single_win(self):
        outcomes = play(self.game, [0, 1, 8, 3, 2, 5, 6, 7, 4])
        terminal = [o for o in outcomes if self.game.score_state(o, Mark.A).is_terminal]
        self.assertEqual(len(terminal), 1)
        self.assertEqual(outcomes[-1], WinState.WIN)
        self.assertIs(self.game.winner, Mark.A)
        with self.assertRaises(GameAlreadyEnded):
            self.game.place_move(0)

    def test_draw(self):
        outcomes = play(self.game, [0, 1, 2, 4, 3, 5, 7, 6, 8])
        self.assertEqual(outcomes[-1], WinState.DRAW)
        self.assertIsNone(self.game.winner)
        self.assertEqual(self.game.score_state(WinState.DRAW, Mark.A), MoveScore.terminal(0.5))
        self.assertEqual(self.game.score_state(WinState.DRAW, Mark.B), MoveScore.terminal(0.5))

    def test_continue_is_non_terminal(self):
        state = self.game.place_move(0)
        score = self.game.score_state(state, Mark.A)
        self.assertFalse(score.is_terminal)
        self.assertEqual(score.score, 0.0)

    def test_move_after_end_fails(self):
        play(self.game, [0, 3, 1, 4, 2])
        with self.assertRaises(GameAlreadyEnded):
            self.game.place_move(8)

    def test_clone_is_independent(self):
        self.game.place_move(4)
        clone = self.game.clone()
        clone.place_move(0)
        self.assertIsNone(self.game.board[0])
        self.assertIs(self.game.player_turn, Mark.B)
        self.assertIs(clone.player_turn, Mark.A)

    def test_render(self):
        play(self.game, [0, 4])
        self.assertEqual(self.game.render(), "A--\n-B-\n---")


class TestUno(unittest.TestCase):
    """Test case for Uno rules."""

    def setUp(self):
        self.rng = random.Random(7)
        self.red5 = Card.number(Colour.RED, 5)

    def test_standard_deck(self):
        deck = standard_deck()
        self.assertEqual(sum(deck.values()), 104)
        self.assertEqual(deck[Card.number(Colour.BLUE, 0)], 1)
        self.assertEqual(deck[Card.number(Colour.BLUE, 7)], 2)
        self.assertEqual(deck[Card.draw(Colour.GREEN)], 2)
        self.assertEqual(deck[Card.wild(0)], 2)
        self.assertEqual(deck[Card.wild(4)], 2)

    def test_deal(self):
        game = Uno.standard(num_players=3, rng=self.rng)
        for player in range(3):
            self.assertEqual(game.hand_size(player), 7)
        self.assertIs(game.top_card.kind, CardKind.NUMBER)
        self.assertIs(game.current_colour, game.top_card.colour)
        self.assertEqual(game.total_cards(), 104)
        self.assertEqual(game.player_turn, 0)

    def test_invalid_player_count(self):
        with self.assertRaises(ValueError):
            Uno.standard(num_players=1)

    def test_possible_moves(self):
        hand = [Card.number(Colour.RED, 3), Card.number(Colour.BLUE, 5),
                Card.number(Colour.GREEN, 7), Card.draw(Colour.BLUE), Card.wild(0)]
        game = Uno.from_position([hand, [Card.number(Colour.RED, 1)]], self.red5, rng=self.rng)

        expected = {UnoMove.play(Card.number(Colour.RED, 3)), UnoMove.play(Card.number(Colour.BLUE, 5))}
        expected |= {UnoMove.play(Card.wild(0), colour) for colour in Colour}
        self.assertEqual(set(game.possible_moves()), expected)

    def test_action_card_cannot_be_last(self):
        game = Uno.from_position([[Card.draw(Colour.RED)], [self.red5]], self.red5, rng=self.rng)
        self.assertEqual(game.possible_moves(), [UnoMove.pick_up()])

        game = Uno.from_position([[Card.wild(4)], [self.red5]], self.red5, rng=self.rng)
        self.assertEqual(game.possible_moves(), [UnoMove.pick_up()])

    def test_pick_up_when_nothing_playable(self):
        deck = {Card.number(Colour.YELLOW, 1): 5}
        game = Uno.from_position([[Card.number(Colour.GREEN, 7), Card.number(Colour.BLUE, 2)], [self.red5]],
                                 self.red5, deck=deck, rng=self.rng)
        self.assertEqual(game.possible_moves(), [UnoMove.pick_up()])

        state = game.place_move(UnoMove.pick_up())
        self.assertIs(state, GameState.CONTINUE)
        self.assertEqual(game.hand_size(0), 3)
        self.assertEqual(game.player_turn, 1)

    def test_invalid_move(self):
        game = Uno.from_position([[Card.number(Colour.GREEN, 7), Card.number(Colour.RED, 1)], [self.red5]],
                                 self.red5, rng=self.rng)
        with self.assertRaises(InvalidMove):
            game.place_move(UnoMove.play(Card.number(Colour.GREEN, 7)))
        with self.assertRaises(InvalidMove):
            game.place_move(UnoMove.play(Card.number(Colour.BLUE, 9)))

    def test_win(self):
        game = Uno.from_position([[Card.number(Colour.RED, 3)], [self.red5, self.red5]], self.red5, rng=self.rng)
        state = game.place_move(UnoMove.play(Card.number(Colour.RED, 3)))
        self.assertIs(state, GameState.WIN)
        self.assertEqual(game.winner, 0)
        self.assertEqual(game.score_state(state, 0), MoveScore.terminal(1.0))
        self.assertEqual(game.score_state(state, 1), MoveScore.terminal(0.0))
        self.assertEqual(game.possible_moves(), [])
        with self.assertRaises(GameAlreadyEnded):
            game.place_move(UnoMove.pick_up())

    def test_continue_is_non_terminal(self):
        game = Uno.from_position([[Card.number(Colour.RED, 3), self.red5], [self.red5]], self.red5, rng=self.rng)
        state = game.place_move(UnoMove.play(self.red5))
        self.assertEqual(game.score_state(state, 0), MoveScore.non_terminal(0.0))

    def test_draw_penalty_is_paid_by_pick_up(self):
        deck = {Card.number(Colour.YELLOW, 1): 10}
        hands = [[Card.draw(Colour.RED), Card.number(Colour.RED, 1)],
                 [Card.number(Colour.BLUE, 9), Card.number(Colour.GREEN, 4)]]
        game = Uno.from_position(hands, self.red5, deck=deck, rng=self.rng)

        game.place_move(UnoMove.play(Card.draw(Colour.RED)))
        self.assertEqual(game.pending_draw, 2)
        self.assertEqual(game.player_turn, 1)
        self.assertEqual(game.possible_moves(), [UnoMove.pick_up()])

        game.place_move(UnoMove.pick_up())
        self.assertEqual(game.hand_size(1), 4)
        self.assertEqual(game.pending_draw, 0)
        self.assertEqual(game.player_turn, 0)

    def test_draw_penalty_stacks(self):
        deck = {Card.number(Colour.YELLOW, 1): 10}
        hands = [[Card.draw(Colour.RED), Card.number(Colour.RED, 1)],
                 [Card.draw(Colour.RED), Card.number(Colour.GREEN, 4)]]
        game = Uno.from_position(hands, self.red5, deck=deck, rng=self.rng)

        game.place_move(UnoMove.play(Card.draw(Colour.RED)))
        game.place_move(UnoMove.play(Card.draw(Colour.RED)))
        self.assertEqual(game.pending_draw, 4)
        self.assertEqual(game.hand_size(1), 1)

        # Player 0 pays four cards, then plays the red 1
        state = game.place_move(UnoMove.play(Card.number(Colour.RED, 1)))
        self.assertIs(state, GameState.CONTINUE)
        self.assertEqual(game.hand_size(0), 4)
        self.assertEqual(game.pending_draw, 0)

    def test_wild_declares_colour(self):
        hands = [[Card.wild(0), Card.number(Colour.RED, 1)], [Card.number(Colour.BLUE, 9), self.red5]]
        game = Uno.from_position(hands, self.red5, rng=self.rng)
        game.place_move(UnoMove.play(Card.wild(0), Colour.BLUE))
        self.assertIs(game.current_colour, Colour.BLUE)
        self.assertIn(UnoMove.play(Card.number(Colour.BLUE, 9)), game.possible_moves())
        self.assertNotIn(UnoMove.play(self.red5), game.possible_moves())

    def test_skip(self):
        filler = [self.red5, self.red5]
        hands = [[Card.skip(Colour.RED), Card.number(Colour.RED, 1)], list(filler), list(filler)]
        game = Uno.from_position(hands, self.red5, rng=self.rng)
        game.place_move(UnoMove.play(Card.skip(Colour.RED)))
        self.assertEqual(game.player_turn, 2)

    def test_reverse(self):
        filler = [self.red5, self.red5]
        hands = [[Card.reverse(Colour.RED), Card.number(Colour.RED, 1)], list(filler), list(filler)]
        game = Uno.from_position(hands, self.red5, rng=self.rng)
        game.place_move(UnoMove.play(Card.reverse(Colour.RED)))
        self.assertEqual(game.player_turn, 2)
        game.place_move(UnoMove.play(self.red5))
        self.assertEqual(game.player_turn, 1)

    def test_deck_exhausted(self):
        game = Uno.from_position([[Card.number(Colour.GREEN, 7)], [self.red5]], self.red5, rng=self.rng)
        with self.assertRaises(DeckExhausted):
            game.place_move(UnoMove.pick_up())

    def test_failed_draw_keeps_every_card(self):
        deck = {Card.number(Colour.YELLOW, 1): 1}
        game = Uno.from_position([[Card.number(Colour.GREEN, 7)], [self.red5]], self.red5, deck=deck, rng=self.rng)
        game.discard = [Card.number(Colour.BLUE, 2), self.red5]
        total = game.total_cards()

        with self.assertRaises(DeckExhausted):
            game.draw_hand(3)

        self.assertEqual(game.total_cards(), total)
        self.assertEqual(game.deck, {Card.number(Colour.YELLOW, 1): 1, Card.number(Colour.BLUE, 2): 1})
        self.assertEqual(game.hand_size(0), 1)

    def test_discard_pile_is_reshuffled(self):
        game = Uno.from_position([[Card.number(Colour.GREEN, 7)], [self.red5]], self.red5, rng=self.rng)
        game.discard = [Card.number(Colour.BLUE, 2), self.red5]
        game.place_move(UnoMove.pick_up())
        self.assertEqual(game.hand_size(0), 2)
        self.assertEqual(game.discard, [self.red5])

    def test_card_count_is_preserved(self):
        game = Uno.standard(num_players=2, rng=self.rng)
        for _ in range(200):
            moves = game.possible_moves()
            if game.place_move(self.rng.choice(moves)) is GameState.WIN:
                break
            self.assertEqual(game.total_cards(), 104)

    def test_clone_is_independent(self):
        game = Uno.standard(rng=self.rng)
        hands = [dict(hand) for hand in game.hands]
        clone = game.clone()
        clone.place_move(clone.possible_moves()[0])
        self.assertEqual(game.hands, hands)
        self.assertEqual(game.player_turn, 0)

    def test_seeded_games_clone_identically(self):
        first = Uno.standard(rng=random.Random(3))
        second = Uno.standard(rng=random.Random(3))
        self.assertEqual(first.hands, second.hands)
        self.assertEqual(first.clone().hands, second.clone().hands)

    def test_clone_with_rng_leaves_original_generator(self):
        game = Uno.standard(num_players=3, rng=self.rng).observed_by(0)
        rng_state = game.rng.getstate()

        first = game.clone(rng=random.Random(9))
        second = game.clone(rng=random.Random(9))

        self.assertEqual(game.rng.getstate(), rng_state)
        self.assertEqual(first.hands, second.hands)
        self.assertEqual(first.rng.getstate(), second.rng.getstate())

    def test_observed_by_leaves_original_generator(self):
        game = Uno.standard(rng=self.rng)
        rng_state = game.rng.getstate()
        view = game.observed_by(1)
        self.assertEqual(game.rng.getstate(), rng_state)
        self.assertEqual(view.rng.getstate(), rng_state)
        self.assertIsNot(view.rng, game.rng)

    def test_determinize_resamples_hidden_hands(self):
        game = Uno.standard(num_players=3, rng=self.rng).observed_by(0)
        original = [dict(hand) for hand in game.hands]

        changed = False
        for _ in range(20):
            clone = game.clone()
            self.assertEqual(clone.hands[0], original[0])
            self.assertEqual(clone.hand_size(1), 7)
            self.assertEqual(clone.hand_size(2), 7)
            self.assertEqual(clone.total_cards(), 104)
            changed = changed or clone.hands[1] != original[1]
        self.assertTrue(changed)
        self.assertEqual(game.hands, original)

    def test_move_strings(self):
        self.assertEqual(str(UnoMove.play(self.red5)), "play-red-5")
        self.assertEqual(str(UnoMove.play(Card.number(Colour.BLUE, 2))), "play-blue-2")
        self.assertEqual(str(UnoMove.pick_up()), "draw")
        self.assertEqual(str(UnoMove.play(Card.wild(4), Colour.GREEN)), "play-wild-draw4-green")


if __name__ == "__main__":
    unittest.main()
