#!/usr/bin/env python
"""
Interactive command-line driver for the MCTS engine.

This script plays tic-tac-toe or Uno, either between MCTS players or with a
human against MCTS. Every AI turn builds a fresh engine for the player to
move and searches the current position.

Example usage:
    # Watch two MCTS players play tic-tac-toe
    python play_game.py --game tictactoe --iterations 2048

    # Play Uno against MCTS, hiding your hand from the AI
    python play_game.py --game uno --mode human --hidden

    # Dump the search tree of every AI move for Graphviz
    python play_game.py --game tictactoe --dump-tree out.dot
"""
import sys
import random
import logging
import argparse
from typing import Any, Optional

from mcts_engine.core.game import Game, describe_move
from mcts_engine.games.tictactoe import TicTacToe, WinState
from mcts_engine.games.uno import Uno, GameState
from mcts_engine.mcts.config import MCTSConfig
from mcts_engine.mcts.search import MCTS


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"


def parse_args(argv=None):
    """Parse command-line arguments for game configuration."""
    parser = argparse.ArgumentParser(description="Play games against MCTS")

    parser.add_argument("--game", type=str, default="tictactoe",
                        choices=["tictactoe", "uno"],
                        help="Game to play")
    parser.add_argument("--mode", type=str, default="ai",
                        choices=["ai", "human"],
                        help="ai: MCTS plays every seat; human: you play the first seat")
    parser.add_argument("--iterations", type=int, default=2048,
                        help="Number of MCTS iterations per move")
    parser.add_argument("--players", type=int, default=2,
                        help="Number of players (Uno only)")
    parser.add_argument("--hidden", action="store_true",
                        help="Hide other players' hands from each AI (Uno only)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducibility")
    parser.add_argument("--dump-tree", type=str, default=None,
                        help="Write the search tree of each AI move to this DOT file")
    parser.add_argument("--verbose", action="store_true",
                        help="Log search details")

    return parser.parse_args(argv)


def create_game(args, rng: random.Random) -> Game:
    """Create the game selected on the command line."""
    if args.game == "tictactoe":
        return TicTacToe()
    return Uno.standard(num_players=args.players, rng=rng)


def is_game_over(state: Any) -> bool:
    return state in (WinState.WIN, WinState.DRAW, GameState.WIN)


def get_human_move(game: Game) -> Any:
    """Prompt for a move until a legal one is chosen."""
    moves = game.possible_moves()

    print("\n" + Colors.BOLD + "Your turn! Choose a move:" + Colors.RESET)
    for i, move in enumerate(moves):
        print(f"{i + 1}. {describe_move(move)}")

    while True:
        try:
            choice = int(input(f"\nEnter choice (1-{len(moves)}): "))
            if 1 <= choice <= len(moves):
                return moves[choice - 1]
            print(f"Invalid choice. Please enter a number between 1 and {len(moves)}.")
        except ValueError:
            print("Invalid input. Please enter a number.")


def get_ai_move(game: Game, player: Any, args, rng: random.Random) -> Any:
    """Search the position with a fresh engine for the player to move."""
    search_game = game
    if args.hidden and isinstance(game, Uno):
        search_game = game.observed_by(player)

    engine = MCTS(player, MCTSConfig(iterations=args.iterations), rng=rng)
    move = engine.decide(search_game)

    if args.dump_tree:
        engine.dump_tree(args.dump_tree)
    return move


def current_player(game: Game) -> Any:
    return game.player_turn


def play_game(args) -> Optional[Any]:
    """
    Play one game to the end.

    Returns:
        The winning player, or None for a draw
    """
    rng = random.Random(args.seed)
    game = create_game(args, rng)
    human_player = current_player(game) if args.mode == "human" else None

    print(Colors.BOLD + Colors.YELLOW + f"=== {args.game.upper()} ===" + Colors.RESET)

    while True:
        print()
        print(game)

        player = current_player(game)
        if player == human_player:
            move = get_human_move(game)
        else:
            move = get_ai_move(game, player, args, rng)
            print(Colors.CYAN + f"Player {player} plays {describe_move(move)}" + Colors.RESET)

        state = game.place_move(move)
        if is_game_over(state):
            break

    print()
    print(game)
    if state is WinState.DRAW:
        print(Colors.BOLD + "Draw!" + Colors.RESET)
        return None

    winner = current_player(game)
    color = Colors.GREEN if human_player is None or winner == human_player else Colors.RED
    print(color + Colors.BOLD + f"Player {winner} wins!" + Colors.RESET)
    return winner


def main(argv=None):
    """Main function."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    try:
        play_game(args)
    except KeyboardInterrupt:
        print("\nGame interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    main()
