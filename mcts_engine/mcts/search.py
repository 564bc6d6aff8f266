"""
Monte Carlo Tree Search (MCTS) algorithm.

This module implements the MCTS engine with the four standard phases:
1. Selection: Descend from the root by UCT until a leaf or a terminal move
2. Expansion: Add the legal moves of the leaf as children and step into one
3. Simulation: Play uniformly random moves until the game ends
4. Backpropagation: Fold the result back along the traversal path

Every iteration runs on a fresh clone of the position being decided, while
the tree persists across iterations. For games of imperfect information the
legal moves at an already expanded node can differ from clone to clone; when
a clone reveals moves that no child represents yet, selection stops there and
expansion adds exactly those moves.
"""
from __future__ import annotations
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar
import logging
import math
import random
import time

from mcts_engine.core.constants import ROOT_INDEX
from mcts_engine.core.exceptions import InvalidNodeIndex, NoLegalMoves
from mcts_engine.core.game import Game, MoveScore, describe_move
from mcts_engine.mcts.config import MCTSConfig
from mcts_engine.mcts.export import tree_to_graph, write_dot
from mcts_engine.mcts.node import MCTSNode, MCTSTree


logger = logging.getLogger(__name__)

MoveT = TypeVar("MoveT")
PlayerT = TypeVar("PlayerT")

# (node index, outcome of the move that reached it)
Traversal = List[Tuple[int, MoveScore]]


def uct_score(score: float, visits: int, total_visits: int, c: float) -> float:
    """
    Calculate the UCT priority of a child node.

    UCT = score / visits + c * sqrt(ln(total_visits) / visits)

    Args:
        score: Accumulated score of the child
        visits: Visit count of the child
        total_visits: Visit count of the parent
        c: Exploration constant

    Returns:
        UCT priority; infinite for a child that was never visited
    """
    if visits == 0:
        return MCTSConfig.INFINITE_VALUE
    return score / visits + c * math.sqrt(math.log(total_visits) / visits)


class MCTS(Generic[MoveT, PlayerT]):
    """
    Monte Carlo Tree Search engine deciding moves for one player.

    The engine owns a single tree. Statistics accumulate across all
    iterations of a decision; create a new engine for every decision.
    """

    def __init__(
        self,
        player: PlayerT,
        config: Optional[MCTSConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize an MCTS engine.

        Args:
            player: Player whose perspective all outcomes are scored from
            config: MCTS configuration parameters
            rng: Random source for expansion and rollouts (seeded from
                 config.seed when omitted)
        """
        self.player = player
        self.config = config or MCTSConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.tree: MCTSTree[MoveT] = MCTSTree()
        self.iterations_run = 0

    def _node(self, index: int) -> MCTSNode[MoveT]:
        node = self.tree.node(index)
        if node is None:
            raise InvalidNodeIndex(index)
        return node

    def _children(self, index: int) -> List[int]:
        children = self.tree.children(index)
        if children is None:
            raise InvalidNodeIndex(index)
        return children

    def _add_child(self, parent: int, move: MoveT) -> int:
        index = self.tree.add_child(parent, move)
        if index is None:
            raise InvalidNodeIndex(parent)
        return index

    def _apply(self, game: Game, move: MoveT) -> MoveScore:
        state = game.place_move(move)
        return game.score_state(state, self.player)

    def unrepresented_moves(self, children: Sequence[int], legal_moves: Sequence[MoveT]) -> List[MoveT]:
        """
        Get the legal moves that no existing child was expanded for.

        Args:
            children: Child indices of a node
            legal_moves: Moves legal in the current clone at that node

        Returns:
            The missing moves, in legal_moves order
        """
        existing = {self._node(child).move for child in children}
        return [move for move in legal_moves if move not in existing]

    def best_child(self, parent: int, candidates: Optional[Sequence[int]] = None) -> MCTSNode[MoveT]:
        """
        Select the child with the highest UCT priority.

        Ties go to the first maximal child in insertion order.

        Args:
            parent: Index of the parent node
            candidates: Children to choose from (all children when omitted)

        Returns:
            Selected child node
        """
        if candidates is None:
            candidates = self._children(parent)
        if not candidates:
            raise NoLegalMoves(f"node {parent} has no child to select")

        total_visits = self._node(parent).visits
        c = self.config.exploration_weight
        nodes = [self._node(index) for index in candidates]
        return max(nodes, key=lambda n: uct_score(n.score, n.visits, total_visits, c))

    def select(self, game: Game) -> Tuple[Traversal, Optional[List[MoveT]]]:
        """
        Descend the tree from the root, applying moves to the clone.

        Args:
            game: Clone of the position being decided; mutated

        Returns:
            Tuple of (traversal path, moves revealed at the last node that
            no child represents yet, or None)
        """
        traversal: Traversal = [(ROOT_INDEX, MoveScore.none())]

        while True:
            current, _ = traversal[-1]
            children = self._children(current)
            if not children:
                return traversal, None

            candidates = children
            if not game.IS_PERFECT_INFORMATION:
                legal_moves = game.possible_moves()
                new_moves = self.unrepresented_moves(children, legal_moves)
                if new_moves:
                    return traversal, new_moves
                # Children whose move this clone does not allow cannot be played
                legal = set(legal_moves)
                candidates = [c for c in children if self._node(c).move in legal]

            child = self.best_child(current, candidates)
            outcome = self._apply(game, child.move)
            traversal.append((child.index, outcome))

            if outcome.is_terminal:
                return traversal, None

    def expand(
        self,
        game: Game,
        traversal: Traversal,
        new_moves: Optional[List[MoveT]] = None,
    ) -> Traversal:
        """
        Add children below the last node of a traversal and step into one.

        Args:
            game: Clone positioned at the last node of the traversal; mutated
            traversal: Path produced by select(); extended in place
            new_moves: Moves to add instead of every legal move

        Returns:
            The extended traversal
        """
        leaf, outcome = traversal[-1]
        if outcome.is_terminal:
            return traversal

        if new_moves is not None:
            logger.debug("node %d: adding %d revealed moves", leaf, len(new_moves))
            added = [self._add_child(leaf, move) for move in new_moves]
        else:
            moves = game.possible_moves()
            if not moves:
                raise NoLegalMoves(f"no legal moves to expand at node {leaf}")
            for move in moves:
                self._add_child(leaf, move)
            added = self._children(leaf)

        chosen = self._node(self.rng.choice(added))
        outcome = self._apply(game, chosen.move)
        traversal.append((chosen.index, outcome))
        return traversal

    def rollout(self, game: Game) -> float:
        """
        Play random moves until the game ends.

        Args:
            game: Clone positioned after expansion; mutated

        Returns:
            Sum of the scores of every move played, terminal one included
        """
        total = 0.0
        depth = 0
        max_depth = self.config.max_rollout_depth

        while True:
            moves = game.possible_moves()
            if not moves:
                raise NoLegalMoves("no legal moves during rollout")

            outcome = self._apply(game, self.rng.choice(moves))
            total += outcome.score
            if outcome.is_terminal:
                return total

            depth += 1
            if max_depth is not None and depth >= max_depth:
                return total

    def backpropagate(self, traversal: Traversal, rollout_score: float) -> None:
        """
        Update statistics along a traversal, deepest node first.

        Each node is credited the rollout score plus the step scores of every
        move from itself down to the leaf, so credit grows toward the root.

        Args:
            traversal: Path produced by select() and expand()
            rollout_score: Result of the rollout (0 if the path ended terminally)
        """
        acc_score = rollout_score
        for index, outcome in reversed(traversal):
            acc_score += outcome.score
            self._node(index).update(acc_score)

    def run_iteration(self, base_game: Game) -> Traversal:
        """
        Run one selection, expansion, simulation and backpropagation pass.

        Args:
            base_game: Position being decided; never mutated

        Returns:
            Traversal path of the iteration
        """
        game = base_game.clone(rng=self.rng)

        traversal, new_moves = self.select(game)
        traversal = self.expand(game, traversal, new_moves)

        _, last_outcome = traversal[-1]
        rollout_score = 0.0 if last_outcome.is_terminal else self.rollout(game)

        self.backpropagate(traversal, rollout_score)
        self.iterations_run += 1
        logger.debug("iteration %d: depth %d, rollout %g", self.iterations_run, len(traversal) - 1, rollout_score)
        return traversal

    def best_descendant(self) -> MCTSNode[MoveT]:
        """
        Get the most visited child of the root.

        Returns:
            Root child with the highest visit count (first one on ties)
        """
        children = self._children(ROOT_INDEX)
        if not children:
            raise NoLegalMoves("the root has no children")
        return max((self._node(index) for index in children), key=lambda n: n.visits)

    def decide(self, base_game: Game, iterations: Optional[int] = None) -> MoveT:
        """
        Run the search and return the recommended move.

        Args:
            base_game: Current position; never mutated
            iterations: Iteration budget (config.iterations when omitted)

        Returns:
            Move of the most visited root child
        """
        budget = self.config.iterations if iterations is None else iterations
        if budget <= 0:
            raise ValueError("iterations must be positive")

        start_time = time.time()
        for i in range(budget):
            if self.config.time_limit is not None and time.time() - start_time > self.config.time_limit:
                logger.debug("time limit reached after %d of %d iterations", i, budget)
                break
            self.run_iteration(base_game)

        best = self.best_descendant()
        logger.info("player %s: move %s (%d visits)", self.player, describe_move(best.move), best.visits)
        return best.move

    def export_tree(self) -> Dict[str, List[Dict[str, Any]]]:
        """Read-only node/edge view of the tree, see export.tree_to_graph()."""
        return tree_to_graph(self.tree)

    def dump_tree(self, path: str) -> None:
        """Write the tree as a Graphviz DOT file."""
        write_dot(self.tree, path)


def count_nodes(tree: MCTSTree) -> int:
    """
    Count the total number of nodes in the tree.

    Args:
        tree: Search tree

    Returns:
        Total number of nodes
    """
    return len(tree)


def get_principal_variation(tree: MCTSTree, max_depth: int = 10) -> List[Tuple[Any, float]]:
    """
    Get the principal variation (most visited path) from the root.

    This is useful for analysis and debugging.

    Args:
        tree: Search tree
        max_depth: Maximum depth to explore

    Returns:
        List of (move, average score) pairs along the principal variation
    """
    result = []
    current = ROOT_INDEX

    while len(result) < max_depth:
        children = tree.children(current)
        if not children:
            break

        # Find the child with the most visits
        best_child = max((tree.node(index) for index in children), key=lambda n: n.visits)
        if best_child.visits == 0:
            break

        result.append((best_child.move, best_child.average_score))
        current = best_child.index

    return result


def get_action_statistics(engine: MCTS) -> Dict[str, Dict[str, float]]:
    """
    Get statistics for all moves from the root.

    Args:
        engine: Engine that has run a search

    Returns:
        Dictionary mapping move strings to statistics
    """
    result = {}
    root = engine.tree.root

    for index in engine.tree.children(ROOT_INDEX):
        child = engine.tree.node(index)
        result[describe_move(child.move)] = {
            "visits": child.visits,
            "score": child.score,
            "value": child.average_score,
            "uct": uct_score(child.score, child.visits, root.visits, engine.config.exploration_weight),
        }

    return result
