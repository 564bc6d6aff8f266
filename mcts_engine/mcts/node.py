"""
Monte Carlo Tree Search nodes and the tree that owns them.

The tree is an arena: nodes live in one flat list and are addressed by their
index, which is assigned on creation and never reused. Parent/child links are
kept as index lists next to the nodes, so a node never holds a reference to
another node. The tree only grows; nothing is removed or reordered.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, Iterator, List, Optional, TypeVar

from mcts_engine.core.constants import ROOT_INDEX
from mcts_engine.core.game import describe_move


MoveT = TypeVar("MoveT")


@dataclass
class MCTSNode(Generic[MoveT]):
    """
    Statistics for one position in the search tree.

    The move is the one played from the parent to reach this node; the root
    holds None. score and visits are only changed by backpropagation.
    """
    index: int
    move: Optional[MoveT] = None
    score: float = 0.0
    visits: int = 0

    @property
    def average_score(self) -> float:
        """Mean backpropagated score, 0 for an unvisited node."""
        if self.visits == 0:
            return 0.0
        return self.score / self.visits

    def update(self, score: float) -> None:
        """
        Record one backpropagation pass through this node.

        Args:
            score: Amount to add to the accumulated score
        """
        self.visits += 1
        self.score += score

    def __str__(self) -> str:
        return (f"MCTSNode(index={self.index}, "
                f"move={describe_move(self.move)}, "
                f"score={self.score:.2f}, "
                f"visits={self.visits})")


class MCTSTree(Generic[MoveT]):
    """Growth-only arena of MCTSNode objects rooted at index 0."""

    def __init__(self):
        self._nodes: List[MCTSNode[MoveT]] = [MCTSNode(index=ROOT_INDEX)]
        self._children: List[List[int]] = [[]]
        self._parents: List[Optional[int]] = [None]

    @property
    def root(self) -> MCTSNode[MoveT]:
        return self._nodes[ROOT_INDEX]

    def add_child(self, parent: int, move: MoveT) -> Optional[int]:
        """
        Append a new node below an existing one.

        Args:
            parent: Index of the parent node
            move: Move leading from the parent to the new node

        Returns:
            Index of the new node, or None if the parent does not exist
        """
        if not 0 <= parent < len(self._nodes):
            return None

        index = len(self._nodes)
        self._nodes.append(MCTSNode(index=index, move=move))
        self._children.append([])
        self._parents.append(parent)
        self._children[parent].append(index)
        return index

    def children(self, index: int) -> Optional[List[int]]:
        """Child indices of a node in insertion order, or None for an invalid index."""
        if not 0 <= index < len(self._nodes):
            return None
        return list(self._children[index])

    def node(self, index: int) -> Optional[MCTSNode[MoveT]]:
        """The node at an index, or None for an invalid index."""
        if not 0 <= index < len(self._nodes):
            return None
        return self._nodes[index]

    def parent(self, index: int) -> Optional[int]:
        """Parent index of a node; None for the root or an invalid index."""
        if not 0 <= index < len(self._nodes):
            return None
        return self._parents[index]

    def depth(self) -> int:
        """Number of edges on the longest root-to-leaf path."""
        depths = [0] * len(self._nodes)
        # Parents always have lower indices than their children
        for index in range(1, len(self._nodes)):
            depths[index] = depths[self._parents[index]] + 1
        return max(depths)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[MCTSNode[MoveT]]:
        return iter(self._nodes)

    def __str__(self) -> str:
        return f"MCTSTree(nodes={len(self)}, root_visits={self.root.visits})"
