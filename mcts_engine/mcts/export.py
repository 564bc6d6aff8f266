"""
Diagnostic export of a search tree.

Nothing here is used by the search itself. tree_to_graph() gives a plain
node/edge view of a tree and to_dot()/write_dot() render it for Graphviz.
Only children that were visited at least once get an edge.
"""
from collections import deque
from typing import Any, Dict, List

from mcts_engine.core.constants import ROOT_INDEX
from mcts_engine.core.game import describe_move
from mcts_engine.mcts.node import MCTSTree


def tree_to_graph(tree: MCTSTree) -> Dict[str, List[Dict[str, Any]]]:
    """
    Build a node/edge description of a tree in breadth-first order.

    Args:
        tree: Search tree

    Returns:
        Dictionary with "nodes" (index, move, score, visits) and
        "edges" (parent, child) lists
    """
    nodes = []
    edges = []

    root = tree.root
    nodes.append({"index": root.index, "move": root.move, "score": root.score, "visits": root.visits})

    queue = deque([ROOT_INDEX])
    while queue:
        parent = queue.popleft()
        for child in tree.children(parent):
            node = tree.node(child)
            if node.visits > 0:
                edges.append({"parent": parent, "child": child})
                nodes.append({
                    "index": node.index,
                    "move": node.move,
                    "score": node.score,
                    "visits": node.visits,
                })
            queue.append(child)

    return {"nodes": nodes, "edges": edges}


def to_dot(tree: MCTSTree) -> str:
    """
    Render a tree as a Graphviz digraph.

    Args:
        tree: Search tree

    Returns:
        DOT source
    """
    graph = tree_to_graph(tree)
    lines = ['digraph G {', '  overlap="scalexy";']

    for node in graph["nodes"]:
        label = (f'{node["index"]}<br/>move={_escape(describe_move(node["move"]))}'
                 f'<br/>score={node["score"]:g}<br/>visits={node["visits"]}')
        lines.append(f'  {node["index"]} [label=<{label}>];')

    for edge in graph["edges"]:
        lines.append(f'  {edge["parent"]} -> {edge["child"]};')

    lines.append('}')
    return "\n".join(lines) + "\n"


def write_dot(tree: MCTSTree, path: str) -> None:
    """
    Write a tree to a DOT file.

    Args:
        tree: Search tree
        path: Output file path
    """
    with open(path, 'w') as f:
        f.write(to_dot(tree))


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
