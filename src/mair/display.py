"""Pretty-printing and display utilities for dense Merkle trees."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from mair.addressing import children_of, father_of, first_leaf_id, last_leaf_id

if TYPE_CHECKING:
    from mair.base import Node
    from mair.bd_tree import DenseMerkleTree


# ANSI colour codes
PRIMARY = '\033[32m'    # green
SECONDARY = '\033[33m'  # yellow
RESET = '\033[0m'

PLACEHOLDER = "-"
# Shortest width that keeps one digest character before "..."
MIN_WIDTH = 4


def _or_placeholder(value: Optional[object]) -> str:
    return PLACEHOLDER if value is None else str(value)


def render_node(node: Node, depth: int) -> str:
    """One diagnostic line for ``node``: id, father, children and digest."""
    children = children_of(node.id, depth)
    left, right = children if children is not None else (None, None)
    return (
        f"ID: {node.id}"
        f" Parent: {_or_placeholder(father_of(node.id))}"
        f" Left Child: {_or_placeholder(left)}"
        f" Right Child: {_or_placeholder(right)}"
        f" Hash: {_or_placeholder(node.digest)}"
    )


def render_nodes(depth: int, nodes: Sequence[Node]) -> str:
    """
    Deterministic listing of every node in ascending id order, each line
    terminated by a newline.

    The format is stable and is used for golden-output tests.
    """
    if not nodes:
        return "Empty Tree"
    return "".join(render_node(node, depth) + "\n" for node in nodes)


def _short(digest: Optional[str], width: int) -> str:
    if digest is None:
        return PLACEHOLDER
    return digest if len(digest) <= width else f"{digest[:width - 3]}..."


def print_pretty(tree: DenseMerkleTree, width: int = 8) -> str:
    """
    Level-by-level view of a tree, root first.

    Digests are shortened to ``width`` characters; missing digests show as
    ``-``. ``width`` must leave room for at least one character before the
    ellipsis. Intended for small trees in debugging sessions.
    """
    from mair.bd_tree import DenseMerkleTree

    if not isinstance(tree, DenseMerkleTree):
        raise TypeError(f"print_pretty() expects DenseMerkleTree, got {type(tree).__name__}")
    if width < MIN_WIDTH:
        raise ValueError(f"width must be >= {MIN_WIDTH}, got {width}")

    depth = tree.depth
    column_width = width + 2
    leaf_columns = last_leaf_id(depth) - first_leaf_id(depth) + 1
    total_width = leaf_columns * column_width

    out_lines = []
    for level in range(depth + 1):
        first = 1 << level
        count = 1 << level
        slot = total_width // count
        texts = [
            _short(tree.digest_at(node_id), width).center(slot)
            for node_id in range(first, first + count)
        ]
        colour = PRIMARY if level == 0 else SECONDARY if level == depth else ""
        reset = RESET if colour else ""
        out_lines.append(f"{colour}Level {level}{reset}: " + "".join(texts).rstrip())

    return f"{type(tree).__name__}(depth={depth})\n" + "\n".join(out_lines) + "\n"
