"""Statistics for dense Merkle trees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mair.addressing import children_of, first_leaf_id, leaf_count, node_count

if TYPE_CHECKING:
    from mair.bd_tree import DenseMerkleTree


@dataclass
class TreeStats:
    """Aggregated statistics for a dense Merkle tree."""

    depth: int
    node_count: int
    leaf_count: int
    populated_leaves: int
    populated_internal: int
    hashed_nodes: int
    pass_through_nodes: int
    is_populated: bool


def bdtree_stats_(tree: DenseMerkleTree) -> TreeStats:
    """
    Returns aggregated statistics for a tree in **O(n)** time.

    ``hashed_nodes`` counts internal nodes whose two children both carry a
    digest; ``pass_through_nodes`` counts internal nodes that adopted the
    digest of their only populated child.
    """
    depth = tree.depth
    nodes = tree.snapshot()
    first_leaf = first_leaf_id(depth)

    populated_leaves = sum(1 for node in nodes[first_leaf - 1:] if node.digest is not None)
    populated_internal = 0
    hashed = 0
    pass_through = 0

    for node in nodes[:first_leaf - 1]:
        if node.digest is None:
            continue
        populated_internal += 1
        left, right = children_of(node.id)
        present = (nodes[left - 1].digest is not None) + (nodes[right - 1].digest is not None)
        if present == 2:
            hashed += 1
        elif present == 1:
            pass_through += 1

    return TreeStats(
        depth=depth,
        node_count=node_count(depth),
        leaf_count=leaf_count(depth),
        populated_leaves=populated_leaves,
        populated_internal=populated_internal,
        hashed_nodes=hashed,
        pass_through_nodes=pass_through,
        is_populated=nodes[0].digest is not None,
    )
