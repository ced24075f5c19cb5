"""Consistency checks for dense Merkle trees.

A tree built through its own API is always consistent. Trees reconstructed
from an externally supplied node array are not, and these checks recompute
each internal digest from its children to find the first disagreement.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from mair.logging_config import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from mair.bd_tree import DenseMerkleTree


class InvariantError(Exception):
    """Raised when a stored digest disagrees with its children."""


def first_inconsistent_node(tree: DenseMerkleTree) -> Optional[int]:
    """Return the lowest node id whose digest disagrees with its children, or None."""
    for node_id, stored, expected in tree._internal_digests():
        if stored != expected:
            return node_id
    return None


def check_tree_invariants(tree: DenseMerkleTree) -> None:
    """Raise :class:`InvariantError` on the first inconsistent internal node."""
    for node_id, stored, expected in tree._internal_digests():
        if stored != expected:
            raise InvariantError(
                f"Invariant failed: node {node_id} holds {stored!r}, children give {expected!r}"
            )


def verify_integrity(tree: DenseMerkleTree) -> bool:
    """Non-raising variant of :func:`check_tree_invariants`."""
    node_id = first_inconsistent_node(tree)
    if node_id is not None:
        logger.warning("Integrity check failed at node %d (depth=%d)", node_id, tree.depth)
        return False
    return True
