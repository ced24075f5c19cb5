"""
Closed-form addressing for dense binary trees.

Nodes are numbered breadth-first starting at 1 (the root). A tree of
``depth`` levels below the root holds ``2^(depth+1) - 1`` nodes and its
leaf row spans ids ``[2^depth, 2^(depth+1) - 1]``. Nothing here keeps
state; every relation is derived from the id alone.
"""

from typing import Optional, Tuple

from mair.errors import InvalidDepthError

MIN_DEPTH = 1
MAX_DEPTH = 25

LEFT = 0
RIGHT = 1


def _check_depth(depth: int) -> None:
    if depth < MIN_DEPTH:
        raise InvalidDepthError(f"depth must be >= {MIN_DEPTH}, got {depth}")


def level_of(node_id: int) -> int:
    """Return ``floor(log2(node_id))``; the root sits on level 0."""
    if node_id < 1:
        raise ValueError(f"node id must be >= 1, got {node_id}")
    # bit_length is exact, unlike a floating log2 at powers of two
    return node_id.bit_length() - 1


def children_of(node_id: int, max_depth: Optional[int] = None) -> Optional[Tuple[int, int]]:
    """
    Return the ``(left, right)`` children of ``node_id``.

    Args:
        node_id: The node whose children are wanted.
        max_depth: Optional tree depth. When given, ``None`` is returned for
            nodes that are leaves at that depth or lie outside the tree.

    Returns:
        Optional[Tuple[int, int]]: The child ids, or None.
    """
    if node_id < 1:
        return None
    if max_depth is not None:
        if max_depth < MIN_DEPTH:
            return None
        total = node_count(max_depth)
        if node_id > total:
            return None

    level = level_of(node_id)
    offset = node_id - (1 << level)
    left = (1 << (level + 1)) + 2 * offset
    right = left + 1

    if max_depth is not None and right > node_count(max_depth):
        return None
    return left, right


def father_of(node_id: int) -> Optional[int]:
    """Return the father id, or None for the root and invalid ids."""
    if node_id <= 1:
        return None
    level = level_of(node_id)
    offset = node_id - (1 << level)
    return (1 << (level - 1)) + offset // 2


def sibling_of(node_id: int) -> Optional[int]:
    """Return the id sharing the same father, or None for the root."""
    father = father_of(node_id)
    if father is None:
        return None
    left, right = children_of(father)
    return right if left == node_id else left


def is_left_child(node_id: int) -> Optional[bool]:
    """Whether ``node_id`` is a left child. The root counts as left."""
    if node_id < 1:
        return None
    if node_id == 1:
        return True
    left, _ = children_of(father_of(node_id))
    return left == node_id


def first_leaf_id(depth: int) -> int:
    _check_depth(depth)
    return 1 << depth


def last_leaf_id(depth: int) -> int:
    _check_depth(depth)
    return node_count(depth)


def node_count(depth: int) -> int:
    """Number of nodes needed to store a tree with ``depth`` levels below the root."""
    _check_depth(depth)
    return (1 << (depth + 1)) - 1


def leaf_count(depth: int) -> int:
    """Maximum number of transactions a tree of ``depth`` retains."""
    _check_depth(depth)
    return 1 << depth


def is_leaf(node_id: int, depth: int) -> bool:
    """
    Whether ``node_id`` belongs to the leaf row of a tree of ``depth``.

    Raises:
        ValueError: If ``node_id`` is below 1 or beyond the last leaf.
    """
    if node_id < 1:
        raise ValueError(f"node id must be >= 1, got {node_id}")
    if node_id < first_leaf_id(depth):
        return False
    if node_id <= last_leaf_id(depth):
        return True
    raise ValueError(f"node id {node_id} is out of range for depth {depth}")


def depth_for_capacity(n: int) -> int:
    """Smallest depth ``d >= 1`` whose leaf row holds at least ``n`` transactions."""
    if n < 1:
        raise ValueError(f"capacity must be >= 1, got {n}")
    if n == 1:
        return MIN_DEPTH
    return (n - 1).bit_length()
