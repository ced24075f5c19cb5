"""Dense binary Merkle tree stored as a flat, 1-indexed node array."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Sequence, Tuple

from mair.addressing import (
    LEFT,
    MAX_DEPTH,
    MIN_DEPTH,
    RIGHT,
    children_of,
    father_of,
    first_leaf_id,
    is_left_child,
    last_leaf_id,
    leaf_count,
    node_count,
    sibling_of,
)
from mair.base import Node
from mair.digest import DEFAULT_ALGORITHM, DigestEngine, get_digest_engine
from mair.display import render_nodes
from mair.errors import (
    InvalidDepthError,
    InvalidNodeError,
    RangeMismatchError,
    SizeMismatchError,
)
from mair.logging_config import get_logger

logger = get_logger(__name__)


def _validate_depth(depth: int) -> None:
    if not isinstance(depth, int) or isinstance(depth, bool):
        raise InvalidDepthError(f"depth must be an int, got {type(depth).__name__}")
    if depth < MIN_DEPTH:
        raise InvalidDepthError(f"depth must be >= {MIN_DEPTH}, got {depth}")
    if depth > MAX_DEPTH:
        raise InvalidDepthError(
            f"depth must be <= {MAX_DEPTH} to keep memory bounded, got {depth}"
        )


def _validate_digest(digest: object) -> None:
    if not isinstance(digest, str):
        raise TypeError(f"digest must be a str, got {type(digest).__name__}")


class DenseMerkleTree:
    """
    A complete binary Merkle tree of fixed depth over ``2^depth`` leaf slots.

    Node ``i`` of the array (0-based) is logical id ``i + 1``; id 1 is the
    root and the leaf row spans ids ``[2^depth, 2^(depth+1) - 1]``. Leaf
    offset 1 is the oldest retained transaction, offset ``2^depth`` the
    newest.

    Internal digests follow a pass-through rule: two present children are
    hashed together, a single present child is adopted verbatim, and two
    absent children leave the parent absent. A node with one empty side is
    therefore not a commitment over its whole subtree.

    Every public operation holds the tree's lock for its full duration.
    """

    __slots__ = ("_depth", "_nodes", "_engine", "_lock")

    def __init__(
        self,
        depth: int,
        nodes: Optional[Sequence[Node]] = None,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        _validate_depth(depth)
        engine = get_digest_engine(algorithm)
        total = node_count(depth)

        if nodes is None:
            built = [Node(node_id) for node_id in range(1, total + 1)]
        else:
            if len(nodes) != total:
                raise SizeMismatchError(
                    f"depth {depth} needs {total} nodes, got {len(nodes)}"
                )
            for idx, node in enumerate(nodes):
                if not isinstance(node, Node) or node.id != idx + 1:
                    raise InvalidNodeError(
                        f"position {idx} must hold node id {idx + 1}, got {node!r}"
                    )
            built = [node.copy() for node in nodes]

        self._depth = depth
        self._nodes: List[Node] = built
        self._engine: DigestEngine = engine
        self._lock = threading.RLock()

    @classmethod
    def create(cls, depth: int, algorithm: str = DEFAULT_ALGORITHM) -> DenseMerkleTree:
        """Create a clean tree with every digest absent."""
        return cls(depth, algorithm=algorithm)

    @classmethod
    def from_nodes(
        cls, depth: int, nodes: Sequence[Node], algorithm: str = DEFAULT_ALGORITHM
    ) -> DenseMerkleTree:
        """Build a tree from copies of an already populated node array."""
        return cls(depth, nodes, algorithm=algorithm)

    # Properties
    @property
    def depth(self) -> int:
        return self._depth

    @property
    def capacity(self) -> int:
        return leaf_count(self._depth)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def algorithm(self) -> str:
        return self._engine.algorithm

    @property
    def is_populated(self) -> bool:
        return self.root_digest() is not None

    # Digest maintenance
    def _combine(self, left: Optional[str], right: Optional[str]) -> Optional[str]:
        if left is None:
            return right
        if right is None:
            return left
        return self._engine.combine(left, right)

    def _digest_from_children(self, node_id: int) -> Optional[str]:
        nodes = self._nodes
        children = children_of(node_id)
        return self._combine(
            nodes[children[LEFT] - 1].digest, nodes[children[RIGHT] - 1].digest
        )

    def _recompute_all(self) -> None:
        # Reverse id order visits every level before the one above it
        nodes = self._nodes
        for node_id in range(first_leaf_id(self._depth) - 1, 0, -1):
            nodes[node_id - 1].digest = self._digest_from_children(node_id)

    def _recompute_path(self, node_id: int) -> None:
        father = father_of(node_id)
        while father is not None:
            self._nodes[father - 1].digest = self._digest_from_children(father)
            father = father_of(father)

    def set_all_leaves(self, hashes: Sequence[str]) -> bool:
        """
        Replace every leaf digest and recompute all internal digests.

        Args:
            hashes: Exactly ``2^depth`` digests, oldest first.

        Returns:
            bool: True once the whole tree has been recomputed.

        Raises:
            RangeMismatchError: If the sequence length is not ``2^depth``.
            TypeError: If any entry is not a str.
        """
        if hashes is None:
            raise RangeMismatchError("leaf digests not provided")
        hashes = list(hashes)
        expected = leaf_count(self._depth)
        if len(hashes) != expected:
            raise RangeMismatchError(
                f"the leaf range holds {expected} digests, got {len(hashes)}"
            )
        for digest in hashes:
            _validate_digest(digest)

        with self._lock:
            start = first_leaf_id(self._depth) - 1
            for idx, digest in enumerate(hashes, start):
                self._nodes[idx].digest = digest
            self._recompute_all()
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("set_all_leaves depth=%d root=%s", self._depth, self._nodes[0].digest)
        return True

    def set_leaf(self, offset: int, digest: str) -> bool:
        """
        Update a single leaf and the path above it in O(depth).

        Args:
            offset: 1-based offset into the leaf row (1 = oldest).
            digest: The new leaf digest.

        Returns:
            bool: False when ``offset`` is outside ``[1, 2^depth]``.
        """
        _validate_digest(digest)
        if offset < 1 or offset > leaf_count(self._depth):
            logger.debug("set_leaf ignored: offset %d outside depth %d", offset, self._depth)
            return False

        node_id = first_leaf_id(self._depth) + offset - 1
        with self._lock:
            self._nodes[node_id - 1].digest = digest
            self._recompute_path(node_id)
        return True

    def push(self, digest: str) -> bool:
        """
        Admit ``digest`` as the newest transaction, evicting the oldest one.

        Every leaf shifts one slot towards the oldest end before the whole
        tree is recomputed, so a push costs ``O(2^depth)``.
        """
        _validate_digest(digest)
        with self._lock:
            nodes = self._nodes
            start = first_leaf_id(self._depth) - 1
            end = last_leaf_id(self._depth) - 1
            for idx in range(start, end):
                nodes[idx].digest = nodes[idx + 1].digest
            nodes[end].digest = digest
            self._recompute_all()
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("push depth=%d newest=%s root=%s", self._depth, digest, nodes[0].digest)
        return True

    # Queries
    def root_digest(self) -> Optional[str]:
        """The root digest, None while no leaf has been populated."""
        with self._lock:
            return self._nodes[0].digest

    def digest_at(self, node_id: int) -> Optional[str]:
        """The digest stored at ``node_id``, None when unset or out of range."""
        if node_id < 1 or node_id > len(self._nodes):
            return None
        with self._lock:
            return self._nodes[node_id - 1].digest

    def offset_digest(self, offset: int) -> Optional[str]:
        """The leaf digest at 1-based ``offset`` (1 = oldest), None when out of range."""
        if offset < 1 or offset > leaf_count(self._depth):
            return None
        with self._lock:
            return self._nodes[first_leaf_id(self._depth) + offset - 2].digest

    def _range_digest(self, qlevels: int, side: int) -> Optional[str]:
        if qlevels < 1 or qlevels > self._depth:
            return None
        with self._lock:
            current = 1
            for _ in range(self._depth - qlevels):
                current = children_of(current)[side]
            return self._nodes[current - 1].digest

    def range_digest_from_newest(self, qlevels: int) -> Optional[str]:
        """
        Digest summarising the newest ``2^qlevels`` transactions.

        The subtree root is reached by descending right from the root
        ``depth - qlevels`` times; its stored digest needs no recomputation.
        For ``qlevels == depth`` this is the root digest.
        """
        return self._range_digest(qlevels, RIGHT)

    def range_digest_from_oldest(self, qlevels: int) -> Optional[str]:
        """Digest summarising the oldest ``2^qlevels`` transactions."""
        return self._range_digest(qlevels, LEFT)

    def leaves(self) -> List[Optional[str]]:
        """Snapshot of the leaf row, oldest first."""
        with self._lock:
            return [node.digest for node in self._nodes[first_leaf_id(self._depth) - 1:]]

    def snapshot(self) -> List[Node]:
        """Independent copies of every node, in id order."""
        with self._lock:
            return [node.copy() for node in self._nodes]

    def _internal_digests(self) -> List[Tuple[int, Optional[str], Optional[str]]]:
        """``(id, stored, recomputed)`` for every internal node, root first."""
        with self._lock:
            return [
                (node_id, self._nodes[node_id - 1].digest, self._digest_from_children(node_id))
                for node_id in range(1, first_leaf_id(self._depth))
            ]

    def verify_integrity(self) -> bool:
        """Whether every internal digest agrees with its children."""
        from mair.invariants import verify_integrity
        return verify_integrity(self)

    # Addressing diagnostics
    def sibling_id(self, node_id: int) -> Optional[int]:
        if node_id < 1 or node_id > len(self._nodes):
            return None
        return sibling_of(node_id)

    def is_left_child(self, node_id: int) -> Optional[bool]:
        if node_id < 1 or node_id > len(self._nodes):
            return None
        return is_left_child(node_id)

    # Equality, copying and display
    def structural_equals(self, other: DenseMerkleTree) -> bool:
        """True when both root digests are present and equal ignoring case."""
        if other is self:
            return self.root_digest() is not None
        if not isinstance(other, DenseMerkleTree):
            return False
        mine = self.root_digest()
        theirs = other.root_digest()
        if mine is None or theirs is None:
            return False
        return mine.lower() == theirs.lower()

    def __eq__(self, other):
        if not isinstance(other, DenseMerkleTree):
            return NotImplemented
        return self.structural_equals(other)

    __hash__ = None

    def clone(self) -> DenseMerkleTree:
        """A deep copy sharing no mutable state with this tree."""
        return DenseMerkleTree(self._depth, self.snapshot(), algorithm=self.algorithm)

    def __copy__(self) -> DenseMerkleTree:
        return self.clone()

    def __deepcopy__(self, memo) -> DenseMerkleTree:
        return self.clone()

    def render(self) -> str:
        """One line per node, ascending id: id, father, children, digest."""
        with self._lock:
            return render_nodes(self._depth, self._nodes)

    def __str__(self):
        return self.render()

    def __repr__(self) -> str:
        return f"DenseMerkleTree(depth={self._depth}, root={self.root_digest()!r})"
