from typing import Optional, Tuple

from mair.addressing import children_of, father_of, is_left_child
from mair.errors import InvalidNodeError


class Node:
    """
    A slot in the flat node array of a dense tree.

    Only the id and the digest are stored; father, children and side are
    recomputed from the id on demand.
    """
    __slots__ = ("id", "digest")

    def __init__(self, node_id: int, digest: Optional[str] = None):
        if not isinstance(node_id, int) or isinstance(node_id, bool) or node_id < 1:
            raise InvalidNodeError(f"invalid node id {node_id!r}")
        self.id = node_id
        self.digest = digest

    @property
    def is_left(self) -> bool:
        return is_left_child(self.id)

    @property
    def father(self) -> Optional[int]:
        return father_of(self.id)

    def children(self, depth: int) -> Optional[Tuple[int, int]]:
        """Child ids within a tree of ``depth``, None for leaves."""
        return children_of(self.id, depth)

    def copy(self) -> "Node":
        return Node(self.id, self.digest)

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return self.id == other.id and self.digest == other.digest

    __hash__ = None

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, digest={self.digest!r})"

    def __str__(self):
        digest = self.digest if self.digest is not None else "-"
        return f"Node({self.id}, {digest})"
