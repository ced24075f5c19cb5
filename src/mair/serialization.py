"""
Persisted form of a tree: ``(depth, [(id, digest or None), ...])``.

Only the ids and digests are written; addressing is recomputed on load.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional, Tuple

from mair.base import Node
from mair.bd_tree import DenseMerkleTree
from mair.digest import DEFAULT_ALGORITHM

FORMAT_VERSION = 1


def to_records(tree: DenseMerkleTree) -> List[Tuple[int, Optional[str]]]:
    return [(node.id, node.digest) for node in tree.snapshot()]


def from_records(
    depth: int,
    records: Iterable[Tuple[int, Optional[str]]],
    algorithm: str = DEFAULT_ALGORITHM,
) -> DenseMerkleTree:
    """
    Rebuild a tree from its ordered ``(id, digest)`` records.

    Raises:
        SizeMismatchError: If the record count differs from the node count.
        InvalidNodeError: If a record id is invalid or out of order.
    """
    nodes = [Node(int(node_id), digest) for node_id, digest in records]
    return DenseMerkleTree.from_nodes(depth, nodes, algorithm=algorithm)


def tree_to_dict(tree: DenseMerkleTree) -> dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "depth": tree.depth,
        "algorithm": tree.algorithm,
        "nodes": [[node_id, digest] for node_id, digest in to_records(tree)],
    }


def tree_from_dict(data: dict[str, Any]) -> DenseMerkleTree:
    version = data.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise ValueError(f"unsupported tree format version {version!r}")
    return from_records(
        data["depth"],
        ((node_id, digest) for node_id, digest in data["nodes"]),
        algorithm=data.get("algorithm", DEFAULT_ALGORITHM),
    )


def dumps(tree: DenseMerkleTree) -> str:
    return json.dumps(tree_to_dict(tree), separators=(",", ":"))


def loads(text: str) -> DenseMerkleTree:
    return tree_from_dict(json.loads(text))
