"""Factory helpers for dense Merkle trees."""

from mair.addressing import depth_for_capacity
from mair.bd_tree import DenseMerkleTree
from mair.digest import DEFAULT_ALGORITHM


def create_bdtree(depth: int, algorithm: str = DEFAULT_ALGORITHM) -> DenseMerkleTree:
    """
    Create a new clean tree with ``2^depth`` leaf slots.

    Parameters:
        depth (int): Number of levels below the root, in ``[1, 25]``
        algorithm (str): ``hashlib`` algorithm name used to combine digests

    Returns:
        DenseMerkleTree: A tree with every digest absent
    """
    return DenseMerkleTree.create(depth, algorithm=algorithm)


def create_bdtree_for_capacity(n: int, algorithm: str = DEFAULT_ALGORITHM) -> DenseMerkleTree:
    """
    Create the smallest tree retaining at least ``n`` transactions.

    Parameters:
        n (int): Number of transactions to retain

    Returns:
        DenseMerkleTree: A clean tree of depth ``depth_for_capacity(n)``
    """
    return create_bdtree(depth_for_capacity(n), algorithm=algorithm)
