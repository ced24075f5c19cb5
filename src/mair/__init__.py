"""
mair: measurement adapter integrity records over dense binary Merkle trees.

Quick-start imports::

    from mair import DenseMerkleTree, IntegrityRegistry, AdapterRole

See the individual modules for the full public surface.
"""

# Addressing & digests
from mair.addressing import MAX_DEPTH, MIN_DEPTH, depth_for_capacity
from mair.base import Node
from mair.bd_tree import DenseMerkleTree
from mair.config import IntegrityConfig
from mair.digest import DigestEngine, get_digest_engine

# Errors
from mair.errors import (
    DigestUnavailableError,
    InvalidDepthError,
    InvalidNodeError,
    InvalidRoleError,
    MairError,
    RangeMismatchError,
    SizeMismatchError,
)
from mair.factory import create_bdtree, create_bdtree_for_capacity
from mair.invariants import InvariantError, check_tree_invariants

# Records
from mair.records import AdapterIntegrityRecord, AdapterRole, IntegrityRegistry
from mair.tree_stats import TreeStats, bdtree_stats_

__all__ = [
    "MAX_DEPTH",
    "MIN_DEPTH",
    "AdapterIntegrityRecord",
    "AdapterRole",
    "DenseMerkleTree",
    "DigestEngine",
    "DigestUnavailableError",
    "IntegrityConfig",
    "IntegrityRegistry",
    "InvalidDepthError",
    "InvalidNodeError",
    "InvalidRoleError",
    "InvariantError",
    "MairError",
    "Node",
    "RangeMismatchError",
    "SizeMismatchError",
    "TreeStats",
    "bdtree_stats_",
    "check_tree_invariants",
    "create_bdtree",
    "create_bdtree_for_capacity",
    "depth_for_capacity",
    "get_digest_engine",
]
