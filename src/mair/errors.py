"""Error kinds raised by the integrity record structures.

Structural and configuration problems raise. Lookups that miss (an offset
outside the leaf row, an unknown adapter) are reported as ``None`` or
``False`` by the operation itself and never reach this module.
"""


class MairError(Exception):
    """Base class for all mair errors."""


class InvalidDepthError(MairError, ValueError):
    """Raised when a tree depth falls outside ``[MIN_DEPTH, MAX_DEPTH]``."""


class SizeMismatchError(MairError, ValueError):
    """Raised when a node array does not match the node count of its depth."""


class RangeMismatchError(MairError, ValueError):
    """Raised when a leaf sequence does not match the leaf capacity."""


class InvalidNodeError(MairError, ValueError):
    """Raised for node ids below 1 or nodes stored out of id order."""


class InvalidRoleError(MairError, ValueError):
    """Raised when an adapter record is created with an unknown role."""


class DigestUnavailableError(MairError, RuntimeError):
    """Raised when the hash primitive cannot be initialized."""
