"""
Integrity records for measurement adapters grouped by project.

Each ``(project_id, adapter_id)`` pair owns an independent
:class:`DenseMerkleTree` retaining its last ``2^depth`` transaction
digests. Records are created lazily on the first accepted write.
"""

from __future__ import annotations

import threading
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from mair.bd_tree import DenseMerkleTree
from mair.config import IntegrityConfig
from mair.digest import DEFAULT_ALGORITHM
from mair.errors import InvalidRoleError
from mair.logging_config import get_logger

logger = get_logger(__name__)


class AdapterRole(IntEnum):
    DATA_COLLECTOR = 0
    GATEWAY = 1
    BLOCKED = 2
    COOPERATIVE = 3


def is_valid_role(role) -> bool:
    if isinstance(role, bool):
        return False
    try:
        AdapterRole(role)
    except ValueError:
        return False
    return True


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not isinstance(value, str) or not value.strip()


def _matches(stored: Optional[str], claimed: Optional[str]) -> bool:
    if _is_blank(stored) or _is_blank(claimed):
        return False
    return stored.lower() == claimed.lower()


class AdapterIntegrityRecord:
    """
    Integrity record of a single measurement adapter.

    Wraps the adapter's tree together with its current role. The record is
    the handle the registry hands out; all writes go through its lock so that
    a role change and the matching push are applied together.
    """

    __slots__ = ("tree", "_role", "_lock")

    def __init__(
        self,
        depth: int,
        role: int = AdapterRole.DATA_COLLECTOR,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        if not is_valid_role(role):
            raise InvalidRoleError(f"undefined adapter role {role!r}")
        self.tree = DenseMerkleTree.create(depth, algorithm=algorithm)
        self._role = AdapterRole(role)
        self._lock = threading.Lock()

    @property
    def current_role(self) -> AdapterRole:
        return self._role

    @current_role.setter
    def current_role(self, role: int) -> None:
        if not is_valid_role(role):
            raise InvalidRoleError(f"undefined adapter role {role!r}")
        self._role = AdapterRole(role)

    @property
    def depth(self) -> int:
        return self.tree.depth

    def add_transaction(self, role: int, digest: str) -> bool:
        """
        Append a transaction digest, discarding the oldest one.

        Returns:
            bool: False when the role is undefined or the digest is blank.
        """
        if _is_blank(digest) or not is_valid_role(role):
            logger.warning("Rejected transaction (role=%r, digest=%r)", role, digest)
            return False
        with self._lock:
            self._role = AdapterRole(role)
            return self.tree.push(digest)

    def push(self, digest: str) -> bool:
        """Append a digest keeping the current role."""
        return self.add_transaction(self._role, digest)

    # Queries
    def root_digest(self) -> Optional[str]:
        return self.tree.root_digest()

    def offset_digest(self, offset: int) -> Optional[str]:
        return self.tree.offset_digest(offset)

    def range_digest_from_newest(self, qlevels: int) -> Optional[str]:
        return self.tree.range_digest_from_newest(qlevels)

    def range_digest_from_oldest(self, qlevels: int) -> Optional[str]:
        return self.tree.range_digest_from_oldest(qlevels)

    # Verification
    def has_whole_integrity(self, digest: str) -> bool:
        """Whether ``digest`` matches the root digest, ignoring case."""
        return _matches(self.tree.root_digest(), digest)

    def verify_integrity_firsts(self, digest: str, qlevels: int) -> bool:
        """Whether ``digest`` summarises the oldest ``2^qlevels`` transactions."""
        if _is_blank(digest):
            return False
        return _matches(self.tree.range_digest_from_oldest(qlevels), digest)

    def verify_integrity_lasts(self, digest: str, qlevels: int) -> bool:
        """Whether ``digest`` summarises the newest ``2^qlevels`` transactions."""
        if _is_blank(digest):
            return False
        return _matches(self.tree.range_digest_from_newest(qlevels), digest)

    def verify_transaction_integrity(self, digest: str, offset: int) -> bool:
        """Whether ``digest`` is the transaction at ``offset`` (1 = oldest)."""
        if _is_blank(digest):
            return False
        return _matches(self.tree.offset_digest(offset), digest)

    def show(self) -> str:
        return self.tree.render()

    def __str__(self):
        return self.show()

    def __repr__(self) -> str:
        return f"AdapterIntegrityRecord(depth={self.depth}, role={self._role.name})"


RecordKey = Tuple[str, str]


class IntegrityRegistry:
    """
    Routes transactions to per-adapter records keyed by ``(project, adapter)``.

    A single flat map replaces a project -> adapter nesting. The registry lock
    only guards lazy creation, so at most one record is ever created per
    pair; writes and queries then run under the record's own locks, and
    distinct pairs proceed in parallel.
    """

    def __init__(self, config: Optional[IntegrityConfig] = None):
        self.config = config if config is not None else IntegrityConfig()
        self._records: Dict[RecordKey, AdapterIntegrityRecord] = {}
        self._lock = threading.Lock()

    @property
    def depth(self) -> int:
        return self.config.depth

    def ensure_tree(
        self,
        project_id: str,
        adapter_id: str,
        depth: Optional[int] = None,
        role: int = AdapterRole.DATA_COLLECTOR,
    ) -> AdapterIntegrityRecord:
        """
        Return the record of ``(project_id, adapter_id)``, creating it if absent.

        ``depth`` and ``role`` only apply when the record is created.

        Raises:
            ValueError: If either identifier is blank.
            InvalidDepthError: If ``depth`` is out of range.
            InvalidRoleError: If ``role`` is undefined.
        """
        if _is_blank(project_id) or _is_blank(adapter_id):
            raise ValueError("project and adapter identifiers must be non-blank strings")
        key = (project_id, adapter_id)
        record = self._records.get(key)
        if record is not None:
            return record

        with self._lock:
            record = self._records.get(key)
            if record is None:
                record = AdapterIntegrityRecord(
                    depth if depth is not None else self.config.depth,
                    role,
                    algorithm=self.config.algorithm,
                )
                self._records[key] = record
                logger.info(
                    "Created integrity record project=%s adapter=%s depth=%d",
                    project_id, adapter_id, record.depth,
                )
        return record

    def get(self, project_id: str, adapter_id: str) -> Optional[AdapterIntegrityRecord]:
        return self._records.get((project_id, adapter_id))

    def add_transaction(self, project_id: str, adapter_id: str, role: int, digest: str) -> bool:
        """
        Record a transaction digest for an adapter, creating its record on first use.

        Returns:
            bool: False for blank identifiers, undefined roles or blank digests.
        """
        if _is_blank(project_id) or _is_blank(adapter_id):
            logger.warning("Rejected transaction with blank project/adapter id")
            return False
        if not is_valid_role(role) or _is_blank(digest):
            logger.warning(
                "Rejected transaction for project=%s adapter=%s (role=%r)",
                project_id, adapter_id, role,
            )
            return False
        record = self.ensure_tree(project_id, adapter_id, role=role)
        return record.add_transaction(role, digest)

    # Queries (None for unknown pairs)
    def root_digest(self, project_id: str, adapter_id: str) -> Optional[str]:
        record = self.get(project_id, adapter_id)
        return record.root_digest() if record is not None else None

    def offset_digest(self, project_id: str, adapter_id: str, offset: int) -> Optional[str]:
        record = self.get(project_id, adapter_id)
        return record.offset_digest(offset) if record is not None else None

    def range_digest_from_newest(self, project_id: str, adapter_id: str, qlevels: int) -> Optional[str]:
        record = self.get(project_id, adapter_id)
        return record.range_digest_from_newest(qlevels) if record is not None else None

    def range_digest_from_oldest(self, project_id: str, adapter_id: str, qlevels: int) -> Optional[str]:
        record = self.get(project_id, adapter_id)
        return record.range_digest_from_oldest(qlevels) if record is not None else None

    # Verification (False for unknown pairs)
    def has_whole_integrity(self, project_id: str, adapter_id: str, digest: str) -> bool:
        record = self.get(project_id, adapter_id)
        return record is not None and record.has_whole_integrity(digest)

    def verify_integrity_firsts(self, project_id: str, adapter_id: str, digest: str, qlevels: int) -> bool:
        record = self.get(project_id, adapter_id)
        return record is not None and record.verify_integrity_firsts(digest, qlevels)

    def verify_integrity_lasts(self, project_id: str, adapter_id: str, digest: str, qlevels: int) -> bool:
        record = self.get(project_id, adapter_id)
        return record is not None and record.verify_integrity_lasts(digest, qlevels)

    def verify_transaction_integrity(self, project_id: str, adapter_id: str, digest: str, offset: int) -> bool:
        record = self.get(project_id, adapter_id)
        return record is not None and record.verify_transaction_integrity(digest, offset)

    def show(self, project_id: str, adapter_id: str) -> Optional[str]:
        record = self.get(project_id, adapter_id)
        return record.show() if record is not None else None

    # Introspection
    def projects(self) -> List[str]:
        with self._lock:
            return sorted({project for project, _ in self._records})

    def adapters(self, project_id: str) -> List[str]:
        with self._lock:
            return sorted(adapter for project, adapter in self._records if project == project_id)

    def __contains__(self, key) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)
