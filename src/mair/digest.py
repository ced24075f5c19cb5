"""Hex digest engine used to combine two child digests into their parent."""

from __future__ import annotations

import hashlib
import threading

from mair.errors import DigestUnavailableError
from mair.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_ALGORITHM = "md5"
SEPARATOR = "."


class DigestEngine:
    """
    Wraps a ``hashlib`` primitive behind the textual digest contract.

    Digests travel as lowercase hex strings, two characters per byte. Two
    digests are combined by hashing the UTF-8 bytes of ``left + "." + right``,
    i.e. the hex text itself, not the raw bytes it encodes.
    """

    __slots__ = ("algorithm", "_prototype")

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM):
        try:
            prototype = hashlib.new(algorithm)
        except (ValueError, TypeError) as exc:
            raise DigestUnavailableError(
                f"hash algorithm {algorithm!r} is not available: {exc}"
            ) from exc
        self.algorithm = algorithm
        self._prototype = prototype

    def combine(self, left: str, right: str) -> str:
        """Digest of two present child digests."""
        h = self._prototype.copy()
        h.update(f"{left}{SEPARATOR}{right}".encode("utf-8"))
        return h.hexdigest()

    def digest_of(self, payload: str | bytes) -> str:
        """Digest of a raw transaction payload, for callers building leaves."""
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        h = self._prototype.copy()
        h.update(payload)
        return h.hexdigest()

    def __repr__(self) -> str:
        return f"DigestEngine(algorithm={self.algorithm!r})"


# Engines are immutable, so one per algorithm is shared by every tree
_engine_cache: dict[str, DigestEngine] = {}
_engine_cache_lock = threading.Lock()


def get_digest_engine(algorithm: str = DEFAULT_ALGORITHM) -> DigestEngine:
    """
    Return the shared engine for ``algorithm``, creating it on first use.

    Raises:
        DigestUnavailableError: If ``hashlib`` cannot provide the algorithm.
    """
    engine = _engine_cache.get(algorithm)
    if engine is not None:
        return engine

    with _engine_cache_lock:
        engine = _engine_cache.get(algorithm)
        if engine is None:
            engine = DigestEngine(algorithm)
            _engine_cache[algorithm] = engine
            logger.debug("Initialized digest engine for %s", algorithm)
    return engine
