"""Configuration for integrity registries."""

import logging
import os
from dataclasses import dataclass

from mair.addressing import MAX_DEPTH, MIN_DEPTH
from mair.digest import DEFAULT_ALGORITHM
from mair.errors import InvalidDepthError
from mair.logging_config import setup_logging

DEFAULT_DEPTH = 8


@dataclass
class IntegrityConfig:
    """Settings shared by every tree a registry creates."""

    # Tree shape: each adapter retains 2^depth transactions
    depth: int = DEFAULT_DEPTH
    algorithm: str = DEFAULT_ALGORITHM

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        if not MIN_DEPTH <= self.depth <= MAX_DEPTH:
            raise InvalidDepthError(
                f"depth must lie in [{MIN_DEPTH}, {MAX_DEPTH}], got {self.depth}"
            )
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls) -> "IntegrityConfig":
        """Create config from environment variables."""
        return cls(
            depth=int(os.environ.get("MAIR_DEPTH", str(DEFAULT_DEPTH))),
            algorithm=os.environ.get("MAIR_DIGEST_ALGORITHM", DEFAULT_ALGORITHM),
            log_level=os.environ.get("MAIR_LOG_LEVEL", "INFO"),
        )

    def configure_logging(self) -> logging.Logger:
        return setup_logging(self.log_level)
