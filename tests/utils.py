"""Reference helpers for testing dense Merkle trees."""

import hashlib
import logging
from typing import List, Optional, Sequence


def md5_hex(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def combine_ref(left: Optional[str], right: Optional[str]) -> Optional[str]:
    """Pass-through combining rule written out independently of the library."""
    if left is None:
        return right
    if right is None:
        return left
    return md5_hex(f"{left}.{right}")


def fold_levels(leaves: Sequence[Optional[str]]) -> List[List[Optional[str]]]:
    """All levels of the tree over ``leaves``, leaf row first, root row last."""
    levels = [list(leaves)]
    while len(levels[-1]) > 1:
        row = levels[-1]
        levels.append([combine_ref(row[i], row[i + 1]) for i in range(0, len(row), 2)])
    return levels


def fold_root(leaves: Sequence[Optional[str]]) -> Optional[str]:
    return fold_levels(leaves)[-1][0]


def numbered_leaves(count: int, start: int = 1) -> List[str]:
    return [str(i) for i in range(start, start + count)]


def get_test_logger(name: str) -> logging.Logger:
    """DEBUG-level logger for test modules, kept apart from the ``mair`` tree."""
    logger = logging.getLogger(f"Tests.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(message)s'))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
    return logger
