#!/usr/bin/env python3
"""
Script to measure the cost of push, set_leaf and partial-range queries
on dense Merkle trees of different depths.
"""
import argparse
import logging
import random
import time

import numpy as np
from tqdm import tqdm

from mair.bd_tree import DenseMerkleTree
from mair.digest import get_digest_engine

logger = logging.getLogger(__name__)


def filled_tree(depth: int, rng: random.Random) -> DenseMerkleTree:
    engine = get_digest_engine()
    tree = DenseMerkleTree(depth)
    tree.set_all_leaves([engine.digest_of(str(rng.random())) for _ in range(2 ** depth)])
    return tree


def time_operation(fn, repetitions: int, desc: str) -> np.ndarray:
    """Run ``fn(i)`` ``repetitions`` times and return the timings in seconds."""
    timings = np.empty(repetitions, dtype=np.float64)
    for i in tqdm(range(repetitions), desc=desc, leave=False):
        t0 = time.perf_counter()
        fn(i)
        timings[i] = time.perf_counter() - t0
    return timings


def summarize(name: str, depth: int, timings: np.ndarray) -> None:
    logger.info(
        f"{name:<14}{depth:>6}{np.mean(timings) * 1e6:>14.2f}"
        f"{np.percentile(timings, 95) * 1e6:>14.2f}{np.max(timings) * 1e6:>14.2f}"
    )


def main():
    parser = argparse.ArgumentParser(description="Benchmark dense Merkle tree operations.")
    parser.add_argument("--depths", type=int, nargs="+", default=[4, 8, 12, 16], help="Tree depths to test.")
    parser.add_argument("--repetitions", type=int, default=200, help="Operations timed per depth.")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(message)s", force=True)
    rng = random.Random(args.seed)

    header = f"{'Operation':<14}{'Depth':>6}{'Mean(us)':>14}{'P95(us)':>14}{'Max(us)':>14}"
    logger.info(header)
    logger.info("-" * len(header))

    for depth in tqdm(args.depths, desc="Depths"):
        tree = filled_tree(depth, rng)
        capacity = tree.capacity

        summarize("push", depth, time_operation(
            lambda i: tree.push(f"bench-{i}"), args.repetitions, f"push d={depth}"))
        summarize("set_leaf", depth, time_operation(
            lambda i: tree.set_leaf(1 + i % capacity, f"leaf-{i}"), args.repetitions, f"set_leaf d={depth}"))
        summarize("range_newest", depth, time_operation(
            lambda i: tree.range_digest_from_newest(1 + i % depth), args.repetitions, f"range d={depth}"))


if __name__ == '__main__':
    main()
