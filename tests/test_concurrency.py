"""Tests for per-tree locking and lazy record creation under threads."""

import threading
import unittest

from mair.bd_tree import DenseMerkleTree
from mair.config import IntegrityConfig
from mair.invariants import check_tree_invariants
from mair.records import AdapterRole, IntegrityRegistry

from tests.utils import fold_root

WORKERS = 8
PUSHES_PER_WORKER = 50


class TestTreeLocking(unittest.TestCase):

    def test_concurrent_pushes_keep_tree_consistent(self):
        tree = DenseMerkleTree(4)
        barrier = threading.Barrier(WORKERS)

        def writer(worker):
            barrier.wait()
            for i in range(PUSHES_PER_WORKER):
                tree.push(f"w{worker}-{i}")

        threads = [threading.Thread(target=writer, args=(w,)) for w in range(WORKERS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        check_tree_invariants(tree)
        leaves = tree.leaves()
        self.assertNotIn(None, leaves)
        self.assertEqual(len(set(leaves)), len(leaves))
        self.assertEqual(tree.root_digest(), fold_root(leaves))

    def test_readers_see_consistent_roots(self):
        tree = DenseMerkleTree(3)
        seen = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                leaves_and_root = tree.clone()
                seen.append((leaves_and_root.leaves(), leaves_and_root.root_digest()))

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            for i in range(200):
                tree.push(f"d{i}")
        finally:
            stop.set()
            thread.join()

        for leaves, root in seen:
            self.assertEqual(root, fold_root(leaves))


class TestRegistryLazyCreation(unittest.TestCase):

    def test_single_record_per_pair(self):
        registry = IntegrityRegistry(IntegrityConfig(depth=3))
        barrier = threading.Barrier(WORKERS)
        records = []

        def first_write(worker):
            barrier.wait()
            records.append(registry.ensure_tree("project", "adapter"))
            registry.add_transaction("project", "adapter", AdapterRole.DATA_COLLECTOR, f"tx{worker}")

        threads = [threading.Thread(target=first_write, args=(w,)) for w in range(WORKERS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(registry), 1)
        self.assertTrue(all(record is records[0] for record in records))
        leaves = records[0].tree.leaves()
        self.assertEqual(sorted(leaves), sorted(f"tx{w}" for w in range(WORKERS)))


if __name__ == "__main__":
    unittest.main()
