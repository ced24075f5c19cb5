"""Tests for newest/oldest partial-range digests."""

import unittest

from mair.bd_tree import DenseMerkleTree

from tests.base import BaseTreeTestCase
from tests.utils import fold_root, md5_hex, numbered_leaves


class TestPartialRanges(BaseTreeTestCase):

    def setUp(self):
        self.leaves = [md5_hex(f"tx-{i}") for i in range(16)]
        self.make_tree(4, self.leaves)

    def test_full_depth_is_root(self):
        root = self.tree.root_digest()
        self.assertEqual(self.tree.range_digest_from_newest(4), root)
        self.assertEqual(self.tree.range_digest_from_oldest(4), root)

    def test_newest_ranges(self):
        for q in range(1, 5):
            with self.subTest(q=q):
                expected = fold_root(self.leaves[-(2 ** q):])
                self.assertEqual(self.tree.range_digest_from_newest(q), expected)

    def test_oldest_ranges(self):
        for q in range(1, 5):
            with self.subTest(q=q):
                expected = fold_root(self.leaves[:2 ** q])
                self.assertEqual(self.tree.range_digest_from_oldest(q), expected)

    def test_range_nodes(self):
        # newest 2 leaves hang under node 15, oldest 2 under node 8
        self.assertEqual(self.tree.range_digest_from_newest(1), self.tree.digest_at(15))
        self.assertEqual(self.tree.range_digest_from_oldest(1), self.tree.digest_at(8))
        self.assertEqual(self.tree.range_digest_from_newest(3), self.tree.digest_at(3))
        self.assertEqual(self.tree.range_digest_from_oldest(3), self.tree.digest_at(2))

    def test_out_of_range(self):
        for q in (0, -1, 5, 30):
            with self.subTest(q=q):
                self.assertIsNone(self.tree.range_digest_from_newest(q))
                self.assertIsNone(self.tree.range_digest_from_oldest(q))

    def test_ranges_follow_push(self):
        self.tree.push("17")
        self.leaves = self.leaves[1:] + ["17"]
        self.assertEqual(self.tree.range_digest_from_newest(1), md5_hex(f"{self.leaves[-2]}.17"))
        self.assertEqual(self.tree.range_digest_from_oldest(2), fold_root(self.leaves[:4]))


class TestPartialRangesOnSparseTree(BaseTreeTestCase):

    def test_clean_tree(self):
        tree = self.make_tree(3)
        for q in range(1, 4):
            self.assertIsNone(tree.range_digest_from_newest(q))
            self.assertIsNone(tree.range_digest_from_oldest(q))

    def test_oldest_absent_while_newest_present(self):
        tree = self.make_tree(3)
        tree.push("a")
        tree.push("b")
        self.assertEqual(tree.range_digest_from_newest(1), md5_hex("a.b"))
        self.assertIsNone(tree.range_digest_from_oldest(2))
        self.assertEqual(tree.range_digest_from_oldest(3), md5_hex("a.b"))


class TestPartialRangesSmallDepth(unittest.TestCase):

    def test_depth_one(self):
        tree = DenseMerkleTree(1)
        tree.set_all_leaves(numbered_leaves(2))
        self.assertEqual(tree.range_digest_from_newest(1), md5_hex("1.2"))
        self.assertEqual(tree.range_digest_from_oldest(1), md5_hex("1.2"))
        self.assertIsNone(tree.range_digest_from_newest(2))


if __name__ == "__main__":
    unittest.main()
