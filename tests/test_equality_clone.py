"""Tests for structural equality, cloning and rendering."""

import copy
import unittest

from mair.bd_tree import DenseMerkleTree
from mair.display import print_pretty, render_nodes

from tests.base import BaseTreeTestCase
from tests.utils import md5_hex, numbered_leaves


class TestStructuralEquality(unittest.TestCase):

    def _tree(self, leaves):
        tree = DenseMerkleTree(2)
        tree.set_all_leaves(leaves)
        return tree

    def test_reflexive_symmetric_transitive(self):
        a = self._tree(["a", "b", "c", "d"])
        b = self._tree(["a", "b", "c", "d"])
        c = a.clone()
        self.assertTrue(a.structural_equals(a))
        self.assertTrue(a.structural_equals(b))
        self.assertTrue(b.structural_equals(a))
        self.assertTrue(b.structural_equals(c))
        self.assertTrue(a.structural_equals(c))
        self.assertEqual(a, b)

    def test_case_insensitive(self):
        digests = [md5_hex(s) for s in "abcd"]
        lower = DenseMerkleTree.from_nodes(2, self._tree(digests).snapshot())
        upper_nodes = lower.snapshot()
        upper_nodes[0].digest = upper_nodes[0].digest.upper()
        upper = DenseMerkleTree.from_nodes(2, upper_nodes)
        self.assertNotEqual(lower.root_digest(), upper.root_digest())
        self.assertTrue(lower.structural_equals(upper))
        self.assertTrue(upper.structural_equals(lower))

    def test_different_roots(self):
        self.assertNotEqual(self._tree(["a", "b", "c", "d"]), self._tree(["a", "b", "c", "e"]))

    def test_absent_roots_never_equal(self):
        a = DenseMerkleTree(2)
        b = DenseMerkleTree(2)
        self.assertFalse(a.structural_equals(b))
        self.assertFalse(a.structural_equals(a))
        self.assertFalse(a.structural_equals(self._tree(["a", "b", "c", "d"])))

    def test_equal_roots_different_structure(self):
        # a lone leaf passes through, so both roots equal "x"
        a = DenseMerkleTree(2)
        a.set_leaf(1, "x")
        b = DenseMerkleTree(3)
        b.push("x")
        self.assertTrue(a.structural_equals(b))

    def test_other_types(self):
        tree = self._tree(["a", "b", "c", "d"])
        self.assertFalse(tree.structural_equals("not a tree"))
        self.assertNotEqual(tree, tree.root_digest())

    def test_unhashable(self):
        with self.assertRaises(TypeError):
            hash(DenseMerkleTree(1))


class TestClone(BaseTreeTestCase):

    def test_clone_is_independent(self):
        tree = self.make_tree(3, numbered_leaves(8))
        twin = tree.clone()
        self.assertEqual(twin, tree)
        self.assertEqual(twin.snapshot(), tree.snapshot())

        twin.push("9")
        self.assertNotEqual(twin, tree)
        self.expected_leaves = numbered_leaves(8)
        self.assertEqual(twin.leaves(), numbered_leaves(7, start=2) + ["9"])

    def test_clone_of_clean_tree(self):
        tree = self.make_tree(2)
        twin = tree.clone()
        self.assertIsNone(twin.root_digest())
        self.assertEqual(twin.depth, 2)

    def test_copy_protocol(self):
        tree = self.make_tree(2, ["a", "b", "c", "d"])
        for twin in (copy.copy(tree), copy.deepcopy(tree)):
            twin.set_leaf(1, "z")
            self.assertEqual(tree.offset_digest(1), "a")

    def test_clone_keeps_algorithm(self):
        tree = DenseMerkleTree(1, algorithm="sha256")
        self.assertEqual(tree.clone().algorithm, "sha256")


class TestRender(unittest.TestCase):

    def test_golden_depth_one(self):
        tree = DenseMerkleTree(1)
        tree.set_all_leaves(["a", "b"])
        expected = "".join(line + "\n" for line in [
            f"ID: 1 Parent: - Left Child: 2 Right Child: 3 Hash: {md5_hex('a.b')}",
            "ID: 2 Parent: 1 Left Child: - Right Child: - Hash: a",
            "ID: 3 Parent: 1 Left Child: - Right Child: - Hash: b",
        ])
        self.assertEqual(tree.render(), expected)
        self.assertEqual(str(tree), expected)

    def test_clean_tree_placeholders(self):
        text = DenseMerkleTree(2).render()
        self.assertTrue(text.endswith("Hash: -\n"))
        lines = text.splitlines()
        self.assertEqual(len(lines), 7)
        self.assertEqual(lines[0], "ID: 1 Parent: - Left Child: 2 Right Child: 3 Hash: -")
        self.assertEqual(lines[2], "ID: 3 Parent: 1 Left Child: 6 Right Child: 7 Hash: -")
        self.assertEqual(lines[6], "ID: 7 Parent: 3 Left Child: - Right Child: - Hash: -")

    def test_render_nodes_empty(self):
        self.assertEqual(render_nodes(1, []), "Empty Tree")

    def test_print_pretty(self):
        tree = DenseMerkleTree(2)
        tree.set_all_leaves(["a", "b", "c", "d"])
        text = print_pretty(tree, width=6)
        self.assertTrue(text.startswith("DenseMerkleTree(depth=2)"))
        self.assertIn("Level 1", text)
        self.assertIn(md5_hex("a.b")[:3] + "...", text)
        with self.assertRaises(TypeError):
            print_pretty("not a tree")

    def test_print_pretty_rejects_narrow_width(self):
        tree = DenseMerkleTree(1)
        tree.set_all_leaves(["abcdefgh", "b"])
        self.assertIn("a...", print_pretty(tree, width=4))
        for width in (0, 2, 3):
            with self.subTest(width=width):
                with self.assertRaises(ValueError):
                    print_pretty(tree, width=width)


if __name__ == "__main__":
    unittest.main()
