"""Tests for the snapshot path trie (Contents.add_file / add_dir)."""

from __future__ import annotations

import os
from pathlib import PurePosixPath

import pytest

from hashsnap.snapshot import Contents, Directory, FileDigest, Leaf


def _dir(**items) -> Directory:
    return Directory(Contents(dict(items)))


# ── Basic insertion ──────────────────────────────────────────────────


def test_empty_path_is_noop(digest_a):
    root = Contents()
    root.add_file([], digest_a)
    root.add_dir(())
    root.add_file("", digest_a)
    assert root == Contents()


def test_single_file(digest_a):
    root = Contents()
    root.add_file(["a"], digest_a)
    assert root.items == {"a": Leaf(digest_a)}


def test_deep_path_materializes_directories(digest_a):
    """Missing intermediate components become fresh directories."""
    root = Contents()
    root.add_file(["a", "b", "c"], digest_a)
    assert root.items == {"a": _dir(b=_dir(c=Leaf(digest_a)))}


def test_deep_dir_marker_materializes_directories():
    root = Contents()
    root.add_dir(["a", "b"])
    assert root.items == {"a": _dir(b=Directory())}


def test_siblings_independent(digest_a, digest_b):
    root = Contents()
    root.add_file(["a"], digest_a)
    root.add_file(["b"], digest_b)
    assert root.items == {"a": Leaf(digest_a), "b": Leaf(digest_b)}


def test_same_insert_twice_is_idempotent(digest_a):
    once = Contents()
    once.add_file(["x", "y"], digest_a)
    twice = Contents()
    twice.add_file(["x", "y"], digest_a)
    twice.add_file(["x", "y"], digest_a)
    assert once == twice


def test_files_in_same_dir_accumulate(digest_a, digest_b):
    root = Contents()
    root.add_file(["d", "one"], digest_a)
    root.add_file(["d", "two"], digest_b)
    assert root.items == {"d": _dir(one=Leaf(digest_a), two=Leaf(digest_b))}


def test_order_does_not_matter_for_disjoint_paths(digest_a, digest_b):
    forward = Contents()
    forward.add_dir(["d"])
    forward.add_file(["d", "f"], digest_a)
    forward.add_file(["g"], digest_b)
    backward = Contents()
    backward.add_file(["g"], digest_b)
    backward.add_file(["d", "f"], digest_a)
    backward.add_dir(["d"])
    assert forward == backward


# ── Merge policy ─────────────────────────────────────────────────────


def test_dir_marker_does_not_clobber_directory(digest_a):
    root = Contents()
    root.add_file(["a", "x"], digest_a)
    root.add_dir(["a"])
    assert root.get(["a", "x"]) == Leaf(digest_a)


def test_dir_marker_does_not_clobber_leaf(digest_a):
    root = Contents()
    root.add_file(["a"], digest_a)
    root.add_dir(["a"])
    assert root.items == {"a": Leaf(digest_a)}


def test_dir_marker_over_deep_content_keeps_it(digest_a):
    """Content materialized from a deep path survives a later marker for its ancestor."""
    root = Contents()
    root.add_file(["a", "b", "c"], digest_a)
    root.add_dir(["a", "b"])
    root.add_dir(["a"])
    assert root.items == {"a": _dir(b=_dir(c=Leaf(digest_a)))}


def test_leaf_replaces_directory_subtree(digest_a, digest_b):
    root = Contents()
    root.add_dir(["a", "b"])
    root.add_file(["a", "b", "x"], digest_b)
    root.add_file(["a"], digest_a)
    assert root.items == {"a": Leaf(digest_a)}


def test_leaf_replaces_leaf(digest_a, digest_b):
    root = Contents()
    root.add_file(["a"], digest_a)
    root.add_file(["a"], digest_b)
    assert root.items == {"a": Leaf(digest_b)}


def test_deep_path_through_leaf_replaces_leaf(digest_a, digest_b):
    root = Contents()
    root.add_file(["a"], digest_a)
    root.add_file(["a", "b"], digest_b)
    assert root.items == {"a": _dir(b=Leaf(digest_b))}


def test_deep_path_into_existing_directory_keeps_siblings(digest_a, digest_b):
    root = Contents()
    root.add_file(["a", "b", "c"], digest_a)
    root.add_file(["a", "b", "d"], digest_b)
    root.add_dir(["a", "e"])
    assert root.items == {
        "a": _dir(b=_dir(c=Leaf(digest_a), d=Leaf(digest_b)), e=Directory())
    }


# ── Path forms ───────────────────────────────────────────────────────


def test_string_and_purepath_are_split(digest_a):
    by_parts = Contents()
    by_parts.add_file(["a", "b"], digest_a)
    by_str = Contents()
    by_str.add_file("a/b", digest_a)
    by_pure = Contents()
    by_pure.add_file(PurePosixPath("./a/b"), digest_a)
    assert by_parts == by_str == by_pure


@pytest.mark.parametrize("bad", [["a/b"], ["a", ""], [".."], ["a", "."]])
def test_invalid_components_rejected(digest_a, bad):
    with pytest.raises(ValueError):
        Contents().add_file(bad, digest_a)


@pytest.mark.skipif(os.sep == "\\", reason="backslash is a separator on Windows")
def test_backslash_is_an_ordinary_character(digest_a):
    """On POSIX a backslash is a legal filename character, not a separator."""
    root = Contents()
    root.add_file(["a\\b.txt"], digest_a)
    assert sorted(root) == ["a\\b.txt"]
    assert root.get(["a\\b.txt"]) == Leaf(digest_a)


def test_absolute_path_rejected(digest_a):
    with pytest.raises(ValueError, match="relative"):
        Contents().add_file("/etc/passwd", digest_a)


# ── Read access ──────────────────────────────────────────────────────


def test_get_and_contains(digest_a):
    root = Contents()
    root.add_file(["a", "b"], digest_a)
    assert root.get(["a", "b"]) == Leaf(digest_a)
    assert root.get(["a", "missing"]) is None
    assert root.get(["a", "b", "c"]) is None
    assert "a/b" in root
    assert "nope" not in root


def test_walk_and_counts(digest_a, digest_b):
    root = Contents()
    root.add_file(["z"], digest_a)
    root.add_file(["a", "b"], digest_b)
    root.add_dir(["a", "c"])
    paths = [p for p, _ in root.walk()]
    assert paths == [("a",), ("a", "b"), ("a", "c"), ("z",)]
    assert root.file_count() == 2
    assert root.dir_count() == 2
    assert len(root) == 2
    assert sorted(root) == ["a", "z"]


def test_digest_equality_drives_tree_equality():
    left = Contents()
    left.add_file(["f"], FileDigest(b"\x01"))
    right = Contents()
    right.add_file(["f"], FileDigest(b"\x02"))
    assert left != right
