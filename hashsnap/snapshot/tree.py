"""Path trie holding a directory snapshot.

Every regular file becomes a ``Leaf`` carrying its digest; every directory
becomes a ``Directory`` wrapping a nested ``Contents`` mapping. Entries can
arrive in any order, so intermediate directories are created on demand.

Merge rules when a key is already occupied:

* deeper path, key holds a ``Directory``: descend into it, keeping its entries
* deeper path, key holds a ``Leaf``: replace the leaf with a fresh directory chain
* terminal directory marker: never overwrites an existing entry
* terminal leaf: always overwrites, including a whole subtree
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import PurePath

from hashsnap.snapshot.digest import FileDigest

PathLike = str | PurePath | Sequence[str]

_SEPARATORS = tuple(sep for sep in (os.sep, os.altsep) if sep)


@dataclass(frozen=True)
class Leaf:
    digest: FileDigest


@dataclass
class Directory:
    contents: Contents = field(default_factory=lambda: Contents())


TreeNode = Leaf | Directory


def split_path(path: PathLike) -> tuple[str, ...]:
    """Normalize *path* into a tuple of single components.

    Strings and PurePaths are split on the platform separator and ``.``
    parts are dropped. Absolute paths and ``..`` are rejected.
    """
    if isinstance(path, (str, PurePath)):
        pure = PurePath(path)
        if pure.anchor:
            raise ValueError(f"path must be relative, got {str(path)!r}")
        parts = tuple(p for p in pure.parts if p != ".")
    else:
        parts = tuple(path)
    for part in parts:
        _check_component(part)
    return parts


def _check_component(part: str) -> None:
    if not isinstance(part, str) or not part:
        raise ValueError(f"invalid path component {part!r}")
    if part in (".", ".."):
        raise ValueError(f"path component may not be {part!r}")
    if any(sep in part for sep in _SEPARATORS):
        raise ValueError(f"path component contains a separator: {part!r}")


def _chain(parts: tuple[str, ...], node: TreeNode) -> Directory:
    """Build fresh nested directories along *parts*, ending in *node*."""
    for name in reversed(parts):
        node = Directory(Contents({name: node}))
    return node


@dataclass
class Contents:
    """Mapping from entry name to TreeNode for one directory level."""

    items: dict[str, TreeNode] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def add_file(self, path: PathLike, digest: FileDigest) -> None:
        """Insert a leaf at *path*, replacing whatever was there."""
        self._add_item(split_path(path), Leaf(digest))

    def add_dir(self, path: PathLike) -> None:
        """Insert an empty directory at *path* unless the name is already taken."""
        self._add_item(split_path(path), Directory())

    def _add_item(self, parts: tuple[str, ...], node: TreeNode) -> None:
        if not parts:
            return
        key, rest = parts[0], parts[1:]
        if rest:
            existing = self.items.get(key)
            if isinstance(existing, Directory):
                existing.contents._add_item(rest, node)
            else:
                self.items[key] = _chain(rest, node)
            return
        if isinstance(node, Directory) and key in self.items:
            return
        self.items[key] = node

    # ------------------------------------------------------------------
    # Read-only access
    # ------------------------------------------------------------------

    def get(self, path: PathLike) -> TreeNode | None:
        """Return the node at *path*, or None if nothing is there."""
        parts = split_path(path)
        if not parts:
            return Directory(self)
        current = self
        for part in parts[:-1]:
            node = current.items.get(part)
            if not isinstance(node, Directory):
                return None
            current = node.contents
        return current.items.get(parts[-1])

    def __contains__(self, path: PathLike) -> bool:
        try:
            return self.get(path) is not None
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.items)

    def walk(self, prefix: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], TreeNode]]:
        """Yield ``(components, node)`` depth-first, children in name order."""
        for name in sorted(self.items):
            node = self.items[name]
            path = prefix + (name,)
            yield path, node
            if isinstance(node, Directory):
                yield from node.contents.walk(path)

    def file_count(self) -> int:
        return sum(1 for _, node in self.walk() if isinstance(node, Leaf))

    def dir_count(self) -> int:
        return sum(1 for _, node in self.walk() if isinstance(node, Directory))
