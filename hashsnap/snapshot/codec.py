"""Untagged serialization of snapshot trees.

A leaf is written as its bare hex digest and a directory as a mapping of
entry name to child, with no field saying which is which. Decoding goes by
shape: a value is first tried as a hex-string scalar, then as a mapping,
and anything else is rejected. YAML and JSON both keep scalars and
mappings distinct, so the order never has to break a tie.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml

from hashsnap.snapshot.digest import DigestDecodeError, FileDigest
from hashsnap.snapshot.tree import Contents, Directory, Leaf, TreeNode, _check_component

Format = Literal["yaml", "json"]


class SnapshotDecodeError(ValueError):
    """Raised when a document does not describe a valid snapshot tree."""

    def __init__(self, message: str, path: tuple[str, ...] = ()) -> None:
        self.path = path
        where = "/".join(path) or "<root>"
        super().__init__(f"{where}: {message}")


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------


def encode_node(node: TreeNode) -> str | dict[str, Any]:
    if isinstance(node, Leaf):
        return node.digest.to_hex()
    return encode_contents(node.contents)


def encode_contents(contents: Contents) -> dict[str, Any]:
    return {name: encode_node(contents.items[name]) for name in sorted(contents.items)}


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------


def decode_node(value: object, path: tuple[str, ...] = ()) -> TreeNode:
    """Rebuild a TreeNode from a plain value, hex scalar first, then mapping."""
    scalar_error: DigestDecodeError | None = None
    try:
        return Leaf(FileDigest.from_hex(value))
    except DigestDecodeError as e:
        scalar_error = e

    if isinstance(value, Mapping):
        return Directory(decode_contents(value, path))

    if isinstance(value, str):
        raise SnapshotDecodeError(scalar_error.reason, path) from scalar_error
    raise SnapshotDecodeError(
        f"expected a hex digest or a mapping, got {type(value).__name__}", path
    ) from scalar_error


def decode_contents(value: object, path: tuple[str, ...] = ()) -> Contents:
    """Rebuild a Contents mapping; the value must itself be a mapping."""
    if not isinstance(value, Mapping):
        raise SnapshotDecodeError(
            f"expected a mapping, got {type(value).__name__}", path
        )
    contents = Contents()
    for name, child in value.items():
        if not isinstance(name, str):
            raise SnapshotDecodeError(f"entry name must be a string, got {name!r}", path)
        try:
            _check_component(name)
        except ValueError as e:
            raise SnapshotDecodeError(str(e), path) from e
        contents.items[name] = decode_node(child, path + (name,))
    return contents


# ----------------------------------------------------------------------
# Text documents
# ----------------------------------------------------------------------


def dumps(contents: Contents, fmt: Format = "yaml") -> str:
    """Render *contents* as a YAML or JSON document."""
    data = encode_contents(contents)
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=True)
    raise ValueError(f"Unknown format '{fmt}': expected 'yaml' or 'json'")


def loads(text: str, fmt: Format = "yaml") -> Contents:
    """Parse a YAML or JSON document back into Contents."""
    try:
        if fmt == "json":
            data = json.loads(text)
        elif fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            raise ValueError(f"Unknown format '{fmt}': expected 'yaml' or 'json'")
    except json.JSONDecodeError as e:
        raise SnapshotDecodeError(f"invalid JSON: {e}") from e
    except yaml.YAMLError as e:
        raise SnapshotDecodeError(f"invalid YAML: {e}") from e
    if data is None:
        return Contents()
    return decode_contents(data)


def format_for(path: Path) -> Format:
    """Pick a document format from a file suffix; YAML unless ``.json``."""
    return "json" if path.suffix.lower() == ".json" else "yaml"


def save(contents: Contents, path: Path, fmt: Format | None = None) -> None:
    """Write *contents* to *path*."""
    path.write_text(dumps(contents, fmt or format_for(path)), encoding="utf-8")


def load(path: Path, fmt: Format | None = None) -> Contents:
    """Read a snapshot document from *path*."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SnapshotDecodeError(f"not UTF-8 text: {e.reason}") from e
    return loads(text, fmt or format_for(path))
