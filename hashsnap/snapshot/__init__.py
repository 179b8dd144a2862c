"""Content-addressed directory snapshots."""

from hashsnap.snapshot.codec import (
    SnapshotDecodeError,
    decode_contents,
    decode_node,
    dumps,
    encode_contents,
    encode_node,
    load,
    loads,
    save,
)
from hashsnap.snapshot.digest import (
    DigestDecodeError,
    FileDigest,
    StreamingHasher,
    compute_file_digest,
)
from hashsnap.snapshot.tree import Contents, Directory, Leaf, TreeNode
from hashsnap.snapshot.walker import ScanError, SnapshotResult, build_snapshot

__all__ = [
    "Contents",
    "DigestDecodeError",
    "Directory",
    "FileDigest",
    "Leaf",
    "ScanError",
    "SnapshotDecodeError",
    "SnapshotResult",
    "StreamingHasher",
    "TreeNode",
    "build_snapshot",
    "compute_file_digest",
    "decode_contents",
    "decode_node",
    "dumps",
    "encode_contents",
    "encode_node",
    "load",
    "loads",
    "save",
]
