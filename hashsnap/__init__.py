"""hashsnap - content-addressed snapshots of directory trees."""

from hashsnap.config import HashsnapConfig, load_config
from hashsnap.snapshot import Contents, FileDigest, build_snapshot

__version__ = "0.1.0"

__all__ = [
    "Contents",
    "FileDigest",
    "HashsnapConfig",
    "build_snapshot",
    "load_config",
]
