"""Walk a directory on disk and feed every entry into a snapshot tree."""

from __future__ import annotations

import fnmatch
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from hashsnap.config.models import SnapshotConfig
from hashsnap.snapshot.digest import FileDigest, StreamingHasher
from hashsnap.snapshot.gitignore import GitIgnoreMatcher, load_gitignore_matcher
from hashsnap.snapshot.tree import Contents

logger = logging.getLogger(__name__)


@dataclass
class ScanError:
    """A path that was skipped because it could not be hashed."""

    path: str
    message: str


@dataclass
class SnapshotResult:
    """Output of one walk: the tree plus anything that had to be skipped."""

    contents: Contents
    root: str
    algorithm: str
    errors: list[ScanError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _matches_any(name: str, patterns: list[str]) -> bool:
    """Check whether *name* equals or glob-matches one of *patterns*."""
    return any(name == pat or fnmatch.fnmatchcase(name, pat) for pat in patterns)


def _should_skip(
    rel: Path,
    entry: Path,
    config: SnapshotConfig,
    gitignore: GitIgnoreMatcher | None,
) -> bool:
    # Ancestors were already checked before the walk descended into them.
    if _matches_any(rel.name, config.ignore_patterns):
        return True
    if not config.include_hidden and rel.name.startswith("."):
        return True
    if gitignore is not None and gitignore.is_ignored(rel):
        logger.debug("Skipping gitignored %s", rel)
        return True
    if not config.follow_symlinks and entry.is_symlink():
        logger.debug("Skipping symlink %s", rel)
        return True
    return False


def build_snapshot(root: Path, config: SnapshotConfig | None = None) -> SnapshotResult:
    """Walk *root* and build a snapshot of everything beneath it.

    Directories are recorded even when empty. Ignored directories are pruned
    and never listed. Files or directories that cannot be read are left out
    of the tree and reported on ``SnapshotResult.errors``; they never abort
    the walk.
    """
    config = config or SnapshotConfig()
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"No such directory: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")
    root = root.resolve()

    hasher = StreamingHasher(config.algorithm)
    result = SnapshotResult(contents=Contents(), root=str(root), algorithm=config.algorithm)
    gitignore = load_gitignore_matcher(root) if config.respect_gitignore else None

    def _report(rel: Path, error: OSError) -> None:
        logger.warning("Skipping %s: %s", rel, error)
        result.errors.append(ScanError(path=rel.as_posix(), message=str(error)))

    def _on_walk_error(error: OSError) -> None:
        failed = Path(error.filename) if error.filename else root
        _report(failed.relative_to(root), error)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
        base = Path(dirpath)
        rel_base = base.relative_to(root)

        kept: list[str] = []
        for name in dirnames:
            rel = rel_base / name
            if _should_skip(rel, base / name, config, gitignore):
                continue
            result.contents.add_dir(rel.parts)
            kept.append(name)
        dirnames[:] = kept

        for name in filenames:
            rel = rel_base / name
            entry = base / name
            if _should_skip(rel, entry, config, gitignore):
                continue
            if not entry.is_file() and entry.exists():
                logger.debug("Skipping special file %s", rel)
                continue
            try:
                digest = FileDigest.from_file(entry, hasher, config.chunk_size)
            except OSError as e:
                _report(rel, e)
                continue
            result.contents.add_file(rel.parts, digest)

    logger.info(
        "Snapshot of %s: %d files, %d directories, %d errors",
        root,
        result.contents.file_count(),
        result.contents.dir_count(),
        len(result.errors),
    )
    return result
