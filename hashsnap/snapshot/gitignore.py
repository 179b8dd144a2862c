"""Gitignore-aware filtering for snapshot walks.

Rather than re-implementing gitignore semantics, git itself is asked which
untracked paths under the walk root are ignored. Outside a git work tree, or
without a git binary, nothing is ignored.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path, PurePath

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GitIgnoreMatcher:
    """Ignored paths under one walk root, stored relative to that root."""

    root: Path
    ignored_files: frozenset[PurePath]
    ignored_dirs: frozenset[PurePath]

    def is_ignored(self, rel: PurePath) -> bool:
        """Return whether *rel* (relative to the root) or an ancestor is ignored."""
        if rel in self.ignored_files:
            return True
        current = rel
        while current.parts:
            if current in self.ignored_dirs:
                return True
            current = current.parent
        return False


def _git(args: list[str], cwd: Path) -> bytes | None:
    try:
        proc = subprocess.run(
            ["git", "-C", str(cwd), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return proc.stdout


def load_gitignore_matcher(root: Path) -> GitIgnoreMatcher | None:
    """Build a matcher for *root*, or None when git cannot answer.

    Only paths strictly below *root* are tracked, even when the repository
    starts higher up.
    """
    if shutil.which("git") is None:
        logger.debug("git not found, .gitignore rules not applied")
        return None

    root = root.resolve()
    top = _git(["rev-parse", "--show-toplevel"], root)
    if not top or not top.strip():
        return None
    repo_root = Path(top.decode("utf-8", errors="replace").strip()).resolve()
    if not root.is_relative_to(repo_root):
        return None

    listing = _git(
        ["ls-files", "-z", "--others", "--ignored", "--exclude-standard", "--directory"],
        repo_root,
    )
    if listing is None:
        return None

    ignored_files: set[PurePath] = set()
    ignored_dirs: set[PurePath] = set()
    for raw in listing.split(b"\x00"):
        if not raw:
            continue
        entry = raw.decode("utf-8", errors="surrogateescape")
        is_dir = entry.endswith("/")
        abs_path = repo_root / entry.rstrip("/")
        if abs_path == root or not abs_path.is_relative_to(root):
            continue
        rel = PurePath(abs_path.relative_to(root))
        if is_dir or abs_path.is_dir():
            ignored_dirs.add(rel)
        else:
            ignored_files.add(rel)

    logger.debug(
        "git ignores %d files and %d directories under %s",
        len(ignored_files),
        len(ignored_dirs),
        root,
    )
    return GitIgnoreMatcher(
        root=root,
        ignored_files=frozenset(ignored_files),
        ignored_dirs=frozenset(ignored_dirs),
    )
