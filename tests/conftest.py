"""Shared test fixtures for hashsnap."""

import shutil
import subprocess
from pathlib import Path

import pytest

from hashsnap.config.models import HashsnapConfig, SnapshotConfig
from hashsnap.snapshot import FileDigest


@pytest.fixture
def sample_config():
    return HashsnapConfig()


@pytest.fixture
def sha256_config():
    return SnapshotConfig(algorithm="sha256")


@pytest.fixture
def digest_a():
    return FileDigest(bytes(range(32)))


@pytest.fixture
def digest_b():
    return FileDigest(b"\xff" * 32)


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """A small tree with nested dirs, an empty dir and a hidden dir."""
    root = tmp_path / "project"
    (root / "src" / "pkg").mkdir(parents=True)
    (root / "src" / "main.py").write_text("print('hi')")
    (root / "src" / "pkg" / "util.py").write_text("def helper(): pass")
    (root / "README.md").write_text("# Readme")
    (root / "empty").mkdir()
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main")
    return root


@pytest.fixture
def git_project(tmp_path: Path) -> Path:
    """A git work tree whose .gitignore excludes ``*.log`` and ``build/``."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    root = tmp_path / "repo"
    root.mkdir()
    subprocess.run(["git", "init", "-q", str(root)], check=True)
    (root / ".gitignore").write_text("*.log\nbuild/\n")
    (root / "keep.txt").write_text("kept")
    (root / "debug.log").write_text("noise")
    (root / "build" / "out").mkdir(parents=True)
    (root / "build" / "out" / "artifact.bin").write_bytes(b"\x00" * 8)
    (root / "src").mkdir()
    (root / "src" / "app.py").write_text("x = 1")
    (root / "src" / "trace.log").write_text("noise")
    return root
