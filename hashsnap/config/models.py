from pydantic import BaseModel, Field
from typing import Literal


class SnapshotConfig(BaseModel):
    algorithm: Literal["blake3", "sha256", "sha384", "sha512", "sha3_256", "blake2b"] = "blake3"
    chunk_size: int = Field(default=64 * 1024, gt=0)
    ignore_patterns: list[str] = Field(default_factory=lambda: [
        ".git", "node_modules", "__pycache__", ".venv", ".tox"
    ])
    include_hidden: bool = False
    follow_symlinks: bool = False
    respect_gitignore: bool = True


class OutputConfig(BaseModel):
    format: Literal["yaml", "json"] = "yaml"


class HashsnapConfig(BaseModel):
    snapshot: SnapshotConfig = Field(default_factory=SnapshotConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "warn"
    log_format: Literal["text", "json"] = "text"
