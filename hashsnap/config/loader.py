"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import HashsnapConfig

CONFIG_ENV_VAR = "HASHSNAP_CONFIG"
PROJECT_CONFIG = "hashsnap.yaml"


def _candidate_paths(cli_path: str | None) -> list[Path]:
    """Config files in priority order: CLI, $HASHSNAP_CONFIG, project, user."""
    candidates = [cli_path, os.environ.get(CONFIG_ENV_VAR)]
    paths = [Path(c) for c in candidates if c]
    paths.append(Path(".") / PROJECT_CONFIG)
    paths.append(Path.home() / ".hashsnap" / "config.yaml")
    return paths


def load_config(cli_path: str | None = None) -> HashsnapConfig:
    """Return the first config file found, or defaults when there is none.

    An explicitly requested file (``--config``) that does not exist is an
    error rather than a silent fallback.
    """
    if cli_path and not Path(cli_path).is_file():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in _candidate_paths(cli_path):
        if not path.is_file():
            continue
        try:
            raw = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if raw is None:
            continue
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid config in {path}: top level must be a mapping")
        try:
            return HashsnapConfig(**_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e

    return HashsnapConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `hashsnap config init`
DEFAULT_CONFIG_TEMPLATE = """\
# hashsnap.yaml

# Snapshot
snapshot:
  algorithm: "blake3"          # blake3 | sha256 | sha384 | sha512 | sha3_256 | blake2b
  chunk_size: 65536            # bytes read per chunk while hashing
  ignore_patterns: [".git", "node_modules", "__pycache__", ".venv", ".tox"]
  include_hidden: false
  follow_symlinks: false
  respect_gitignore: true       # skip paths git ignores when scanning inside a repository

# Output
output:
  format: "yaml"               # yaml | json

# Logging
log_level: "warn"              # debug | info | warn | error
log_format: "text"             # text | json
"""
